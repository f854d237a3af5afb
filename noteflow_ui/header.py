from datetime import datetime

import streamlit as st

from noteflow_api.moods import MOODS, mood_quote, time_greeting
from noteflow_ui.state import session_slices


def _quote_for(mood, compact):
    cached = session_slices.get_value("header", "quote")
    if not cached or cached[0] != (mood, compact):
        cached = ((mood, compact), mood_quote(mood, compact=compact))
        session_slices.set_value("header", "quote", cached)
    return cached[1]


@st.fragment(run_every=30)
def _render_clock(user_name):
    now = datetime.now()
    st.markdown(
        f"<div class='page-title'>{time_greeting(now.hour)}, {user_name}</div>"
        f"<div class='small-label'>{now.strftime('%A, %B %d')} • {now.strftime('%H:%M')}</div>",
        unsafe_allow_html=True,
    )


def render_global_header(ctx):
    mood = ctx.mood
    mood_data = MOODS[mood]
    compact = bool(st.session_state.get("ui.compact", False))

    cols = st.columns([1.4, 1])
    with cols[0]:
        _render_clock(ctx.get("user_name") or "there")
        st.caption(f"{mood_data['label']} • {mood_data['description']}")
    with cols[1]:
        st.markdown(f"<div class='quote-card'>“{_quote_for(mood, compact)}”</div>", unsafe_allow_html=True)
        if st.button("New quote", key="header.new_quote"):
            session_slices.set_value("header", "quote", None)
            st.rerun()

    if ctx.get("sync_warning"):
        st.warning(ctx.get("sync_warning"))
