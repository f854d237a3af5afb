import logging
import os

import streamlit as st

from noteflow_api.moods import MOOD_KEYS, MOODS, normalize_mood
from noteflow_ui import auth
from noteflow_ui.constants import APP_TITLE
from noteflow_ui.context import WorkspaceContext
from noteflow_ui.data import api_client
from noteflow_ui.data.repositories import (
    CloudTaskStore,
    GuestFile,
    GuestTaskStore,
    load_preferences,
    save_preferences,
)
from noteflow_ui.header import render_global_header
from noteflow_ui.router import render_router
from noteflow_ui.state import session_slices
from noteflow_ui.theme import THEME_PRESETS, get_active_theme, inject_theme_css, set_theme

logging.basicConfig(
    level=os.getenv("NOTEFLOW_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
for noisy in ("urllib3", "requests"):
    logging.getLogger(noisy).setLevel(logging.WARNING)
logger = logging.getLogger("noteflow_ui.app")

st.set_page_config(page_title=APP_TITLE, page_icon="🎭", layout="wide")

auth.load_local_env()
api_client.configure(auth.get_secret, auth.get_session_token)

guest_file = GuestFile()
mode = auth.enforce_entry(guest_file)
signed_in = mode == "cloud"
owner = auth.current_profile().get("id") if signed_in else "guest"


def _queue_sync_warning(title, description):
    st.session_state["tasks.sync_warning"] = f"{title}. {description}"


# --- SESSION STATE ---
if "tasks.store" not in st.session_state or st.session_state.get("tasks.store_owner") != owner:
    if signed_in:
        store = CloudTaskStore(warn=_queue_sync_warning, fallback_file=guest_file)
    else:
        store = GuestTaskStore(guest_file)
    store.load()
    st.session_state["tasks.store"] = store
    st.session_state["tasks.store_owner"] = owner
    st.session_state["prefs"] = load_preferences(guest_file, signed_in)
    set_theme(st.session_state["prefs"].get("theme") or "light")
    logger.info("Workspace loaded for %s (%s tasks)", owner, len(store.tasks))

store = st.session_state["tasks.store"]
prefs = st.session_state["prefs"]
mood = normalize_mood(prefs.get("current_mood"))


# --- SIDEBAR ---
with st.sidebar:
    st.markdown(f"<div class='section-title'>{APP_TITLE}</div>", unsafe_allow_html=True)
    selected_mood = st.selectbox(
        "How are you feeling?",
        MOOD_KEYS,
        index=MOOD_KEYS.index(mood),
        format_func=lambda key: MOODS[key]["label"],
        key="sidebar.mood",
    )
    if selected_mood != mood:
        prefs["current_mood"] = selected_mood
        save_preferences({"current_mood": selected_mood}, guest_file, signed_in)
        session_slices.reset("header")
        st.rerun()

    active_theme, _ = get_active_theme()
    dark = st.toggle("Dark theme", value=active_theme == "dark", key="sidebar.dark")
    theme_name = "dark" if dark else "light"
    if theme_name != active_theme and theme_name in THEME_PRESETS:
        set_theme(theme_name)
        prefs["theme"] = theme_name
        save_preferences({"theme": theme_name}, guest_file, signed_in)
        st.rerun()
    st.toggle("Compact quotes", key="ui.compact")
    st.divider()
    auth.render_account_panel(guest_file, mode)


inject_theme_css(mood)

profile = auth.current_profile()
user_name = (profile.get("display_name") or profile.get("email", "").split("@")[0]) if signed_in else "there"

context = WorkspaceContext(
    {
        "mood": mood,
        "user_name": user_name,
        "signed_in": signed_in,
        "store": store,
        "guest_file": guest_file,
        "guest_tasks": guest_file.get("tasks", []) if signed_in else [],
        "settings": prefs,
        "sync_warning": st.session_state.pop("tasks.sync_warning", None),
    }
)

render_global_header(context)
render_router(context)
