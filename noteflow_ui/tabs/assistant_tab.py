import streamlit as st

from noteflow_api.moods import MOODS
from noteflow_ui.data import assistant
from noteflow_ui.state import session_slices


def _greeting(mood):
    return (
        f"Hi! I'm your NoteFlow assistant. You're feeling {MOODS[mood]['label'].lower()} today. "
        "How can I help you with your tasks?"
    )


def render_assistant_tab(ctx):
    mood = ctx.mood
    st.markdown("<div class='section-title'>Assistant</div>", unsafe_allow_html=True)
    history = session_slices.setdefault("assistant", "messages", list)

    if st.button("Clear conversation", key="assistant.clear", disabled=not history):
        session_slices.set_value("assistant", "messages", [])
        st.rerun()

    with st.chat_message("assistant"):
        st.markdown(_greeting(mood))
    for message in history:
        with st.chat_message(message["role"]):
            st.markdown(message["content"])
            if message.get("note"):
                st.caption(message["note"])

    prompt = st.chat_input("Ask me anything about your work...", key="assistant.input")
    if not prompt:
        return
    history.append({"role": "user", "content": prompt})
    with st.chat_message("user"):
        st.markdown(prompt)
    with st.chat_message("assistant"):
        with st.spinner("Thinking..."):
            result = assistant.ask([{"role": m["role"], "content": m["content"]} for m in history], mood)
        st.markdown(result["reply"])
        note = "Answered by a backup model." if result.get("used_fallback") else None
        if note:
            st.caption(note)
    history.append({"role": "assistant", "content": result["reply"], "note": note})
