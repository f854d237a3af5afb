import html

import streamlit as st

from noteflow_api.moods import MOODS
from noteflow_ui.constants import FOCUS_PROMPT_BUTTONS
from noteflow_ui.data import assistant
from noteflow_ui.state import session_slices
from noteflow_ui.tabs.pomodoro_tab import render_timer_panel
from noteflow_ui.tabs.tasks_tab import render_sub_tasks, render_task_meta


def _task_label(task):
    return task["text"] if len(task["text"]) <= 60 else task["text"][:57] + "..."


def _select_task(store):
    open_tasks = [task for task in store.tasks if not task.get("completed")]
    if not open_tasks:
        return None
    ids = [task["id"] for task in open_tasks]
    wanted = st.session_state.pop("focus.task_id", None)
    if wanted in ids:
        st.session_state["focus.selector"] = wanted
    elif st.session_state.get("focus.selector") not in ids:
        st.session_state["focus.selector"] = ids[0]
    labels = {task["id"]: _task_label(task) for task in open_tasks}
    selected = st.selectbox("Focus on", ids, format_func=labels.get, key="focus.selector")
    return store.get(selected)


def _run_assist(task, mood, prompt_type=None, prompt=None):
    with st.spinner("Thinking..."):
        result = assistant.focus_assist(task["text"], mood, prompt_type=prompt_type, prompt=prompt)
    session_slices.set_value("focus", "response", {"task_id": task["id"], **result})


def render_assist_panel(store, task, mood):
    st.markdown("<div class='section-title'>AI assist</div>", unsafe_allow_html=True)
    cols = st.columns(len(FOCUS_PROMPT_BUTTONS))
    for col, (prompt_type, label) in zip(cols, FOCUS_PROMPT_BUTTONS):
        if col.button(label, key=f"focus.prompt.{prompt_type}", use_container_width=True):
            _run_assist(task, mood, prompt_type=prompt_type)

    with st.form("focus.custom_prompt", clear_on_submit=True):
        custom = st.text_input("Ask about this task", key="focus.custom_text")
        if st.form_submit_button("Ask") and custom.strip():
            _run_assist(task, mood, prompt=custom)

    response = session_slices.get_value("focus", "response")
    if not response or response.get("task_id") != task["id"]:
        return
    with st.chat_message("assistant"):
        st.markdown(response["reply"])
        if response.get("used_fallback"):
            st.caption("Answered by a backup model.")
    suggestions = response.get("suggested_sub_tasks") or []
    if suggestions:
        st.markdown("**Suggested sub-tasks**")
        for item in suggestions:
            st.markdown(f"- {html.escape(item)}")
        if st.button("Add all as sub-tasks", key="focus.add_suggestions"):
            for item in suggestions:
                store.add_sub_task(task["id"], {"text": item})
            session_slices.set_value("focus", "response", {**response, "suggested_sub_tasks": []})
            st.toast(f"Added {len(suggestions)} sub-tasks.")
            st.rerun()


def render_notes(store, task):
    notes = st.text_area("Session notes", value=task.get("notes") or "", key=f"focus.notes.{task['id']}", height=140)
    if st.button("Save notes", key="focus.save_notes") and notes != (task.get("notes") or ""):
        store.update_task(task["id"], {"notes": notes})
        st.toast("Notes saved.")


def render_focus_tab(ctx):
    store = ctx["store"]
    mood = ctx.mood
    st.markdown("<div class='section-title'>Focus mode</div>", unsafe_allow_html=True)

    task = _select_task(store)
    if not task:
        st.markdown(f"<div class='card'>{MOODS[mood]['empty_state_message']}</div>", unsafe_allow_html=True)
        return

    left, right = st.columns([1.5, 1])
    with left:
        with st.container(border=True):
            st.markdown(f"### {html.escape(task['text'])}")
            render_task_meta(task)
            render_sub_tasks(store, task)
        render_notes(store, task)
        if st.button("Mark task complete", key="focus.complete", type="primary"):
            _, affirmation = store.toggle_task(task["id"])
            if affirmation:
                st.toast(f"Task completed! {affirmation}", icon="🎉")
            st.rerun()
    with right:
        with st.container(border=True):
            render_timer_panel(ctx, compact=True)
        render_assist_panel(store, task, mood)
