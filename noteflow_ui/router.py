import streamlit as st

from noteflow_ui.tabs.assistant_tab import render_assistant_tab
from noteflow_ui.tabs.documents_tab import render_documents_tab
from noteflow_ui.tabs.focus_tab import render_focus_tab
from noteflow_ui.tabs.insights_tab import render_insights_tab
from noteflow_ui.tabs.music_tab import render_music_tab
from noteflow_ui.tabs.pomodoro_tab import render_pomodoro_tab
from noteflow_ui.tabs.tasks_tab import render_tasks_tab


TAB_OPTIONS = [
    "Tasks",
    "Focus",
    "Pomodoro",
    "Music",
    "Documents",
    "Assistant",
    "Insights",
]

TAB_RENDERERS = {
    "Tasks": render_tasks_tab,
    "Focus": render_focus_tab,
    "Pomodoro": render_pomodoro_tab,
    "Music": render_music_tab,
    "Documents": render_documents_tab,
    "Assistant": render_assistant_tab,
    "Insights": render_insights_tab,
}


def render_router(ctx):
    if st.session_state.get("ui.active_tab") not in TAB_OPTIONS:
        st.session_state["ui.active_tab"] = TAB_OPTIONS[0]
    active = st.segmented_control("Workspace", TAB_OPTIONS, key="ui.active_tab")
    renderer = TAB_RENDERERS.get(active or TAB_OPTIONS[0], render_tasks_tab)
    return renderer(ctx)
