from __future__ import annotations

import html
import logging

import streamlit as st

from noteflow_api.moods import MOODS
from noteflow_api.task_rules import (
    CATEGORIES,
    CATEGORY_COLORS,
    SUBTASK_STATUSES,
    due_date_tone,
    format_due_date,
    parse_due_date,
    sub_task_counts,
    task_progress,
)
from noteflow_ui.constants import CATEGORY_LABELS, DUE_TONE_COLORS, SUBTASK_STATUS_LABELS
from noteflow_ui.data.api_client import ApiError

logger = logging.getLogger(__name__)

FILTERS = ["All", "Active", "Completed"]


def _toggle_task(store, task_id):
    record, affirmation = store.toggle_task(task_id)
    if record["completed"] and affirmation:
        st.toast(f"Task completed! {affirmation}", icon="🎉")


def _toggle_sub_task(store, task_id, sub_task_id):
    store.toggle_sub_task(task_id, sub_task_id)


def _open_focus(task_id):
    st.session_state["focus.task_id"] = task_id
    st.session_state["ui.active_tab"] = "Focus"


def _pill(label, color):
    return f"<span class='pill' style='background:{color}'>{html.escape(label)}</span>"


def render_task_meta(task):
    pills = [_pill(CATEGORY_LABELS.get(task["category"], task["category"]), CATEGORY_COLORS.get(task["category"], "#6B7280"))]
    if task.get("priority"):
        pills.append(_pill("Priority", "#EF4444"))
    tone = due_date_tone(task.get("due_date"))
    if tone:
        pills.append(_pill(format_due_date(task.get("due_date")), DUE_TONE_COLORS[tone]))
    done, total = sub_task_counts(task)
    if total:
        pills.append(f"<span class='task-meta'>{done}/{total} sub-tasks</span>")
    st.markdown(" ".join(pills), unsafe_allow_html=True)


def render_add_task_form(store, mood):
    with st.form("tasks.add_form", clear_on_submit=True):
        text = st.text_input("New task", placeholder=MOODS[mood]["task_placeholder"], key="tasks.new_text")
        cols = st.columns([1, 1, 1])
        category = cols[0].selectbox(
            "Category", CATEGORIES, format_func=lambda value: CATEGORY_LABELS[value], key="tasks.new_category"
        )
        due_date = cols[1].date_input("Due date", value=None, key="tasks.new_due")
        priority = cols[2].checkbox("Priority", key="tasks.new_priority")
        notes = st.text_area("Notes", key="tasks.new_notes", height=68)
        submitted = st.form_submit_button("Add task")
    if submitted:
        try:
            store.add_task(
                {"text": text, "category": category, "priority": priority, "due_date": due_date, "notes": notes}
            )
            st.rerun()
        except ValueError as exc:
            st.error(str(exc))


def render_sub_tasks(store, task):
    for item in task.get("sub_tasks") or []:
        cols = st.columns([0.08, 0.55, 0.25, 0.12])
        cols[0].checkbox(
            "done",
            value=bool(item.get("completed")),
            key=f"sub.{item['id']}.done.{bool(item.get('completed'))}",
            label_visibility="collapsed",
            on_change=_toggle_sub_task,
            args=(store, task["id"], item["id"]),
        )
        label = html.escape(item["text"])
        if item.get("completed"):
            label = f"<s>{label}</s>"
        due = format_due_date(item.get("due_date"))
        cols[1].markdown(
            label + (f" <span class='task-meta'>• {due}</span>" if due else ""),
            unsafe_allow_html=True,
        )
        status = cols[2].selectbox(
            "Status",
            SUBTASK_STATUSES,
            index=SUBTASK_STATUSES.index(item.get("status") or "todo"),
            format_func=lambda value: SUBTASK_STATUS_LABELS[value],
            key=f"sub.{item['id']}.status.{item.get('status') or 'todo'}",
            label_visibility="collapsed",
        )
        if status != (item.get("status") or "todo"):
            store.update_sub_task(task["id"], item["id"], {"status": status})
            st.rerun()
        if cols[3].button("✕", key=f"sub.{item['id']}.delete", help="Delete sub-task"):
            store.delete_sub_task(task["id"], item["id"])
            st.rerun()

    with st.form(f"sub.add.{task['id']}", clear_on_submit=True):
        cols = st.columns([0.7, 0.3])
        text = cols[0].text_input("Add sub-task", key=f"sub.new.{task['id']}", label_visibility="collapsed",
                                  placeholder="Add a sub-task")
        submitted = cols[1].form_submit_button("Add")
    if submitted:
        try:
            store.add_sub_task(task["id"], {"text": text})
            st.rerun()
        except ValueError as exc:
            st.error(str(exc))


def render_task_editor(store, task):
    with st.form(f"task.edit.{task['id']}"):
        text = st.text_input("Task", value=task["text"], key=f"task.{task['id']}.text")
        cols = st.columns(3)
        category = cols[0].selectbox(
            "Category",
            CATEGORIES,
            index=CATEGORIES.index(task["category"]) if task["category"] in CATEGORIES else 0,
            format_func=lambda value: CATEGORY_LABELS[value],
            key=f"task.{task['id']}.category",
        )
        due_date = cols[1].date_input("Due date", value=parse_due_date(task.get("due_date")), key=f"task.{task['id']}.due")
        priority = cols[2].checkbox("Priority", value=bool(task.get("priority")), key=f"task.{task['id']}.priority")
        notes = st.text_area("Notes", value=task.get("notes") or "", key=f"task.{task['id']}.notes", height=68)
        saved = st.form_submit_button("Save changes")
    if saved:
        try:
            store.update_task(
                task["id"],
                {"text": text, "category": category, "due_date": due_date, "priority": priority, "notes": notes},
            )
            st.rerun()
        except ValueError as exc:
            st.error(str(exc))


def render_task(store, task):
    with st.container(border=True):
        cols = st.columns([0.06, 0.7, 0.12, 0.12])
        cols[0].checkbox(
            "complete",
            value=bool(task.get("completed")),
            key=f"task.{task['id']}.done.{bool(task.get('completed'))}",
            label_visibility="collapsed",
            on_change=_toggle_task,
            args=(store, task["id"]),
        )
        title = html.escape(task["text"])
        if task.get("completed"):
            title = f"<s>{title}</s>"
        cols[1].markdown(f"**{title}**", unsafe_allow_html=True)
        cols[2].button("Focus", key=f"task.{task['id']}.focus", on_click=_open_focus, args=(task["id"],))
        if cols[3].button("Delete", key=f"task.{task['id']}.delete"):
            store.delete_task(task["id"])
            st.toast("Task deleted.")
            st.rerun()
        render_task_meta(task)
        if task.get("sub_tasks"):
            st.progress(int(task_progress(task)))
        with st.expander("Sub-tasks & details"):
            render_sub_tasks(store, task)
            render_task_editor(store, task)


def filter_tasks(tasks, view, category):
    items = list(tasks)
    if view == "Active":
        items = [task for task in items if not task.get("completed")]
    elif view == "Completed":
        items = [task for task in items if task.get("completed")]
    if category != "all":
        items = [task for task in items if task.get("category") == category]
    return sorted(items, key=lambda task: (bool(task.get("completed")), not task.get("priority")))


def render_guest_import(ctx):
    guest_tasks = ctx.get("guest_tasks") or []
    if not ctx.signed_in or not guest_tasks:
        return
    st.info(f"You have {len(guest_tasks)} task(s) saved in guest mode.")
    if st.button("Import guest tasks", key="tasks.import_guest"):
        try:
            imported = ctx["store"].import_tasks(guest_tasks)
            ctx["guest_file"].set("tasks", [])
            st.success(f"Imported {imported} task(s).")
            st.rerun()
        except ApiError as exc:
            logger.warning("Guest import failed: %s", exc)
            st.error("Import failed. Please try again.")


def render_tasks_tab(ctx):
    store = ctx["store"]
    mood = ctx.mood

    st.markdown("<div class='section-title'>Tasks</div>", unsafe_allow_html=True)
    render_guest_import(ctx)
    render_add_task_form(store, mood)

    cols = st.columns([1, 1])
    view = cols[0].segmented_control("Show", FILTERS, default="All", key="tasks.filter") or "All"
    category = cols[1].selectbox(
        "Category",
        ["all"] + CATEGORIES,
        format_func=lambda value: "All categories" if value == "all" else CATEGORY_LABELS[value],
        key="tasks.category_filter",
    )

    if not store.tasks:
        st.markdown(f"<div class='card'>{MOODS[mood]['empty_state_message']}</div>", unsafe_allow_html=True)
        return

    items = filter_tasks(store.tasks, view, category)
    if not items:
        st.caption("No tasks match this filter.")
        return
    for task in items:
        render_task(store, task)
