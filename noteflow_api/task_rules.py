from __future__ import annotations

import re
from datetime import date, timedelta

CATEGORIES = ["personal", "work", "study", "other"]
DEFAULT_CATEGORY = "personal"

SUBTASK_STATUSES = ["todo", "inProgress", "done"]

CATEGORY_COLORS = {
    "work": "#3B82F6",
    "study": "#22C55E",
    "personal": "#A855F7",
    "other": "#6B7280",
}

_SUGGESTION_PREFIX = re.compile(r"^(\d+[.)]\s|-\s|\*\s)")


def normalize_category(value) -> str:
    if value in CATEGORIES:
        return value
    return DEFAULT_CATEGORY


def normalize_status(value, completed: bool = False) -> str:
    if value in SUBTASK_STATUSES:
        return value
    return "done" if completed else "todo"


def clean_text(value, field: str = "Task") -> str:
    text = " ".join(str(value or "").split()).strip()
    if not text:
        raise ValueError(f"{field} text cannot be empty")
    return text


def parse_due_date(value) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def task_progress(task: dict) -> float:
    sub_tasks = task.get("sub_tasks") or []
    if not sub_tasks:
        return 0.0
    done = sum(1 for item in sub_tasks if item.get("completed"))
    return done / len(sub_tasks) * 100


def sub_task_counts(task: dict) -> tuple[int, int]:
    sub_tasks = task.get("sub_tasks") or []
    return sum(1 for item in sub_tasks if item.get("completed")), len(sub_tasks)


def is_overdue(due_date, today: date | None = None) -> bool:
    due = parse_due_date(due_date)
    if due is None:
        return False
    return due < (today or date.today())


def format_due_date(due_date, today: date | None = None) -> str:
    due = parse_due_date(due_date)
    if due is None:
        return ""
    today = today or date.today()
    if due == today:
        return "Today"
    if due == today + timedelta(days=1):
        return "Tomorrow"
    if due < today + timedelta(days=7):
        return due.strftime("%A")
    return f"{due.strftime('%b')} {due.day}, {due.year}"


def due_date_tone(due_date, today: date | None = None) -> str:
    due = parse_due_date(due_date)
    if due is None:
        return ""
    today = today or date.today()
    if due < today:
        return "overdue"
    if due == today:
        return "today"
    if due == today + timedelta(days=1):
        return "tomorrow"
    return "later"


def toggle_sub_task(sub_task: dict) -> dict:
    completed = not bool(sub_task.get("completed"))
    return {**sub_task, "completed": completed, "status": "done" if completed else "todo"}


def extract_suggested_sub_tasks(response: str) -> list[str]:
    """Pull numbered or bulleted lines out of an assistant "break down" answer."""
    suggestions = []
    for line in str(response or "").split("\n"):
        stripped = line.strip()
        if not _SUGGESTION_PREFIX.match(stripped):
            continue
        text = _SUGGESTION_PREFIX.sub("", stripped, count=1).strip()
        if text:
            suggestions.append(text)
    return suggestions
