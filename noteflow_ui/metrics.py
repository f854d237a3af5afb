from __future__ import annotations

from datetime import date

import pandas as pd

from noteflow_api.task_rules import CATEGORIES, due_date_tone, sub_task_counts

TASK_FRAME_COLUMNS = [
    "id",
    "text",
    "category",
    "completed",
    "priority",
    "due_bucket",
    "sub_tasks_done",
    "sub_tasks_total",
    "created_at",
]

DUE_BUCKETS = ["overdue", "today", "tomorrow", "later", "no date"]


def tasks_frame(tasks, today: date | None = None) -> pd.DataFrame:
    rows = []
    for task in tasks or []:
        done, total = sub_task_counts(task)
        rows.append(
            {
                "id": task.get("id"),
                "text": task.get("text"),
                "category": task.get("category") or "personal",
                "completed": bool(task.get("completed")),
                "priority": bool(task.get("priority")),
                "due_bucket": due_date_tone(task.get("due_date"), today) or "no date",
                "sub_tasks_done": done,
                "sub_tasks_total": total,
                "created_at": pd.to_datetime(task.get("created_at"), errors="coerce", utc=True),
            }
        )
    return pd.DataFrame(rows, columns=TASK_FRAME_COLUMNS)


def completion_by_category(frame: pd.DataFrame) -> pd.DataFrame:
    if frame.empty:
        return pd.DataFrame({"category": CATEGORIES, "completed": 0, "open": 0, "rate": 0.0})
    grouped = frame.groupby("category")["completed"].agg(["sum", "count"]).reindex(CATEGORIES, fill_value=0)
    result = pd.DataFrame(
        {
            "category": grouped.index,
            "completed": grouped["sum"].astype(int).values,
            "open": (grouped["count"] - grouped["sum"]).astype(int).values,
        }
    )
    totals = result["completed"] + result["open"]
    result["rate"] = (result["completed"] / totals.where(totals > 0)).fillna(0.0).mul(100).round(1)
    return result


def open_tasks_by_due_bucket(frame: pd.DataFrame) -> pd.DataFrame:
    open_tasks = frame[~frame["completed"]] if not frame.empty else frame
    counts = open_tasks["due_bucket"].value_counts() if not open_tasks.empty else pd.Series(dtype=int)
    counts = counts.reindex(DUE_BUCKETS, fill_value=0)
    return pd.DataFrame({"bucket": counts.index, "tasks": counts.astype(int).values})


def summary(frame: pd.DataFrame) -> dict:
    if frame.empty:
        return {"total": 0, "completed": 0, "rate": 0.0, "priority_open": 0, "overdue": 0, "sub_task_rate": 0.0}
    total = len(frame)
    completed = int(frame["completed"].sum())
    sub_total = int(frame["sub_tasks_total"].sum())
    sub_done = int(frame["sub_tasks_done"].sum())
    return {
        "total": total,
        "completed": completed,
        "rate": round(completed / total * 100, 1),
        "priority_open": int((frame["priority"] & ~frame["completed"]).sum()),
        "overdue": int(((frame["due_bucket"] == "overdue") & ~frame["completed"]).sum()),
        "sub_task_rate": round(sub_done / sub_total * 100, 1) if sub_total else 0.0,
    }
