from datetime import date

from noteflow_ui.metrics import completion_by_category, open_tasks_by_due_bucket, summary, tasks_frame

TODAY = date(2026, 3, 11)

TASKS = [
    {"id": "1", "text": "a", "category": "work", "completed": True, "priority": True, "due_date": "2026-03-01",
     "sub_tasks": [{"completed": True}, {"completed": False}]},
    {"id": "2", "text": "b", "category": "work", "completed": False, "priority": True, "due_date": "2026-03-10",
     "sub_tasks": []},
    {"id": "3", "text": "c", "category": "study", "completed": False, "priority": False, "due_date": "2026-03-11",
     "sub_tasks": [{"completed": True}]},
    {"id": "4", "text": "d", "category": None, "completed": False, "priority": False, "due_date": None},
]


def test_tasks_frame_buckets():
    frame = tasks_frame(TASKS, TODAY)
    assert list(frame["due_bucket"]) == ["overdue", "overdue", "today", "no date"]
    assert list(frame["category"]) == ["work", "work", "study", "personal"]


def test_completion_by_category():
    result = completion_by_category(tasks_frame(TASKS, TODAY)).set_index("category")
    assert result.loc["work", "completed"] == 1
    assert result.loc["work", "open"] == 1
    assert result.loc["work", "rate"] == 50.0
    assert result.loc["other", "rate"] == 0.0


def test_open_tasks_by_due_bucket():
    result = open_tasks_by_due_bucket(tasks_frame(TASKS, TODAY))
    assert dict(zip(result["bucket"], result["tasks"])) == {
        "overdue": 1,
        "today": 1,
        "tomorrow": 0,
        "later": 0,
        "no date": 1,
    }


def test_summary():
    stats = summary(tasks_frame(TASKS, TODAY))
    assert stats == {
        "total": 4,
        "completed": 1,
        "rate": 25.0,
        "priority_open": 1,
        "overdue": 1,
        "sub_task_rate": round(2 / 3 * 100, 1),
    }


def test_empty_frame():
    frame = tasks_frame([])
    assert frame.empty
    assert summary(frame)["total"] == 0
    assert list(completion_by_category(frame)["completed"]) == [0, 0, 0, 0]
    assert list(open_tasks_by_due_bucket(frame)["tasks"]) == [0, 0, 0, 0, 0]
