from datetime import date

import pytest

from noteflow_api import task_rules

TODAY = date(2026, 3, 11)


def test_clean_text_collapses_whitespace():
    assert task_rules.clean_text("  Buy   milk \n") == "Buy milk"
    with pytest.raises(ValueError, match="Sub-task text cannot be empty"):
        task_rules.clean_text("   ", field="Sub-task")


def test_normalizers():
    assert task_rules.normalize_category("study") == "study"
    assert task_rules.normalize_category("chores") == "personal"
    assert task_rules.normalize_status("inProgress") == "inProgress"
    assert task_rules.normalize_status(None, completed=True) == "done"
    assert task_rules.normalize_status("bogus") == "todo"


def test_parse_due_date():
    assert task_rules.parse_due_date("2026-03-12T10:00:00Z") == date(2026, 3, 12)
    assert task_rules.parse_due_date("") is None
    assert task_rules.parse_due_date("soon") is None


@pytest.mark.parametrize(
    "due,label,tone",
    [
        ("2026-03-11", "Today", "today"),
        ("2026-03-12", "Tomorrow", "tomorrow"),
        ("2026-03-14", "Saturday", "later"),
        ("2026-04-02", "Apr 2, 2026", "later"),
        ("2026-03-01", "Sunday", "overdue"),
        (None, "", ""),
    ],
)
def test_due_date_label_and_tone(due, label, tone):
    assert task_rules.format_due_date(due, TODAY) == label
    assert task_rules.due_date_tone(due, TODAY) == tone


def test_is_overdue():
    assert task_rules.is_overdue("2026-03-10", TODAY)
    assert not task_rules.is_overdue("2026-03-11", TODAY)
    assert not task_rules.is_overdue(None, TODAY)


def test_progress_and_counts():
    task = {"sub_tasks": [{"completed": True}, {"completed": False}, {"completed": True}, {"completed": False}]}
    assert task_rules.task_progress(task) == 50
    assert task_rules.sub_task_counts(task) == (2, 4)
    assert task_rules.task_progress({"sub_tasks": []}) == 0


def test_toggle_sub_task_keeps_status_in_sync():
    done = task_rules.toggle_sub_task({"id": "s1", "completed": False, "status": "inProgress"})
    assert done == {"id": "s1", "completed": True, "status": "done"}
    assert task_rules.toggle_sub_task(done)["status"] == "todo"


def test_extract_suggested_sub_tasks():
    reply = "Sure!\n\n1. Read the brief\n2) Sketch ideas\n- Pick one\n* Polish it\n**Bold** line\n3.Missing space"
    assert task_rules.extract_suggested_sub_tasks(reply) == ["Read the brief", "Sketch ideas", "Pick one", "Polish it"]
