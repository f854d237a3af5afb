from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from datetime import date, datetime, timezone
from uuid import uuid4

from noteflow_api import task_rules
from noteflow_api.moods import random_affirmation
from noteflow_api.repositories import DEFAULT_USER_SETTINGS
from noteflow_ui.data import api_client
from noteflow_ui.data.api_client import ApiError

logger = logging.getLogger(__name__)

DEFAULT_GUEST_STORE = os.path.join(os.path.dirname(__file__), "..", "..", ".noteflow_guest.json")

GUEST_DEFAULTS = {
    "tasks": [],
    "guest_mode": False,
    "has_visited": False,
    "settings": {},
    "liked_videos": [],
    "recent_searches": [],
}

SYNC_ERRORS = {
    "add": ("Error adding task", "There was a problem adding your task. Please try again."),
    "update": ("Error updating task", "There was a problem updating your task. Please try again."),
    "delete": ("Error deleting task", "There was a problem deleting your task. Please try again."),
    "load": ("Error loading tasks", "There was a problem loading your tasks. Please try again."),
}


def guest_store_path():
    return os.getenv("NOTEFLOW_GUEST_STORE") or os.path.abspath(DEFAULT_GUEST_STORE)


def _new_id():
    return uuid4().hex


def _now():
    return datetime.now(timezone.utc).isoformat()


def _date_value(value):
    if isinstance(value, date):
        return value.isoformat()
    parsed = task_rules.parse_due_date(value)
    return parsed.isoformat() if parsed else None


def build_task(payload: dict) -> dict:
    return {
        "id": _new_id(),
        "text": task_rules.clean_text(payload.get("text")),
        "completed": bool(payload.get("completed", False)),
        "category": task_rules.normalize_category(payload.get("category")),
        "priority": bool(payload.get("priority", False)),
        "created_at": _now(),
        "due_date": _date_value(payload.get("due_date")),
        "notes": payload.get("notes") or None,
        "sub_tasks": [build_sub_task(item) for item in payload.get("sub_tasks") or []],
    }


def _checked_text(fields: dict, field: str = "Task") -> dict:
    if "text" not in fields:
        return fields
    return {**fields, "text": task_rules.clean_text(fields["text"], field=field)}


def build_sub_task(payload: dict, task_id: str | None = None) -> dict:
    completed = bool(payload.get("completed", False))
    record = {
        "id": _new_id(),
        "text": task_rules.clean_text(payload.get("text"), field="Sub-task"),
        "completed": completed,
        "status": task_rules.normalize_status(payload.get("status"), completed),
        "created_at": _now(),
        "due_date": _date_value(payload.get("due_date")),
        "notes": payload.get("notes") or None,
    }
    if task_id:
        record["task_id"] = task_id
    return record


class GuestFile:
    """JSON document next to the app that stands in for browser local storage."""

    def __init__(self, path: str | None = None):
        self.path = path or guest_store_path()

    def read(self) -> dict:
        payload = copy.deepcopy(GUEST_DEFAULTS)
        if not os.path.exists(self.path):
            return payload
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                stored = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Guest store unreadable at %s: %s", self.path, exc)
            return payload
        if isinstance(stored, dict):
            payload.update(stored)
        return payload

    def write(self, payload: dict) -> None:
        directory = os.path.dirname(os.path.abspath(self.path)) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def get(self, key, default=None):
        return self.read().get(key, default)

    def set(self, key, value) -> None:
        payload = self.read()
        payload[key] = value
        self.write(payload)


class TaskStore:
    """In-memory task list with the local mutations shared by both stores."""

    def __init__(self, tasks=None):
        self.tasks: list[dict] = list(tasks or [])

    def _find(self, task_id):
        for task in self.tasks:
            if task["id"] == task_id:
                return task
        raise KeyError(task_id)

    def _replace(self, record: dict) -> dict:
        self.tasks = [record if task["id"] == record["id"] else task for task in self.tasks]
        return record

    def _apply_add(self, record: dict) -> dict:
        self.tasks.insert(0, record)
        return record

    def _apply_update(self, task_id, fields: dict) -> dict:
        task = dict(self._find(task_id))
        for key in ("text", "completed", "category", "priority", "due_date", "notes"):
            if key not in fields:
                continue
            value = fields[key]
            if key == "text":
                value = task_rules.clean_text(value)
            elif key == "category":
                value = task_rules.normalize_category(value)
            elif key == "due_date":
                value = _date_value(value)
            elif key in {"completed", "priority"}:
                value = bool(value)
            task[key] = value
        return self._replace(task)

    def _apply_delete(self, task_id) -> None:
        self.tasks = [task for task in self.tasks if task["id"] != task_id]

    def _apply_sub_task(self, task_id, transform) -> dict:
        task = dict(self._find(task_id))
        task["sub_tasks"] = transform(list(task.get("sub_tasks") or []))
        return self._replace(task)

    def _apply_sub_task_update(self, task_id, sub_task_id, fields: dict) -> dict:
        def transform(items):
            updated = []
            for item in items:
                if item["id"] == sub_task_id:
                    item = dict(item)
                    if "text" in fields:
                        item["text"] = task_rules.clean_text(fields["text"], field="Sub-task")
                    if "completed" in fields:
                        item["completed"] = bool(fields["completed"])
                        item["status"] = fields.get("status") or ("done" if item["completed"] else "todo")
                    elif "status" in fields:
                        item["status"] = task_rules.normalize_status(fields["status"])
                        item["completed"] = item["status"] == "done"
                    if "due_date" in fields:
                        item["due_date"] = _date_value(fields["due_date"])
                    if "notes" in fields:
                        item["notes"] = fields["notes"] or None
                updated.append(item)
            return updated

        return self._apply_sub_task(task_id, transform)

    def get(self, task_id) -> dict:
        return self._find(task_id)

    def toggled_fields(self, task_id) -> dict:
        return {"completed": not self._find(task_id)["completed"]}

    def sub_task(self, task_id, sub_task_id) -> dict:
        for item in self._find(task_id).get("sub_tasks") or []:
            if item["id"] == sub_task_id:
                return item
        raise KeyError(sub_task_id)


class GuestTaskStore(TaskStore):
    def __init__(self, guest_file: GuestFile | None = None):
        self.file = guest_file or GuestFile()
        super().__init__(self.file.get("tasks", []))

    def _persist(self):
        self.file.set("tasks", self.tasks)

    def load(self) -> list[dict]:
        self.tasks = list(self.file.get("tasks", []))
        return self.tasks

    def add_task(self, payload: dict) -> dict:
        record = self._apply_add(build_task(payload))
        self._persist()
        return record

    def update_task(self, task_id, fields: dict) -> dict:
        record = self._apply_update(task_id, fields)
        self._persist()
        return record

    def toggle_task(self, task_id):
        record = self.update_task(task_id, self.toggled_fields(task_id))
        return record, random_affirmation() if record["completed"] else None

    def delete_task(self, task_id) -> None:
        self._apply_delete(task_id)
        self._persist()

    def add_sub_task(self, task_id, payload: dict) -> dict:
        record = build_sub_task(payload, task_id)
        self._apply_sub_task(task_id, lambda items: items + [record])
        self._persist()
        return record

    def update_sub_task(self, task_id, sub_task_id, fields: dict) -> dict:
        self._apply_sub_task_update(task_id, sub_task_id, fields)
        self._persist()
        return self.sub_task(task_id, sub_task_id)

    def toggle_sub_task(self, task_id, sub_task_id) -> dict:
        toggled = task_rules.toggle_sub_task(self.sub_task(task_id, sub_task_id))
        return self.update_sub_task(
            task_id, sub_task_id, {"completed": toggled["completed"], "status": toggled["status"]}
        )

    def delete_sub_task(self, task_id, sub_task_id) -> None:
        self._apply_sub_task(task_id, lambda items: [item for item in items if item["id"] != sub_task_id])
        self._persist()


class CloudTaskStore(TaskStore):
    """Task list backed by the API; failed calls are applied locally and reported through ``warn``."""

    def __init__(self, warn=None, fallback_file: GuestFile | None = None):
        super().__init__()
        self._warn = warn or (lambda title, description: None)
        self._fallback_file = fallback_file or GuestFile()

    def _report(self, action: str, exc: Exception) -> None:
        logger.warning("Task sync failed (%s): %s", action, exc)
        title, description = SYNC_ERRORS[action]
        self._warn(title, description)

    def load(self) -> list[dict]:
        try:
            payload = api_client.request("GET", "/v1/tasks")
            self.tasks = payload.get("items", [])
        except ApiError as exc:
            self._report("load", exc)
            self.tasks = list(self._fallback_file.get("tasks", []))
        return self.tasks

    def add_task(self, payload: dict) -> dict:
        record = build_task(payload)
        try:
            body = {key: value for key, value in record.items() if key not in {"id", "created_at"}}
            body["sub_tasks"] = [
                {key: value for key, value in item.items() if key not in {"id", "created_at"}}
                for item in record["sub_tasks"]
            ]
            record = api_client.request("POST", "/v1/tasks", json=body)
        except ApiError as exc:
            self._report("add", exc)
        return self._apply_add(record)

    def update_task(self, task_id, fields: dict) -> dict:
        fields = _checked_text(fields)
        try:
            record = api_client.request("PATCH", f"/v1/tasks/{task_id}", json=_jsonable(fields))
            return self._replace(record)
        except ApiError as exc:
            self._report("update", exc)
            return self._apply_update(task_id, fields)

    def toggle_task(self, task_id):
        try:
            payload = api_client.request("POST", f"/v1/tasks/{task_id}/toggle")
            return self._replace(payload["task"]), payload.get("affirmation")
        except ApiError as exc:
            self._report("update", exc)
            record = self._apply_update(task_id, self.toggled_fields(task_id))
            return record, random_affirmation() if record["completed"] else None

    def delete_task(self, task_id) -> None:
        try:
            api_client.request("DELETE", f"/v1/tasks/{task_id}")
        except ApiError as exc:
            self._report("delete", exc)
        self._apply_delete(task_id)

    def add_sub_task(self, task_id, payload: dict) -> dict:
        payload = _checked_text(payload, field="Sub-task")
        try:
            record = api_client.request("POST", f"/v1/tasks/{task_id}/subtasks", json=_jsonable(payload))
        except ApiError as exc:
            self._report("update", exc)
            record = build_sub_task(payload, task_id)
        self._apply_sub_task(task_id, lambda items: items + [record])
        return record

    def update_sub_task(self, task_id, sub_task_id, fields: dict) -> dict:
        fields = _checked_text(fields, field="Sub-task")
        try:
            record = api_client.request("PATCH", f"/v1/subtasks/{sub_task_id}", json=_jsonable(fields))
            self._apply_sub_task(
                task_id, lambda items: [record if item["id"] == sub_task_id else item for item in items]
            )
        except ApiError as exc:
            self._report("update", exc)
            self._apply_sub_task_update(task_id, sub_task_id, fields)
        return self.sub_task(task_id, sub_task_id)

    def toggle_sub_task(self, task_id, sub_task_id) -> dict:
        try:
            record = api_client.request("POST", f"/v1/subtasks/{sub_task_id}/toggle")
            self._apply_sub_task(
                task_id, lambda items: [record if item["id"] == sub_task_id else item for item in items]
            )
        except ApiError as exc:
            self._report("update", exc)
            toggled = task_rules.toggle_sub_task(self.sub_task(task_id, sub_task_id))
            self._apply_sub_task_update(
                task_id, sub_task_id, {"completed": toggled["completed"], "status": toggled["status"]}
            )
        return self.sub_task(task_id, sub_task_id)

    def delete_sub_task(self, task_id, sub_task_id) -> None:
        try:
            api_client.request("DELETE", f"/v1/subtasks/{sub_task_id}")
        except ApiError as exc:
            self._report("delete", exc)
        self._apply_sub_task(task_id, lambda items: [item for item in items if item["id"] != sub_task_id])

    def import_tasks(self, tasks: list[dict]) -> int:
        if not tasks:
            return 0
        body = {
            "tasks": [
                {
                    "text": task["text"],
                    "completed": task.get("completed", False),
                    "category": task.get("category") or "personal",
                    "priority": task.get("priority", False),
                    "due_date": task.get("due_date"),
                    "notes": task.get("notes"),
                    "sub_tasks": [
                        {
                            "text": item["text"],
                            "completed": item.get("completed", False),
                            "status": item.get("status"),
                            "due_date": item.get("due_date"),
                            "notes": item.get("notes"),
                        }
                        for item in task.get("sub_tasks") or []
                    ],
                }
                for task in tasks
            ]
        }
        payload = api_client.request("POST", "/v1/tasks/import", json=body, timeout=30)
        self.load()
        return len(payload.get("items", []))


def _jsonable(fields: dict) -> dict:
    return {key: (value.isoformat() if isinstance(value, date) else value) for key, value in fields.items()}


def load_user_settings():
    try:
        return api_client.request("GET", "/v1/settings")
    except ApiError as exc:
        logger.warning("Could not load settings: %s", exc)
        return {}


def save_user_settings(patch: dict) -> bool:
    try:
        api_client.request("PUT", "/v1/settings", json=patch)
        return True
    except ApiError as exc:
        logger.warning("Could not save settings: %s", exc)
        return False


def list_liked_videos() -> list[str]:
    try:
        payload = api_client.request("GET", "/v1/music/liked")
    except ApiError as exc:
        logger.warning("Could not load liked videos: %s", exc)
        return []
    return [item["video_id"] for item in payload.get("items", [])]


def set_video_liked(video: dict, liked: bool) -> None:
    try:
        if liked:
            api_client.request(
                "POST",
                "/v1/music/liked",
                json={"video_id": video["id"], "title": video.get("title"), "channel": video.get("channel")},
            )
        else:
            api_client.request("DELETE", f"/v1/music/liked/{video['id']}")
    except ApiError as exc:
        logger.warning("Could not sync liked video %s: %s", video.get("id"), exc)


def load_preferences(guest_file: GuestFile, signed_in: bool) -> dict:
    prefs = dict(DEFAULT_USER_SETTINGS)
    stored = load_user_settings() if signed_in else (guest_file.get("settings") or {})
    prefs.update({key: value for key, value in stored.items() if key in prefs and value is not None})
    if not signed_in:
        prefs["recent_searches"] = list(guest_file.get("recent_searches") or [])
    return prefs


def save_preferences(patch: dict, guest_file: GuestFile, signed_in: bool) -> bool:
    if signed_in:
        return save_user_settings(_jsonable(patch))
    patch = dict(patch)
    if "recent_searches" in patch:
        guest_file.set("recent_searches", list(patch.pop("recent_searches")))
    if patch:
        settings = guest_file.get("settings") or {}
        settings.update(_jsonable(patch))
        guest_file.set("settings", settings)
    return True
