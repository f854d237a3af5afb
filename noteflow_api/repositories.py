from __future__ import annotations

import json
from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import text as sql_text, bindparam

from noteflow_api.db import get_sessionmaker
from noteflow_api.db_init import (
    LIKED_VIDEOS_TABLE,
    PROFILES_TABLE,
    SETTINGS_TABLE,
    SUBTASKS_TABLE,
    TASKS_TABLE,
)
from noteflow_api.moods import normalize_mood
from noteflow_api import task_rules

TASK_COLUMNS = "id, user_id, text, completed, category, priority, due_date, notes, created_at, updated_at"
SUBTASK_COLUMNS = "id, task_id, user_id, text, completed, status, due_date, notes, created_at, updated_at"

MAX_RECENT_SEARCHES = 5

DEFAULT_USER_SETTINGS = {
    "current_mood": "motivated",
    "theme": "light",
    "focus_minutes": 25,
    "break_minutes": 5,
    "auto_start_breaks": True,
    "sound_enabled": True,
    "alarm_volume": 70,
    "alarm": "chiptune",
    "recent_searches": [],
}


class DuplicateEmailError(ValueError):
    pass


def _new_id() -> str:
    return uuid4().hex


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _date_value(value):
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    parsed = task_rules.parse_due_date(value)
    return parsed.isoformat() if parsed else None


def _normalize_sub_task_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    payload["completed"] = bool(payload.get("completed"))
    payload["status"] = task_rules.normalize_status(payload.get("status"), payload["completed"])
    return payload


def _normalize_task_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    payload["completed"] = bool(payload.get("completed"))
    payload["priority"] = bool(payload.get("priority"))
    payload["category"] = task_rules.normalize_category(payload.get("category"))
    payload.setdefault("sub_tasks", [])
    return payload


def _normalize_profile_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    payload.pop("password_hash", None)
    return payload


async def get_profile_by_email(email: str, include_secret: bool = False) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT id, email, password_hash, display_name, avatar_url, created_at, updated_at "
                f"FROM {PROFILES_TABLE} WHERE email = :email"
            ),
            {"email": email.strip().lower()},
        )).mappings().fetchone()
    if not row:
        return {}
    return dict(row) if include_secret else _normalize_profile_row(row)


async def get_profile(user_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT id, email, display_name, avatar_url, created_at, updated_at "
                f"FROM {PROFILES_TABLE} WHERE id = :id"
            ),
            {"id": user_id},
        )).mappings().fetchone()
    return _normalize_profile_row(row)


async def create_profile(email: str, password_hash: str, display_name: str | None = None) -> dict:
    clean_email = str(email or "").strip().lower()
    if "@" not in clean_email:
        raise ValueError("A valid email is required")
    if await get_profile_by_email(clean_email):
        raise DuplicateEmailError("User already registered")
    record = {
        "id": _new_id(),
        "email": clean_email,
        "password_hash": password_hash,
        "display_name": (display_name or "").strip() or clean_email.split("@")[0].title(),
        "avatar_url": None,
        "created_at": _now(),
        "updated_at": _now(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {PROFILES_TABLE}
                (id, email, password_hash, display_name, avatar_url, created_at, updated_at)
                VALUES (:id, :email, :password_hash, :display_name, :avatar_url, :created_at, :updated_at)
                """
            ),
            record,
        )
        await session.commit()
    return _normalize_profile_row(record)


async def update_profile(user_id: str, patch: dict) -> dict:
    allowed = {"display_name", "avatar_url"}
    updates = []
    params = {"id": user_id}
    for key, value in patch.items():
        if key not in allowed:
            continue
        updates.append(f"{key} = :{key}")
        params[key] = (str(value).strip() or None) if value is not None else None
    if not updates:
        return await get_profile(user_id)
    updates.append("updated_at = :updated_at")
    params["updated_at"] = _now()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"UPDATE {PROFILES_TABLE} SET {', '.join(updates)} WHERE id = :id"),
            params,
        )
        await session.commit()
    return await get_profile(user_id)


async def get_user_settings(user_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"""
                SELECT current_mood, theme, focus_minutes, break_minutes, auto_start_breaks,
                       sound_enabled, alarm_volume, alarm, recent_searches_json
                FROM {SETTINGS_TABLE} WHERE id = :id
                """
            ),
            {"id": user_id},
        )).mappings().fetchone()
    payload = dict(DEFAULT_USER_SETTINGS)
    if not row:
        return payload
    data = dict(row)
    raw_searches = data.pop("recent_searches_json", None)
    for key, value in data.items():
        if value is not None:
            payload[key] = value
    payload["auto_start_breaks"] = bool(payload["auto_start_breaks"])
    payload["sound_enabled"] = bool(payload["sound_enabled"])
    payload["current_mood"] = normalize_mood(payload["current_mood"])
    try:
        searches = json.loads(raw_searches) if raw_searches else []
    except json.JSONDecodeError:
        searches = []
    payload["recent_searches"] = [str(item) for item in searches if str(item).strip()][:MAX_RECENT_SEARCHES]
    return payload


async def upsert_user_settings(user_id: str, patch: dict) -> dict:
    clean = {}
    for key, value in (patch or {}).items():
        if value is None or key not in DEFAULT_USER_SETTINGS:
            continue
        if key == "current_mood":
            clean[key] = normalize_mood(value)
        elif key in {"auto_start_breaks", "sound_enabled"}:
            clean[key] = int(bool(value))
        elif key == "recent_searches":
            clean["recent_searches_json"] = json.dumps(list(value)[:MAX_RECENT_SEARCHES], ensure_ascii=False)
        else:
            clean[key] = value
    if not clean:
        return await get_user_settings(user_id)
    clean["updated_at"] = _now()
    columns = ["id"] + list(clean.keys())
    placeholders = ", ".join([f":{col}" for col in columns])
    updates = ", ".join([f"{col}=EXCLUDED.{col}" for col in clean.keys()])
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {SETTINGS_TABLE} ({', '.join(columns)})
                VALUES ({placeholders})
                ON CONFLICT(id) DO UPDATE SET {updates}
                """
            ),
            {"id": user_id, **clean},
        )
        await session.commit()
    return await get_user_settings(user_id)


async def list_sub_tasks(task_ids: list[str], user_id: str) -> dict[str, list[dict]]:
    if not task_ids:
        return {}
    session_factory = get_sessionmaker()
    stmt = sql_text(
        f"""
        SELECT {SUBTASK_COLUMNS}
        FROM {SUBTASKS_TABLE}
        WHERE user_id = :user_id AND task_id IN :task_ids
        ORDER BY created_at ASC
        """
    ).bindparams(bindparam("task_ids", expanding=True))
    async with session_factory() as session:
        rows = (await session.execute(stmt, {"user_id": user_id, "task_ids": task_ids})).mappings().all()
    payload: dict[str, list[dict]] = {task_id: [] for task_id in task_ids}
    for row in rows:
        row_dict = _normalize_sub_task_row(row)
        payload.setdefault(row_dict["task_id"], []).append(row_dict)
    return payload


async def list_tasks(user_id: str) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT {TASK_COLUMNS}
                FROM {TASKS_TABLE}
                WHERE user_id = :user_id
                ORDER BY created_at DESC
                """
            ),
            {"user_id": user_id},
        )).mappings().all()
    tasks = [_normalize_task_row(row) for row in rows]
    sub_tasks = await list_sub_tasks([task["id"] for task in tasks], user_id)
    for task in tasks:
        task["sub_tasks"] = sub_tasks.get(task["id"], [])
    return tasks


async def count_open_tasks(user_id: str) -> int:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        count = (await session.execute(
            sql_text(
                f"SELECT COUNT(*) FROM {TASKS_TABLE} WHERE user_id = :user_id AND COALESCE(completed, 0) = 0"
            ),
            {"user_id": user_id},
        )).scalar_one()
    return int(count or 0)


async def get_task(user_id: str, task_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(f"SELECT {TASK_COLUMNS} FROM {TASKS_TABLE} WHERE id = :id AND user_id = :user_id"),
            {"id": task_id, "user_id": user_id},
        )).mappings().fetchone()
    task = _normalize_task_row(row)
    if task:
        task["sub_tasks"] = (await list_sub_tasks([task_id], user_id)).get(task_id, [])
    return task


def _task_record(user_id: str, payload: dict) -> dict:
    return {
        "id": _new_id(),
        "user_id": user_id,
        "text": task_rules.clean_text(payload.get("text")),
        "completed": int(bool(payload.get("completed", False))),
        "category": task_rules.normalize_category(payload.get("category")),
        "priority": int(bool(payload.get("priority", False))),
        "due_date": _date_value(payload.get("due_date")),
        "notes": payload.get("notes") or None,
        "created_at": payload.get("created_at") or _now(),
        "updated_at": _now(),
    }


def _sub_task_record(user_id: str, task_id: str, payload: dict) -> dict:
    completed = bool(payload.get("completed", False))
    return {
        "id": _new_id(),
        "task_id": task_id,
        "user_id": user_id,
        "text": task_rules.clean_text(payload.get("text"), field="Sub-task"),
        "completed": int(completed),
        "status": task_rules.normalize_status(payload.get("status"), completed),
        "due_date": _date_value(payload.get("due_date")),
        "notes": payload.get("notes") or None,
        "created_at": payload.get("created_at") or _now(),
        "updated_at": _now(),
    }


async def _insert_task(session, record: dict) -> None:
    await session.execute(
        sql_text(
            f"""
            INSERT INTO {TASKS_TABLE} ({TASK_COLUMNS})
            VALUES (:id, :user_id, :text, :completed, :category, :priority, :due_date, :notes,
                    :created_at, :updated_at)
            """
        ),
        record,
    )


async def _insert_sub_task(session, record: dict) -> None:
    await session.execute(
        sql_text(
            f"""
            INSERT INTO {SUBTASKS_TABLE} ({SUBTASK_COLUMNS})
            VALUES (:id, :task_id, :user_id, :text, :completed, :status, :due_date, :notes,
                    :created_at, :updated_at)
            """
        ),
        record,
    )


async def _store_tasks(user_id: str, payloads: list[dict]) -> list[str]:
    # Every text is validated before the first INSERT; all rows share one commit.
    batch = []
    for payload in payloads:
        task = _task_record(user_id, payload)
        sub_tasks = [_sub_task_record(user_id, task["id"], item) for item in payload.get("sub_tasks") or []]
        batch.append((task, sub_tasks))
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        try:
            for task, sub_tasks in batch:
                await _insert_task(session, task)
                for sub_task in sub_tasks:
                    await _insert_sub_task(session, sub_task)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    return [task["id"] for task, _ in batch]


async def create_task(user_id: str, payload: dict) -> dict:
    task_ids = await _store_tasks(user_id, [payload])
    return await get_task(user_id, task_ids[0])


async def import_tasks(user_id: str, tasks: list[dict]) -> list[dict]:
    task_ids = await _store_tasks(user_id, tasks)
    return [await get_task(user_id, task_id) for task_id in task_ids]


async def update_task(user_id: str, task_id: str, patch: dict) -> dict:
    allowed = {"text", "completed", "category", "priority", "due_date", "notes"}
    updates = []
    params = {"id": task_id, "user_id": user_id}
    for key, value in patch.items():
        if key not in allowed:
            continue
        updates.append(f"{key} = :{key}")
        if key == "text":
            params[key] = task_rules.clean_text(value)
        elif key in {"completed", "priority"}:
            params[key] = int(bool(value))
        elif key == "category":
            params[key] = task_rules.normalize_category(value)
        elif key == "due_date":
            params[key] = _date_value(value)
        else:
            params[key] = value or None
    if not updates:
        return await get_task(user_id, task_id)
    updates.append("updated_at = :updated_at")
    params["updated_at"] = _now()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"UPDATE {TASKS_TABLE} SET {', '.join(updates)} WHERE id = :id AND user_id = :user_id"
            ),
            params,
        )
        await session.commit()
    return await get_task(user_id, task_id)


async def toggle_task(user_id: str, task_id: str) -> dict:
    task = await get_task(user_id, task_id)
    if not task:
        return {}
    return await update_task(user_id, task_id, {"completed": not task["completed"]})


async def delete_task(user_id: str, task_id: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {SUBTASKS_TABLE} WHERE user_id = :user_id AND task_id = :task_id"),
            {"user_id": user_id, "task_id": task_id},
        )
        result = await session.execute(
            sql_text(f"DELETE FROM {TASKS_TABLE} WHERE user_id = :user_id AND id = :task_id"),
            {"user_id": user_id, "task_id": task_id},
        )
        await session.commit()
    return bool(result.rowcount)


async def get_sub_task(user_id: str, sub_task_id: str) -> dict:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(f"SELECT {SUBTASK_COLUMNS} FROM {SUBTASKS_TABLE} WHERE id = :id AND user_id = :user_id"),
            {"id": sub_task_id, "user_id": user_id},
        )).mappings().fetchone()
    return _normalize_sub_task_row(row)


async def add_sub_task(user_id: str, task_id: str, payload: dict) -> dict:
    record = _sub_task_record(user_id, task_id, payload)
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await _insert_sub_task(session, record)
        await session.commit()
    return _normalize_sub_task_row(record)


async def update_sub_task(user_id: str, sub_task_id: str, fields: dict) -> dict:
    allowed = {"text", "completed", "status", "due_date", "notes"}
    clean = {key: value for key, value in fields.items() if key in allowed}
    if "completed" in clean and "status" not in clean:
        clean["status"] = "done" if clean["completed"] else "todo"
    elif "status" in clean and "completed" not in clean:
        clean["completed"] = clean["status"] == "done"
    updates = []
    params = {"id": sub_task_id, "user_id": user_id}
    for key, value in clean.items():
        updates.append(f"{key} = :{key}")
        if key == "text":
            params[key] = task_rules.clean_text(value, field="Sub-task")
        elif key == "completed":
            params[key] = int(bool(value))
        elif key == "status":
            params[key] = task_rules.normalize_status(value)
        elif key == "due_date":
            params[key] = _date_value(value)
        else:
            params[key] = value or None
    if not updates:
        return await get_sub_task(user_id, sub_task_id)
    updates.append("updated_at = :updated_at")
    params["updated_at"] = _now()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"UPDATE {SUBTASKS_TABLE} SET {', '.join(updates)} WHERE id = :id AND user_id = :user_id"
            ),
            params,
        )
        await session.commit()
    return await get_sub_task(user_id, sub_task_id)


async def toggle_sub_task(user_id: str, sub_task_id: str) -> dict:
    sub_task = await get_sub_task(user_id, sub_task_id)
    if not sub_task:
        return {}
    toggled = task_rules.toggle_sub_task(sub_task)
    return await update_sub_task(
        user_id, sub_task_id, {"completed": toggled["completed"], "status": toggled["status"]}
    )


async def delete_sub_task(user_id: str, sub_task_id: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(f"DELETE FROM {SUBTASKS_TABLE} WHERE id = :id AND user_id = :user_id"),
            {"id": sub_task_id, "user_id": user_id},
        )
        await session.commit()
    return bool(result.rowcount)


async def list_liked_videos(user_id: str) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT video_id, title, channel, created_at
                FROM {LIKED_VIDEOS_TABLE}
                WHERE user_id = :user_id
                ORDER BY created_at DESC
                """
            ),
            {"user_id": user_id},
        )).mappings().all()
    return [dict(row) for row in rows]


async def save_liked_video(user_id: str, video_id: str, title: str | None, channel: str | None) -> dict:
    record = {
        "user_id": user_id,
        "video_id": video_id,
        "title": title,
        "channel": channel,
        "created_at": _now(),
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {LIKED_VIDEOS_TABLE} (user_id, video_id, title, channel, created_at)
                VALUES (:user_id, :video_id, :title, :channel, :created_at)
                ON CONFLICT(user_id, video_id) DO NOTHING
                """
            ),
            record,
        )
        await session.commit()
    return {key: record[key] for key in ("video_id", "title", "channel", "created_at")}


async def remove_liked_video(user_id: str, video_id: str) -> None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(f"DELETE FROM {LIKED_VIDEOS_TABLE} WHERE user_id = :user_id AND video_id = :video_id"),
            {"user_id": user_id, "video_id": video_id},
        )
        await session.commit()
