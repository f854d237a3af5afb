from __future__ import annotations

import logging

from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError

from noteflow_api.db import get_engine

logger = logging.getLogger(__name__)

PROFILES_TABLE = "user_profiles"
SETTINGS_TABLE = "user_settings"
TASKS_TABLE = "tasks"
SUBTASKS_TABLE = "sub_tasks"
LIKED_VIDEOS_TABLE = "liked_videos"


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {PROFILES_TABLE} (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    display_name TEXT,
                    avatar_url TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {SETTINGS_TABLE} (
                    id TEXT PRIMARY KEY,
                    current_mood TEXT DEFAULT 'motivated',
                    theme TEXT DEFAULT 'light',
                    focus_minutes INTEGER DEFAULT 25,
                    break_minutes INTEGER DEFAULT 5,
                    auto_start_breaks INTEGER DEFAULT 1,
                    sound_enabled INTEGER DEFAULT 1,
                    alarm_volume INTEGER DEFAULT 70,
                    alarm TEXT DEFAULT 'chiptune',
                    recent_searches_json TEXT,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {TASKS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    text TEXT NOT NULL,
                    completed INTEGER DEFAULT 0,
                    category TEXT DEFAULT 'personal',
                    priority INTEGER DEFAULT 0,
                    due_date TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {SUBTASKS_TABLE} (
                    id TEXT PRIMARY KEY,
                    task_id TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    text TEXT NOT NULL,
                    completed INTEGER DEFAULT 0,
                    status TEXT DEFAULT 'todo',
                    due_date TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {LIKED_VIDEOS_TABLE} (
                    user_id TEXT NOT NULL,
                    video_id TEXT NOT NULL,
                    title TEXT,
                    channel TEXT,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, video_id)
                )
                """
            )
        )

    async def ensure_index(index_sql: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(sql_text(index_sql))
        except SQLAlchemyError as exc:
            logger.warning("Index creation skipped: %s", exc)

    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{TASKS_TABLE}_user_created "
        f"ON {TASKS_TABLE} (user_id, created_at)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{SUBTASKS_TABLE}_task "
        f"ON {SUBTASKS_TABLE} (user_id, task_id)"
    )
