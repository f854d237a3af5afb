from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends

from noteflow_api.auth import require_user
from noteflow_api.moods import mood_quote, time_greeting
from noteflow_api import repositories

router = APIRouter()


@router.get("/v1/init")
async def init_payload(user: dict = Depends(require_user)):
    profile = await repositories.get_profile(user["id"])
    user_settings = await repositories.get_user_settings(user["id"])
    open_tasks = await repositories.count_open_tasks(user["id"])
    display_name = profile.get("display_name") or user["email"].split("@")[0].title()
    return {
        "profile": profile,
        "user_name": display_name,
        "settings": user_settings,
        "open_tasks": open_tasks,
        "greeting": time_greeting(datetime.now().hour),
        "quote": mood_quote(user_settings["current_mood"]),
    }
