from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from noteflow_api.auth import require_user
from noteflow_api.moods import MOODS
from noteflow_api.schemas import UserSettingsPayload
from noteflow_api import repositories

router = APIRouter()


@router.get("/v1/settings")
async def get_user_settings(user: dict = Depends(require_user)):
    return await repositories.get_user_settings(user["id"])


@router.put("/v1/settings")
async def put_user_settings(payload: UserSettingsPayload, user: dict = Depends(require_user)):
    patch = payload.model_dump(exclude_unset=True)
    if patch.get("current_mood") is not None and patch["current_mood"] not in MOODS:
        raise HTTPException(status_code=400, detail="Invalid mood")
    return await repositories.upsert_user_settings(user["id"], patch)
