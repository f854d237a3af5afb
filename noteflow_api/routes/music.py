from __future__ import annotations

import re

from fastapi import APIRouter, Depends, HTTPException

from noteflow_api.auth import require_user
from noteflow_api.schemas import LikedVideoPayload
from noteflow_api import repositories

router = APIRouter()

_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")


@router.get("/v1/music/liked")
async def list_liked(user: dict = Depends(require_user)):
    return {"items": await repositories.list_liked_videos(user["id"])}


@router.post("/v1/music/liked")
async def like_video(payload: LikedVideoPayload, user: dict = Depends(require_user)):
    if not _VIDEO_ID.match(payload.video_id):
        raise HTTPException(status_code=400, detail="Invalid YouTube video id")
    return await repositories.save_liked_video(user["id"], payload.video_id, payload.title, payload.channel)


@router.delete("/v1/music/liked/{video_id}")
async def unlike_video(video_id: str, user: dict = Depends(require_user)):
    await repositories.remove_liked_video(user["id"], video_id)
    return {"ok": True}
