from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from noteflow_api.auth import require_backend_token, require_user
from noteflow_api.schemas import LoginPayload, ProfilePatch, RegisterPayload
from noteflow_api.services.security import hash_password, issue_session_token, verify_password
from noteflow_api.settings import get_settings
from noteflow_api import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_payload(profile: dict) -> dict:
    return {
        "token": issue_session_token(profile["id"], profile["email"]),
        "profile": profile,
    }


@router.post("/v1/auth/register", dependencies=[Depends(require_backend_token)])
async def register(payload: RegisterPayload):
    email = payload.email.strip().lower()
    allowed = get_settings().allowed_emails
    if allowed and email not in allowed:
        raise HTTPException(status_code=403, detail="User not allowed")
    try:
        password_hash = hash_password(payload.password)
        profile = await repositories.create_profile(email, password_hash, payload.display_name)
    except repositories.DuplicateEmailError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    logger.info("Registered user %s", profile["id"])
    return _session_payload(profile)


@router.post("/v1/auth/login", dependencies=[Depends(require_backend_token)])
async def login(payload: LoginPayload):
    record = await repositories.get_profile_by_email(payload.email, include_secret=True)
    if not record or not verify_password(payload.password, record.get("password_hash")):
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    allowed = get_settings().allowed_emails
    if allowed and record["email"] not in allowed:
        raise HTTPException(status_code=403, detail="User not allowed")
    profile = await repositories.get_profile(record["id"])
    return _session_payload(profile)


@router.get("/v1/auth/me")
async def me(user: dict = Depends(require_user)):
    profile = await repositories.get_profile(user["id"])
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.patch("/v1/profile")
async def patch_profile(payload: ProfilePatch, user: dict = Depends(require_user)):
    profile = await repositories.update_profile(user["id"], payload.model_dump(exclude_unset=True))
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile
