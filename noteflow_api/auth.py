from __future__ import annotations

from fastapi import Header, HTTPException

from noteflow_api.services.security import InvalidSessionError, backend_token_matches, read_session_token
from noteflow_api.settings import get_settings


async def require_backend_token(
    x_backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
) -> None:
    if not backend_token_matches(x_backend_token):
        raise HTTPException(status_code=401, detail="Invalid backend token")


async def require_user(
    authorization: str | None = Header(default=None),
    x_backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
) -> dict:
    if not backend_token_matches(x_backend_token):
        raise HTTPException(status_code=401, detail="Invalid backend token")
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing session")
    token = authorization.split(" ", 1)[1].strip()
    try:
        session = read_session_token(token)
    except InvalidSessionError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    email = str(session.get("email") or "").lower()
    allowed = get_settings().allowed_emails
    if allowed and email not in allowed:
        raise HTTPException(status_code=403, detail="User not allowed")
    return {"id": session["sub"], "email": email}
