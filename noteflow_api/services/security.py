from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os

from cryptography.exceptions import InvalidKey
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from noteflow_api.settings import get_settings

SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_LENGTH = 32
MIN_PASSWORD_LENGTH = 6


class InvalidSessionError(Exception):
    pass


def _fernet() -> Fernet:
    settings = get_settings()
    digest = hashlib.sha256(settings.session_signing_key.encode("utf-8")).digest()
    key = base64.urlsafe_b64encode(digest)
    return Fernet(key)


def _scrypt(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=SCRYPT_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)


def hash_password(password: str) -> str:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    salt = os.urandom(16)
    derived = _scrypt(salt).derive(password.encode("utf-8"))
    return "scrypt$" + base64.b64encode(salt).decode("ascii") + "$" + base64.b64encode(derived).decode("ascii")


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, salt_b64, derived_b64 = str(stored or "").split("$", 2)
    except ValueError:
        return False
    if scheme != "scrypt":
        return False
    salt = base64.b64decode(salt_b64)
    expected = base64.b64decode(derived_b64)
    try:
        _scrypt(salt).verify(password.encode("utf-8"), expected)
    except InvalidKey:
        return False
    return True


def issue_session_token(user_id: str, email: str) -> str:
    payload = json.dumps({"sub": user_id, "email": email}).encode("utf-8")
    return _fernet().encrypt(payload).decode("utf-8")


def read_session_token(token: str) -> dict:
    settings = get_settings()
    try:
        raw = _fernet().decrypt(token.encode("utf-8"), ttl=settings.session_ttl_seconds)
    except InvalidToken as exc:
        raise InvalidSessionError("Session expired or invalid") from exc
    payload = json.loads(raw.decode("utf-8"))
    if not payload.get("sub"):
        raise InvalidSessionError("Session missing subject")
    return payload


def backend_token_matches(candidate: str | None) -> bool:
    expected = get_settings().backend_session_secret
    if not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))
