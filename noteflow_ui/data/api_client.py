import os
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

RETRY_POLICY = Retry(
    total=2,
    backoff_factor=0.5,
    status_forcelist=(502, 503, 504),
    allowed_methods=frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"}),
    raise_on_status=False,
)

_http = requests.Session()
_http.mount("http://", HTTPAdapter(max_retries=RETRY_POLICY, pool_maxsize=10))
_http.mount("https://", HTTPAdapter(max_retries=RETRY_POLICY, pool_maxsize=10))

_hooks = {"secret": None, "session": None}


class ApiError(RuntimeError):
    def __init__(self, status_code, detail):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API error {status_code}: {detail}")


def configure(secret_getter, session_getter):
    """Wire in the Streamlit secrets reader and the signed-in session token."""
    _hooks["secret"] = secret_getter
    _hooks["session"] = session_getter


def _setting(name) -> str:
    lookup = _hooks["secret"]
    if lookup is not None:
        for path in (("noteflow", name), (name,)):
            value = lookup(path, None)
            if value:
                return str(value)
    return os.getenv(name, "")


def is_enabled():
    return bool(_setting("API_BASE_URL") and _setting("BACKEND_SESSION_SECRET"))


def _headers(authenticated: bool) -> dict:
    token = _setting("BACKEND_SESSION_SECRET")
    if not token:
        raise ApiError(None, "BACKEND_SESSION_SECRET not configured")
    headers = {"X-Backend-Token": token}
    if authenticated:
        session_token = _hooks["session"]() if _hooks["session"] else None
        if not session_token:
            raise ApiError(401, "Not signed in")
        headers["Authorization"] = f"Bearer {session_token}"
    return headers


def _error_detail(response):
    try:
        payload = response.json()
    except ValueError:
        return response.text
    return payload.get("detail", payload) if isinstance(payload, dict) else payload


def request(
    method: str,
    path: str,
    params: dict | None = None,
    json: dict | None = None,
    timeout: int = 10,
    authenticated: bool = True,
) -> Any:
    base = _setting("API_BASE_URL").rstrip("/")
    if not base:
        raise ApiError(None, "API_BASE_URL not configured")
    headers = _headers(authenticated)
    try:
        response = _http.request(method, base + path, params=params, json=json, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise ApiError(None, str(exc)) from exc
    if not response.ok:
        raise ApiError(response.status_code, _error_detail(response))
    return None if response.status_code == 204 else response.json()
