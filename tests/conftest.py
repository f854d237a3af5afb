import pytest
from fastapi.testclient import TestClient

from noteflow_api import db
from noteflow_api.settings import reset_settings

BACKEND_TOKEN = "test-backend-token"


@pytest.fixture
def api_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'noteflow.db'}")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", BACKEND_TOKEN)
    monkeypatch.setenv("SESSION_SIGNING_KEY", "signing-key-for-tests")
    for name in ("ALLOWED_EMAILS", "OPENROUTER_API_KEY", "FALLBACK_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    monkeypatch.setattr(db, "_engine", None)
    monkeypatch.setattr(db, "_session_factory", None)
    yield monkeypatch
    reset_settings()


@pytest.fixture
def client(api_env):
    from noteflow_api.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


def backend_headers(token=None):
    headers = {"X-Backend-Token": BACKEND_TOKEN}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


@pytest.fixture
def register(client):
    def _register(email="ana@example.com", password="secret123", display_name="Ana"):
        response = client.post(
            "/v1/auth/register",
            json={"email": email, "password": password, "display_name": display_name},
            headers=backend_headers(),
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register):
    return backend_headers(register()["token"])
