from fastapi.testclient import TestClient

from conftest import backend_headers
from noteflow_api import db
from noteflow_api.main import create_app


def test_health(client):
    assert client.get("/health").json() == {"ok": True, "service": "noteflow"}


def test_lifespan_creates_tables_and_disposes_engine(api_env):
    with TestClient(create_app()) as test_client:
        assert db._engine is not None
        response = test_client.post(
            "/v1/auth/register",
            json={"email": "life@example.com", "password": "secret123"},
            headers=backend_headers(),
        )
        assert response.status_code == 200
    assert db._engine is None


def test_register_returns_session_and_profile(register):
    payload = register(email="Ana@Example.com", display_name="")
    assert payload["token"]
    assert payload["profile"]["email"] == "ana@example.com"
    assert payload["profile"]["display_name"] == "Ana"
    assert "password_hash" not in payload["profile"]


def test_register_requires_backend_token(client):
    response = client.post("/v1/auth/register", json={"email": "a@b.c", "password": "secret123"})
    assert response.status_code == 401


def test_register_rejects_duplicate_email(client, register):
    register()
    response = client.post(
        "/v1/auth/register",
        json={"email": "ana@example.com", "password": "another1"},
        headers=backend_headers(),
    )
    assert response.status_code == 409


def test_register_rejects_short_password_and_bad_email(client):
    short = client.post(
        "/v1/auth/register", json={"email": "bo@example.com", "password": "123"}, headers=backend_headers()
    )
    bad_email = client.post(
        "/v1/auth/register", json={"email": "not-an-email", "password": "secret123"}, headers=backend_headers()
    )
    assert short.status_code == 400
    assert bad_email.status_code == 400


def test_register_respects_allowed_emails(client, api_env):
    from noteflow_api.settings import reset_settings

    api_env.setenv("ALLOWED_EMAILS", "only@example.com")
    reset_settings()
    response = client.post(
        "/v1/auth/register", json={"email": "other@example.com", "password": "secret123"}, headers=backend_headers()
    )
    assert response.status_code == 403


def test_login_and_me(client, register):
    register()
    response = client.post(
        "/v1/auth/login", json={"email": "ana@example.com", "password": "secret123"}, headers=backend_headers()
    )
    assert response.status_code == 200
    token = response.json()["token"]
    me = client.get("/v1/auth/me", headers=backend_headers(token))
    assert me.status_code == 200
    assert me.json()["email"] == "ana@example.com"


def test_login_with_wrong_password(client, register):
    register()
    response = client.post(
        "/v1/auth/login", json={"email": "ana@example.com", "password": "wrong-pass"}, headers=backend_headers()
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid login credentials"


def test_me_rejects_missing_or_tampered_session(client):
    assert client.get("/v1/auth/me", headers=backend_headers()).status_code == 401
    assert client.get("/v1/auth/me", headers=backend_headers("not-a-token")).status_code == 401


def test_update_profile(client, auth_headers):
    response = client.patch("/v1/profile", json={"display_name": "  Ana Maria "}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["display_name"] == "Ana Maria"


def test_init_payload(client, auth_headers):
    client.post("/v1/tasks", json={"text": "Write report"}, headers=auth_headers)
    payload = client.get("/v1/init", headers=auth_headers).json()
    assert payload["user_name"] == "Ana"
    assert payload["open_tasks"] == 1
    assert payload["settings"]["current_mood"] == "motivated"
    assert payload["greeting"] in {"Good Morning", "Good Afternoon", "Good Evening", "Good Night"}
    assert payload["quote"]
