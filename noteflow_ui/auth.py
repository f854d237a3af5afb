from __future__ import annotations

import logging
import os
from pathlib import Path

import streamlit as st

from noteflow_ui.constants import APP_TAGLINE, APP_TITLE, FEATURES
from noteflow_ui.data import api_client
from noteflow_ui.data.api_client import ApiError
from noteflow_ui.theme import inject_theme_css

logger = logging.getLogger(__name__)

DOTENV = Path(__file__).resolve().parent.parent / ".env"

TOKEN_KEY = "auth.token"
PROFILE_KEY = "auth.profile"


def load_local_env(path: Path = DOTENV) -> None:
    """Copy KEY=value pairs from the repo's .env into os.environ without overriding."""
    if not path.is_file():
        return
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        os.environ.setdefault(key, value.strip().strip("\"'"))


def get_secret(path, default=None):
    section = st.secrets
    try:
        for part in path:
            section = section[part]
    except (KeyError, FileNotFoundError):
        return default
    return section


def get_session_token():
    return st.session_state.get(TOKEN_KEY)


def current_profile():
    return st.session_state.get(PROFILE_KEY) or {}


def is_signed_in():
    return bool(get_session_token())


def _store_session(payload):
    st.session_state[TOKEN_KEY] = payload["token"]
    st.session_state[PROFILE_KEY] = payload["profile"]


def sign_in(email, password):
    payload = api_client.request(
        "POST",
        "/v1/auth/login",
        json={"email": email, "password": password},
        authenticated=False,
    )
    _store_session(payload)
    logger.info("Signed in %s", payload["profile"].get("id"))
    return payload["profile"]


def register(email, password, display_name=None):
    payload = api_client.request(
        "POST",
        "/v1/auth/register",
        json={"email": email, "password": password, "display_name": display_name or None},
        authenticated=False,
    )
    _store_session(payload)
    return payload["profile"]


def drop_workspace():
    for key in ("tasks.store", "tasks.store_owner"):
        st.session_state.pop(key, None)


def sign_out(guest_file):
    for key in (TOKEN_KEY, PROFILE_KEY):
        st.session_state.pop(key, None)
    drop_workspace()
    guest_file.set("guest_mode", False)


def update_profile(display_name):
    profile = api_client.request("PATCH", "/v1/profile", json={"display_name": display_name})
    st.session_state[PROFILE_KEY] = profile
    return profile


def continue_as_guest(guest_file):
    payload = guest_file.read()
    payload["guest_mode"] = True
    payload["has_visited"] = True
    guest_file.write(payload)


def _describe_error(exc):
    if exc.status_code == 401:
        return "Invalid login credentials."
    if exc.status_code == 409:
        return "An account with this email already exists."
    if exc.status_code == 403:
        return "This account is not allowed to use this workspace."
    if exc.status_code is None:
        return "The NoteFlow service is unreachable right now."
    return str(exc.detail)


def render_landing_page(guest_file):
    st.markdown(f"<div class='page-title'>{APP_TITLE}</div>", unsafe_allow_html=True)
    st.markdown(f"<div class='small-label'>{APP_TAGLINE}</div>", unsafe_allow_html=True)
    st.markdown("### Key Features")
    st.caption("Discover how NoteFlow adapts to your mood and enhances your productivity experience.")
    cols = st.columns(3)
    for idx, (icon, title, description) in enumerate(FEATURES):
        with cols[idx % 3]:
            st.markdown(
                f"<div class='card'><div class='section-title'>{icon} {title}</div>"
                f"<div class='small-label'>{description}</div></div>",
                unsafe_allow_html=True,
            )
    st.markdown("### Ready for a workspace that understands you?")
    if st.button("Get Started Now", key="landing.get_started", type="primary"):
        guest_file.set("has_visited", True)
        st.rerun()


def render_auth_panel(guest_file):
    st.markdown(f"<div class='page-title'>Welcome to {APP_TITLE}</div>", unsafe_allow_html=True)
    if not api_client.is_enabled():
        st.info("Cloud sync is not configured. Your tasks will be kept on this machine.")
        if st.button("Continue as guest", key="auth.guest_only", type="primary"):
            continue_as_guest(guest_file)
            st.rerun()
        return

    login_tab, register_tab = st.tabs(["Sign in", "Create account"])
    with login_tab:
        with st.form("auth.login_form"):
            email = st.text_input("Email", key="auth.login_email")
            password = st.text_input("Password", type="password", key="auth.login_password")
            submitted = st.form_submit_button("Sign in")
        if submitted:
            try:
                sign_in(email, password)
                guest_file.set("guest_mode", False)
                st.rerun()
            except ApiError as exc:
                logger.warning("Sign in failed: %s", exc)
                st.error(_describe_error(exc))

    with register_tab:
        with st.form("auth.register_form"):
            display_name = st.text_input("Name", key="auth.register_name")
            email = st.text_input("Email", key="auth.register_email")
            password = st.text_input("Password", type="password", key="auth.register_password")
            confirm = st.text_input("Confirm password", type="password", key="auth.register_confirm")
            submitted = st.form_submit_button("Create account")
        if submitted:
            if password != confirm:
                st.error("Passwords do not match.")
            elif len(password) < 6:
                st.error("Password must be at least 6 characters.")
            else:
                try:
                    register(email, password, display_name)
                    guest_file.set("guest_mode", False)
                    st.rerun()
                except ApiError as exc:
                    logger.warning("Registration failed: %s", exc)
                    st.error(_describe_error(exc))

    st.divider()
    st.caption("No account? Your tasks stay on this machine in guest mode.")
    if st.button("Continue as guest", key="auth.guest"):
        continue_as_guest(guest_file)
        st.rerun()


def enforce_entry(guest_file):
    """Stop the script on the landing/auth screens until the user signs in or picks guest mode."""
    if is_signed_in():
        return "cloud"
    state = guest_file.read()
    if state.get("guest_mode"):
        return "guest"
    inject_theme_css((state.get("settings") or {}).get("current_mood"))
    if not state.get("has_visited"):
        render_landing_page(guest_file)
    else:
        render_auth_panel(guest_file)
    st.stop()


def render_account_panel(guest_file, mode):
    st.markdown("<div class='section-title'>Account</div>", unsafe_allow_html=True)
    if mode == "guest":
        st.caption("Guest mode: tasks are saved on this machine.")
        if api_client.is_enabled() and st.button("Sign in to sync", key="account.sign_in"):
            guest_file.set("guest_mode", False)
            drop_workspace()
            st.rerun()
        return
    profile = current_profile()
    st.caption(f"Signed in as {profile.get('email', 'unknown')}")
    with st.expander("Profile"):
        name = st.text_input("Display name", value=profile.get("display_name") or "", key="account.display_name")
        if st.button("Save profile", key="account.save_profile"):
            try:
                update_profile(name)
                st.success("Profile updated.")
            except ApiError as exc:
                logger.warning("Profile update failed: %s", exc)
                st.error(_describe_error(exc))
    if st.button("Sign out", key="account.sign_out"):
        sign_out(guest_file)
        st.rerun()
