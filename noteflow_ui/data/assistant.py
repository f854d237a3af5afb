from __future__ import annotations

import logging

from noteflow_api.services.llm_gateway import OFFLINE_REPLY
from noteflow_ui.data import api_client
from noteflow_ui.data.api_client import ApiError

logger = logging.getLogger(__name__)

MAX_HISTORY = 20


def _offline(prompt=""):
    return {
        "reply": OFFLINE_REPLY,
        "used_fallback": True,
        "tier": "offline",
        "model": None,
        "prompt": prompt,
        "suggested_sub_tasks": [],
    }


def ask(messages, mood):
    """Send the chat history to the assistant; never raises."""
    history = [message for message in messages if message.get("role") in {"user", "assistant"}][-MAX_HISTORY:]
    try:
        return api_client.request(
            "POST",
            "/v1/chat",
            json={"messages": history, "mood": mood},
            timeout=60,
            authenticated=False,
        )
    except ApiError as exc:
        logger.warning("Assistant unavailable: %s", exc)
        return _offline()


def focus_assist(task_text, mood, prompt_type=None, prompt=None):
    try:
        return api_client.request(
            "POST",
            "/v1/chat/focus",
            json={"task_text": task_text, "mood": mood, "prompt_type": prompt_type, "prompt": prompt},
            timeout=60,
            authenticated=False,
        )
    except ApiError as exc:
        logger.warning("Focus assist unavailable: %s", exc)
        return _offline(prompt or "")
