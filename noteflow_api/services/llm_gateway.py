from __future__ import annotations

import logging

import httpx

from noteflow_api.settings import get_settings

logger = logging.getLogger(__name__)

EMPTY_REPLY = "I'm sorry, I couldn't process your request at this time. Please try again later."
OFFLINE_REPLY = "I'm having trouble connecting to my knowledge base. Please try again in a moment."

SIMPLIFIED_HISTORY = 3


class LLMError(RuntimeError):
    pass


class EmptyReplyError(LLMError):
    pass


# httpx.InvalidURL (bad OPENROUTER_BASE_URL) is not an HTTPError subclass
PROVIDER_ERRORS = (LLMError, httpx.HTTPError, httpx.InvalidURL)


def _headers(api_key: str) -> dict:
    settings = get_settings()
    return {
        "Authorization": f"Bearer {api_key}",
        "HTTP-Referer": settings.site_url,
        "X-Title": settings.site_name,
        "Content-Type": "application/json",
    }


def _extract_content(data: dict) -> str | None:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(content, str) or not content.strip():
        return None
    return content


async def call_model(
    messages: list[dict],
    model: str,
    api_key: str | None,
    temperature: float = 0.7,
    max_tokens: int = 1000,
) -> str:
    if not api_key:
        raise LLMError(f"No API key configured for {model}")
    settings = get_settings()
    payload = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds) as client:
        response = await client.post(
            f"{settings.openrouter_base_url.rstrip('/')}/chat/completions",
            headers=_headers(api_key),
            json=payload,
        )
    if response.status_code >= 400:
        try:
            error = response.json().get("error")
        except (ValueError, AttributeError):
            error = response.text[:200]
        detail = error.get("message", "") if isinstance(error, dict) else str(error or "")
        raise LLMError(f"{model} returned {response.status_code}: {detail}")
    try:
        data = response.json()
    except ValueError as exc:
        raise LLMError(f"{model} returned invalid JSON") from exc
    content = _extract_content(data)
    if content is None:
        raise EmptyReplyError(f"{model} returned no content")
    return content


async def call_simplified(messages: list[dict]) -> str:
    settings = get_settings()
    try:
        return await call_model(
            messages[-SIMPLIFIED_HISTORY:],
            settings.fallback_model,
            settings.resolved_fallback_key,
            temperature=0.5,
            max_tokens=500,
        )
    except EmptyReplyError as exc:
        logger.warning("Simplified request returned nothing: %s", exc)
        return EMPTY_REPLY
    except PROVIDER_ERRORS as exc:
        logger.warning("Simplified request failed: %s", exc)
        return OFFLINE_REPLY


async def chat_completion(messages: list[dict]) -> dict:
    """Try the primary model, then the fallback model, then a trimmed request.

    Returns a dict with the reply text, whether a fallback was used, the tier
    that answered (``primary``, ``fallback`` or ``simplified``) and the model.
    """
    settings = get_settings()
    try:
        reply = await call_model(messages, settings.primary_model, settings.openrouter_api_key)
        return {"reply": reply, "used_fallback": False, "tier": "primary", "model": settings.primary_model}
    except PROVIDER_ERRORS as exc:
        logger.warning("Primary model failed, trying fallback: %s", exc)

    try:
        reply = await call_model(messages, settings.fallback_model, settings.resolved_fallback_key)
        return {"reply": reply, "used_fallback": True, "tier": "fallback", "model": settings.fallback_model}
    except PROVIDER_ERRORS as exc:
        logger.warning("Fallback model failed, sending simplified request: %s", exc)

    reply = await call_simplified(messages)
    return {"reply": reply, "used_fallback": True, "tier": "simplified", "model": settings.fallback_model}
