import asyncio
import json

import httpx
import pytest

from noteflow_api.services import llm_gateway
from noteflow_api.settings import reset_settings


def _reply(content):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.fixture
def provider(api_env):
    """Route gateway traffic to a scripted handler and record every request."""
    api_env.setenv("OPENROUTER_API_KEY", "primary-key")
    api_env.setenv("FALLBACK_API_KEY", "fallback-key")
    reset_settings()
    calls = []
    script = {}

    def handler(request):
        body = json.loads(request.content)
        calls.append({"headers": request.headers, "body": body, "url": str(request.url)})
        return script["respond"](body)

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = transport
        return real_client(*args, **kwargs)

    api_env.setattr(llm_gateway.httpx, "AsyncClient", client_factory)
    return script, calls


MESSAGES = [
    {"role": "system", "content": "be kind"},
    {"role": "user", "content": "one"},
    {"role": "assistant", "content": "two"},
    {"role": "user", "content": "three"},
    {"role": "assistant", "content": "four"},
    {"role": "user", "content": "five"},
]


def test_primary_model_answers(provider):
    script, calls = provider
    script["respond"] = lambda body: _reply("hello")

    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))

    assert result == {
        "reply": "hello",
        "used_fallback": False,
        "tier": "primary",
        "model": "deepseek/deepseek-chat-v3-0324:free",
    }
    assert len(calls) == 1
    sent = calls[0]
    assert sent["url"] == "https://openrouter.ai/api/v1/chat/completions"
    assert sent["headers"]["authorization"] == "Bearer primary-key"
    assert sent["headers"]["http-referer"] == "https://noteflow.app"
    assert sent["headers"]["x-title"] == "NoteFlow - Mood-Based Productivity"
    assert sent["body"]["temperature"] == 0.7
    assert sent["body"]["max_tokens"] == 1000


def test_fallback_model_after_primary_error(provider):
    script, calls = provider

    def respond(body):
        if body["model"].startswith("deepseek"):
            return httpx.Response(429, json={"error": {"message": "rate limited"}})
        return _reply("from gemma")

    script["respond"] = respond
    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))

    assert result["reply"] == "from gemma"
    assert result["tier"] == "fallback"
    assert result["used_fallback"] is True
    assert calls[1]["headers"]["authorization"] == "Bearer fallback-key"


def test_simplified_request_trims_history(provider):
    script, calls = provider

    def respond(body):
        if len(calls) < 3:
            return httpx.Response(200, json={"choices": []})
        return _reply("short answer")

    script["respond"] = respond
    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))

    assert result["tier"] == "simplified"
    assert result["reply"] == "short answer"
    simplified = calls[2]["body"]
    assert [message["content"] for message in simplified["messages"]] == ["three", "four", "five"]
    assert simplified["temperature"] == 0.5
    assert simplified["max_tokens"] == 500
    assert simplified["model"] == "google/gemma-3-27b-it:free"


def test_simplified_request_empty_reply(provider):
    script, _ = provider
    script["respond"] = lambda body: _reply("   ")
    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))
    assert result["reply"] == llm_gateway.EMPTY_REPLY


def test_all_tiers_down_returns_offline_reply(provider):
    script, calls = provider
    script["respond"] = lambda body: httpx.Response(500, text="boom")
    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))
    assert result["reply"] == llm_gateway.OFFLINE_REPLY
    assert result["tier"] == "simplified"
    assert len(calls) == 3


def test_transport_error_is_a_tier_failure(provider):
    script, _ = provider

    def respond(body):
        raise httpx.ConnectError("offline")

    script["respond"] = respond
    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))
    assert result["reply"] == llm_gateway.OFFLINE_REPLY


def test_malformed_base_url_returns_offline_reply(provider, api_env):
    _, calls = provider
    api_env.setenv("OPENROUTER_BASE_URL", "https://openrouter.test:notaport/api/v1")
    reset_settings()
    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))
    assert result["tier"] == "simplified"
    assert result["reply"] == llm_gateway.OFFLINE_REPLY
    assert calls == []


def test_missing_keys_skip_network(api_env, monkeypatch):
    reset_settings()

    def fail(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(llm_gateway.httpx, "AsyncClient", fail)
    result = asyncio.run(llm_gateway.chat_completion(MESSAGES))
    assert result["reply"] == llm_gateway.OFFLINE_REPLY


def test_fallback_key_defaults_to_primary(api_env):
    api_env.setenv("OPENROUTER_API_KEY", "only-key")
    reset_settings()
    from noteflow_api.settings import get_settings

    assert get_settings().resolved_fallback_key == "only-key"
