from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field("sqlite+aiosqlite:///./noteflow.db", alias="DATABASE_URL")
    backend_session_secret: str = Field(..., alias="BACKEND_SESSION_SECRET")
    session_signing_key: str = Field(..., alias="SESSION_SIGNING_KEY")
    session_ttl_seconds: int = Field(60 * 60 * 24 * 14, alias="SESSION_TTL_SECONDS")

    allowed_emails_raw: str = Field("", alias="ALLOWED_EMAILS")

    openrouter_api_key: str | None = Field(None, alias="OPENROUTER_API_KEY")
    fallback_api_key: str | None = Field(None, alias="FALLBACK_API_KEY")
    openrouter_base_url: str = Field("https://openrouter.ai/api/v1", alias="OPENROUTER_BASE_URL")
    primary_model: str = Field("deepseek/deepseek-chat-v3-0324:free", alias="PRIMARY_MODEL")
    fallback_model: str = Field("google/gemma-3-27b-it:free", alias="FALLBACK_MODEL")
    llm_timeout_seconds: float = Field(30.0, alias="LLM_TIMEOUT_SECONDS")

    site_url: str = Field("https://noteflow.app", alias="SITE_URL")
    site_name: str = Field("NoteFlow - Mood-Based Productivity", alias="SITE_NAME")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_emails(self) -> List[str]:
        return [email.strip().lower() for email in self.allowed_emails_raw.split(",") if email.strip()]

    @property
    def resolved_fallback_key(self) -> str | None:
        return self.fallback_api_key or self.openrouter_api_key


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
