"""Application configuration."""

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gemini_api_key: str = Field(
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_API_KEY", "API_KEY")
    )
    gemini_model: str = "gemini-2.5-flash-image"
    gemini_timeout_ms: int | None = None
    max_upload_bytes: int = 20 * 1024 * 1024
    session_ttl_seconds: int = 3600
    share_telegram_bot_token: str | None = None
    share_telegram_chat_id: int | None = None
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def sharing_enabled(self) -> bool:
        """Whether both Telegram share settings are present."""
        return bool(self.share_telegram_bot_token) and (
            self.share_telegram_chat_id is not None
        )
