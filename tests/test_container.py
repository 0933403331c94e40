"""Tests for container wiring and settings."""

import asyncio

from merry_style.adapters.telegram_client import HttpxTelegramShareClient
from merry_style.config import Settings
from merry_style.containers import build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.session_registry is not None
    assert container.generation_service.model == "gemini-2.5-flash-image"
    assert container.delivery_service.can_share is False
    asyncio.run(container.close_resources())


def test_build_container_enables_telegram_sharing() -> None:
    settings = Settings(
        gemini_api_key="test-key",
        share_telegram_bot_token="bot-token",
        share_telegram_chat_id=1234,
    )

    container = build_container(settings)

    assert isinstance(
        container.delivery_service.share_target, HttpxTelegramShareClient
    )
    asyncio.run(container.close_resources())


def test_settings_accept_legacy_api_key_variable(monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "from-env")

    settings = Settings()

    assert settings.gemini_api_key == "from-env"
    assert settings.max_upload_bytes == 20 * 1024 * 1024
