"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from merry_style.adapters.gemini_image_client import GeminiHatImageClient
from merry_style.adapters.telegram_client import HttpxTelegramShareClient
from merry_style.config import Settings
from merry_style.services.delivery import DeliveryService
from merry_style.services.generation import HatGenerationService
from merry_style.services.ingestion import ImageIngestionService
from merry_style.services.sessions import InMemorySessionRegistry


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ingestion_service: ImageIngestionService
    generation_service: HatGenerationService
    session_registry: InMemorySessionRegistry
    delivery_service: DeliveryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    ingestion_service = ImageIngestionService(
        max_upload_bytes=resolved_settings.max_upload_bytes
    )
    gemini_client = GeminiHatImageClient.create(
        resolved_settings.gemini_api_key,
        timeout_ms=resolved_settings.gemini_timeout_ms,
    )
    generation_service = HatGenerationService(
        client=gemini_client, model=resolved_settings.gemini_model
    )
    session_registry = InMemorySessionRegistry(
        ingestion_service=ingestion_service,
        generation_service=generation_service,
        ttl_seconds=resolved_settings.session_ttl_seconds,
    )
    share_client: HttpxTelegramShareClient | None = None
    if resolved_settings.sharing_enabled:
        share_client = HttpxTelegramShareClient.create(
            bot_token=resolved_settings.share_telegram_bot_token or "",
            chat_id=resolved_settings.share_telegram_chat_id or 0,
        )
    delivery_service = DeliveryService(share_target=share_client)

    async def close_resources() -> None:
        await gemini_client.close()
        if share_client is not None:
            await share_client.close()

    return AppContainer(
        settings=resolved_settings,
        ingestion_service=ingestion_service,
        generation_service=generation_service,
        session_registry=session_registry,
        delivery_service=delivery_service,
        close_resources=close_resources,
    )
