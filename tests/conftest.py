"""Shared test fixtures."""

import asyncio
import io
from dataclasses import dataclass, field

import pytest
from PIL import Image

from merry_style.config import Settings
from merry_style.containers import AppContainer
from merry_style.domain.images import EncodedImage
from merry_style.services.delivery import DeliveryService, ImageFile, ShareTarget
from merry_style.services.generation import HatGenerationService, HatImageClient
from merry_style.services.ingestion import ImageIngestionService
from merry_style.services.sessions import InMemorySessionRegistry

GENERATED_PNG = b"\x89PNG\r\n\x1a\ngenerated-hat-image"
FIXED_TIMESTAMP_MS = 1_734_000_000_000


def make_image_bytes(width: int, height: int, image_format: str = "PNG") -> bytes:
    """Render a blank image of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(
        buffer, format=image_format
    )
    return buffer.getvalue()


@dataclass
class FakeHatImageClient(HatImageClient):
    """Fake image client that records calls and returns a fixed result."""

    result: EncodedImage | None = field(
        default_factory=lambda: EncodedImage(data=GENERATED_PNG, mime_type="image/png")
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def edit_image(
        self,
        *,
        model: str,
        image: EncodedImage,
        prompt: str,
        aspect_ratio: str,
    ) -> EncodedImage | None:
        self.calls.append(
            {
                "model": model,
                "image": image,
                "prompt": prompt,
                "aspect_ratio": aspect_ratio,
            }
        )
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class BlockingHatImageClient(HatImageClient):
    """Fake image client that waits until released."""

    result: EncodedImage = field(
        default_factory=lambda: EncodedImage(data=GENERATED_PNG, mime_type="image/png")
    )
    started: asyncio.Event = field(default_factory=asyncio.Event)
    release: asyncio.Event = field(default_factory=asyncio.Event)
    calls: int = 0

    async def edit_image(
        self,
        *,
        model: str,
        image: EncodedImage,
        prompt: str,
        aspect_ratio: str,
    ) -> EncodedImage | None:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return self.result


@dataclass
class FakeShareTarget(ShareTarget):
    """Fake share target that records shared files."""

    shared: list[tuple[ImageFile, str, str]] = field(default_factory=list)
    error: Exception | None = None

    async def share_file(self, file: ImageFile, *, title: str, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.shared.append((file, title, text))


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key")


@pytest.fixture
def image_client() -> FakeHatImageClient:
    return FakeHatImageClient()


@pytest.fixture
def share_target() -> FakeShareTarget:
    return FakeShareTarget()


@pytest.fixture
def ingestion_service(settings: Settings) -> ImageIngestionService:
    return ImageIngestionService(max_upload_bytes=settings.max_upload_bytes)


@pytest.fixture
def generation_service(
    settings: Settings, image_client: FakeHatImageClient
) -> HatGenerationService:
    return HatGenerationService(client=image_client, model=settings.gemini_model)


@pytest.fixture
def container(
    settings: Settings,
    ingestion_service: ImageIngestionService,
    generation_service: HatGenerationService,
    share_target: FakeShareTarget,
) -> AppContainer:
    session_registry = InMemorySessionRegistry(
        ingestion_service=ingestion_service,
        generation_service=generation_service,
        ttl_seconds=settings.session_ttl_seconds,
    )
    delivery_service = DeliveryService(
        share_target=share_target, clock_ms=lambda: FIXED_TIMESTAMP_MS
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ingestion_service=ingestion_service,
        generation_service=generation_service,
        session_registry=session_registry,
        delivery_service=delivery_service,
        close_resources=close_resources,
    )
