"""Session state machine and in-memory session registry."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from merry_style.domain.hats import HatColor
from merry_style.domain.images import EncodedImage
from merry_style.domain.sessions import Lifecycle, SessionState
from merry_style.services.generation import GenerationError, HatGenerationService
from merry_style.services.ingestion import ImageIngestionService

logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "Something went wrong while generating the image."


class SessionNotFoundError(LookupError):
    """Raised when a session id is unknown or has expired."""


class UnknownHatColorError(ValueError):
    """Raised when a requested hat color is not offered."""


class GenerationInProgressError(RuntimeError):
    """Raised when generation is triggered while another is pending."""


class SessionController:
    """Owns one session's state and applies every transition to it."""

    def __init__(
        self,
        session_id: UUID,
        ingestion_service: ImageIngestionService,
        generation_service: HatGenerationService,
    ) -> None:
        self.session_id = session_id
        self.ingestion_service = ingestion_service
        self.generation_service = generation_service
        self._state = SessionState()
        self._inflight_revision: int | None = None
        self._pending_generations = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_generating(self) -> bool:
        return self._pending_generations > 0

    async def select_image(
        self, content: bytes, media_type: str | None, filename: str | None = None
    ) -> SessionState:
        """Replace the original image and clear any previous result.

        Invalid uploads raise ``InvalidImageError`` before the state changes.
        """
        self.ingestion_service.validate(content, media_type)
        previous = self._state
        self._state = previous.uploading()
        try:
            ingested = await self.ingestion_service.ingest(
                content, media_type, filename=filename
            )
        except BaseException:
            self._state = previous
            raise
        self._state = self._state.with_image(ingested.image, ingested.aspect_ratio)
        return self._state

    def clear_image(self) -> SessionState:
        """Drop the image and reset the color to the default."""
        self._state = self._state.cleared()
        return self._state

    def choose_color(self, color: HatColor | str) -> SessionState:
        if isinstance(color, str):
            resolved = HatColor.from_name(color)
            if resolved is None:
                raise UnknownHatColorError(f"Unknown hat color: {color}")
            color = resolved
        self._state = self._state.with_color(color)
        return self._state

    def try_again(self) -> SessionState:
        """Leave a finished generation and return to idle."""
        if self._state.lifecycle not in {Lifecycle.SUCCESS, Lifecycle.ERROR}:
            return self._state
        self._state = self._state.reset()
        return self._state

    async def generate(self) -> SessionState:
        """Run one generation for the current image.

        Without an image this is a no-op. A second call for the same image
        while one is pending raises ``GenerationInProgressError``. A pending
        call for a replaced image does not block a new one; its result is
        dropped when it returns.
        """
        start = self._state
        if start.original is None:
            return start
        if self._inflight_revision == start.revision:
            raise GenerationInProgressError("A generation is already in progress.")
        self._inflight_revision = start.revision
        self._pending_generations += 1
        self._state = start.generating()
        try:
            return await self._run_generation(start, start.original)
        finally:
            self._pending_generations -= 1
            if self._inflight_revision == start.revision:
                self._inflight_revision = None

    async def _run_generation(
        self, start: SessionState, original: EncodedImage
    ) -> SessionState:
        try:
            result = await self.generation_service.add_hat(
                original, start.aspect_ratio, start.color
            )
            error = None
        except GenerationError as exc:
            result = None
            error = exc.message or FALLBACK_ERROR_MESSAGE
        if self._state.revision != start.revision:
            logger.info(
                "Discarding generation for a replaced image",
                extra={"session_id": str(self.session_id)},
            )
            return self._state
        if result is None:
            outcome = self._state.failed(error or FALLBACK_ERROR_MESSAGE)
        else:
            outcome = self._state.succeeded(result)
        self._state = outcome
        logger.info(
            "Generation finished",
            extra={
                "session_id": str(self.session_id),
                "lifecycle": outcome.lifecycle.value,
            },
        )
        return self._state


@dataclass
class _SessionEntry:
    controller: SessionController
    expires_at: datetime


@dataclass
class InMemorySessionRegistry:
    """In-memory registry of session controllers with an idle TTL."""

    ingestion_service: ImageIngestionService
    generation_service: HatGenerationService
    ttl_seconds: int
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))
    _entries: dict[UUID, _SessionEntry] = field(default_factory=dict, init=False)

    def create(self) -> SessionController:
        """Start a new session and return its controller."""
        self._evict_expired()
        controller = SessionController(
            session_id=uuid4(),
            ingestion_service=self.ingestion_service,
            generation_service=self.generation_service,
        )
        self._entries[controller.session_id] = _SessionEntry(
            controller=controller, expires_at=self._expiry()
        )
        return controller

    def get(self, session_id: UUID) -> SessionController:
        """Return a live controller and extend its TTL."""
        entry = self._entries.get(session_id)
        if entry is None:
            raise SessionNotFoundError(str(session_id))
        if self.clock() >= entry.expires_at and not entry.controller.is_generating:
            self._entries.pop(session_id, None)
            raise SessionNotFoundError(str(session_id))
        entry.expires_at = self._expiry()
        return entry.controller

    def discard(self, session_id: UUID) -> None:
        self._entries.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _expiry(self) -> datetime:
        return self.clock() + timedelta(seconds=self.ttl_seconds)

    def _evict_expired(self) -> None:
        now = self.clock()
        expired = [
            session_id
            for session_id, entry in self._entries.items()
            if now >= entry.expires_at and not entry.controller.is_generating
        ]
        for session_id in expired:
            self._entries.pop(session_id, None)
