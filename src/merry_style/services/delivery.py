"""Download and share actions for generated images."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from merry_style.domain.images import EncodedImage
from merry_style.domain.sessions import SessionState

logger = logging.getLogger(__name__)

SHARE_TITLE = "MerryStyle Christmas Photo"
SHARE_TEXT = "Check out this festive photo I made with MerryStyle AI!"
SHARE_UNSUPPORTED_MESSAGE = (
    "Sharing isn't supported on this device/browser, "
    "but you can still download the image!"
)


class NoGeneratedImageError(LookupError):
    """Raised when a download or share is requested without a result."""


class ShareUnsupportedError(RuntimeError):
    """Raised when no share target is available."""

    def __init__(self, message: str = SHARE_UNSUPPORTED_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class ImageFile:
    """A named file ready to hand to the user."""

    filename: str
    content: bytes
    mime_type: str


class ShareTarget(Protocol):
    """Interface for a native share capability."""

    async def share_file(self, file: ImageFile, *, title: str, text: str) -> None:
        """Share a file with a title and accompanying text."""


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def download_filename(color_name: str, image: EncodedImage, timestamp_ms: int) -> str:
    """Build the download name, e.g. ``merry-style-christmas-red-<ts>.png``."""
    stem = f"merry-style-christmas-{color_name.lower()}-{timestamp_ms}"
    return f"{stem}.{image.extension}"


def _require_result(state: SessionState) -> EncodedImage:
    image = state.displayable_result
    if image is None:
        raise NoGeneratedImageError("No generated image is available yet.")
    return image


@dataclass
class DeliveryService:
    """Prepares downloads and forwards shares to an optional target."""

    share_target: ShareTarget | None = None
    clock_ms: Callable[[], int] = field(default=_epoch_millis)

    @property
    def can_share(self) -> bool:
        return self.share_target is not None

    def download(self, state: SessionState) -> ImageFile:
        """Return the generated image as a downloadable file."""
        image = _require_result(state)
        return ImageFile(
            filename=download_filename(
                state.color.display_name, image, self.clock_ms()
            ),
            content=image.data,
            mime_type=image.mime_type,
        )

    async def share(self, state: SessionState) -> bool:
        """Share the generated image.

        Returns False when the target fails; the failure is only logged.
        """
        image = _require_result(state)
        if self.share_target is None:
            raise ShareUnsupportedError()
        file = ImageFile(
            filename=f"merry-christmas.{image.extension}",
            content=image.data,
            mime_type=image.mime_type,
        )
        try:
            await self.share_target.share_file(file, title=SHARE_TITLE, text=SHARE_TEXT)
        except Exception:
            logger.exception("Share failed")
            return False
        return True
