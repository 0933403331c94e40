"""Image upload validation and encoding."""

import asyncio
import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from merry_style.domain.hats import DEFAULT_ASPECT_RATIO, AspectRatio
from merry_style.domain.images import EncodedImage, strip_data_url_prefix
from merry_style.services.aspect_ratio import classify_aspect_ratio

logger = logging.getLogger(__name__)

NOT_AN_IMAGE_MESSAGE = "Please upload an image file."


class InvalidImageError(ValueError):
    """Raised when an upload cannot be accepted as an image."""

    def __init__(self, message: str, *, reason: str = "media_type") -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason


@dataclass(frozen=True)
class IngestedImage:
    """An accepted upload with its detected geometry."""

    image: EncodedImage
    width: int | None
    height: int | None
    aspect_ratio: AspectRatio

    @property
    def data_url(self) -> str:
        return self.image.data_url


def ensure_image_media_type(media_type: str | None) -> str:
    """Return the media type if it declares an image, else raise."""
    if not media_type or not media_type.lower().startswith("image/"):
        raise InvalidImageError(NOT_AN_IMAGE_MESSAGE)
    return media_type


@dataclass
class ImageIngestionService:
    """Turns uploaded files into encoded images plus an aspect-ratio hint."""

    max_upload_bytes: int

    def validate(self, content: bytes, media_type: str | None) -> str:
        """Check an upload without touching any session state."""
        resolved = ensure_image_media_type(media_type)
        if not content:
            raise InvalidImageError("The uploaded file is empty.", reason="empty")
        self.ensure_within_limit(len(content))
        return resolved

    def ensure_within_limit(self, size: int | None) -> None:
        """Reject a payload size over ``max_upload_bytes``; ``None`` passes."""
        if size is not None and size > self.max_upload_bytes:
            raise self._too_large()

    def ensure_encoded_within_limit(self, payload: str) -> None:
        """Reject base64 text whose decoded size would exceed the limit."""
        encoded_limit = -(-self.max_upload_bytes // 3) * 4
        if len(strip_data_url_prefix(payload)) > encoded_limit:
            raise self._too_large()

    def _too_large(self) -> InvalidImageError:
        return InvalidImageError(
            f"Images must be at most {self.max_upload_bytes // (1024 * 1024)} MB.",
            reason="too_large",
        )

    async def ingest(
        self, content: bytes, media_type: str | None, filename: str | None = None
    ) -> IngestedImage:
        """Validate an upload and detect its aspect ratio."""
        resolved = self.validate(content, media_type)
        image = EncodedImage(data=content, mime_type=resolved)
        size = await asyncio.to_thread(_read_dimensions, content)
        if size is None:
            logger.warning(
                "Could not read image dimensions; keeping default aspect ratio",
                extra={"upload_filename": filename, "mime_type": resolved},
            )
            return IngestedImage(
                image=image, width=None, height=None, aspect_ratio=DEFAULT_ASPECT_RATIO
            )
        width, height = size
        aspect_ratio = classify_aspect_ratio(width, height)
        logger.info(
            "Detected dimensions: %sx%s, Ratio: %s, Selected: %s",
            width,
            height,
            width / height if height else "n/a",
            aspect_ratio.value,
        )
        return IngestedImage(
            image=image, width=width, height=height, aspect_ratio=aspect_ratio
        )


def _read_dimensions(content: bytes) -> tuple[int, int] | None:
    """Read pixel dimensions without decoding the full image."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            return img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        return None
