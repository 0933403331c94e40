"""Session state for a single hat-editing session."""

from dataclasses import dataclass, replace
from enum import StrEnum

from merry_style.domain.hats import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_HAT_COLOR,
    AspectRatio,
    HatColor,
)
from merry_style.domain.images import EncodedImage


class Lifecycle(StrEnum):
    """Lifecycle tags for a session."""

    IDLE = "IDLE"
    UPLOADING = "UPLOADING"
    GENERATING = "GENERATING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of a session.

    Every transition returns a new snapshot. ``revision`` changes whenever the
    original image is replaced or cleared, so results computed for an older
    image can be recognized and dropped.
    """

    lifecycle: Lifecycle = Lifecycle.IDLE
    original: EncodedImage | None = None
    generated: EncodedImage | None = None
    aspect_ratio: AspectRatio = DEFAULT_ASPECT_RATIO
    color: HatColor = DEFAULT_HAT_COLOR
    error: str | None = None
    revision: int = 0

    @property
    def displayable_result(self) -> EncodedImage | None:
        """Generated image, only while the session is in SUCCESS."""
        if self.lifecycle is Lifecycle.SUCCESS:
            return self.generated
        return None

    def uploading(self) -> "SessionState":
        return replace(self, lifecycle=Lifecycle.UPLOADING)

    def with_image(
        self, image: EncodedImage, aspect_ratio: AspectRatio
    ) -> "SessionState":
        """Store a newly selected image and drop any previous result."""
        return replace(
            self,
            lifecycle=Lifecycle.IDLE,
            original=image,
            generated=None,
            aspect_ratio=aspect_ratio,
            error=None,
            revision=self.revision + 1,
        )

    def cleared(self) -> "SessionState":
        """Forget the image, result, error and color choice."""
        return SessionState(revision=self.revision + 1)

    def with_color(self, color: HatColor) -> "SessionState":
        return replace(self, color=color)

    def generating(self) -> "SessionState":
        return replace(
            self, lifecycle=Lifecycle.GENERATING, generated=None, error=None
        )

    def succeeded(self, image: EncodedImage) -> "SessionState":
        return replace(self, lifecycle=Lifecycle.SUCCESS, generated=image, error=None)

    def failed(self, message: str) -> "SessionState":
        return replace(self, lifecycle=Lifecycle.ERROR, generated=None, error=message)

    def reset(self) -> "SessionState":
        """Return to idle, keeping the original image and color."""
        return replace(self, lifecycle=Lifecycle.IDLE, generated=None, error=None)
