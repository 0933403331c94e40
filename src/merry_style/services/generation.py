"""Hat generation requests against a hosted image model."""

import logging
from dataclasses import dataclass
from typing import Protocol

from merry_style.domain.hats import AspectRatio, HatColor
from merry_style.domain.images import EncodedImage

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = (
    "No image data returned from the model. It might have refused the request "
    "due to safety filters or failed to generate."
)
DEFAULT_FAILURE_MESSAGE = "Failed to generate image."

HAT_PROMPT_TEMPLATE = (
    "Detect all faces and characters in the image. "
    "Add a festive {color} and white Christmas hat to each of them. "
    "The hats must strictly follow the artistic style (e.g., photorealistic, "
    "oil painting, cartoon, sketch) and lighting of the original image. "
    "Adjust the angle, size, and perspective of the hats to match the head pose "
    "of each subject naturally, including side profiles and tilted heads. "
    "Ensure the hats look like they are physically sitting on the heads. "
    "CRITICAL: Do not change the facial features, identity of the persons, "
    "or the background environment. Only add the hats."
)


class GenerationError(RuntimeError):
    """Raised when the model call fails or returns no image."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HatImageClient(Protocol):
    """Interface for an image-editing model."""

    async def edit_image(
        self,
        *,
        model: str,
        image: EncodedImage,
        prompt: str,
        aspect_ratio: str,
    ) -> EncodedImage | None:
        """Return the first inline image in the response, or None."""


def build_hat_prompt(color: HatColor) -> str:
    """Fill the fixed hat prompt with the chosen color."""
    return HAT_PROMPT_TEMPLATE.format(color=color.prompt_value)


@dataclass
class HatGenerationService:
    """Sends one photo to the model and returns the edited photo."""

    client: HatImageClient
    model: str

    async def add_hat(
        self, image: EncodedImage, aspect_ratio: AspectRatio, color: HatColor
    ) -> EncodedImage:
        """Ask the model to add a hat in ``color`` to every face in ``image``."""
        prompt = build_hat_prompt(color)
        logger.info(
            "Requesting hat generation",
            extra={
                "model": self.model,
                "aspect_ratio": aspect_ratio.value,
                "color": color.display_name,
                "mime_type": image.mime_type,
            },
        )
        try:
            result = await self.client.edit_image(
                model=self.model,
                image=image,
                prompt=prompt,
                aspect_ratio=aspect_ratio.value,
            )
        except Exception as exc:
            logger.exception("Image model request failed")
            raise GenerationError(str(exc) or DEFAULT_FAILURE_MESSAGE) from exc
        if result is None or not result.data:
            logger.warning("Image model returned no inline image data")
            raise GenerationError(NO_IMAGE_MESSAGE)
        return result
