"""Gemini image-editing client built on google-genai."""

from dataclasses import dataclass

from google import genai
from google.genai import types

from merry_style.domain.images import DEFAULT_IMAGE_MIME_TYPE, EncodedImage
from merry_style.services.generation import HatImageClient


@dataclass
class GeminiHatImageClient(HatImageClient):
    """Image client backed by the Gemini generateContent API."""

    client: genai.Client

    @classmethod
    def create(
        cls, api_key: str, timeout_ms: int | None = None
    ) -> "GeminiHatImageClient":
        """Create a Gemini client, optionally with an HTTP timeout."""
        http_options = (
            types.HttpOptions(timeout=timeout_ms) if timeout_ms is not None else None
        )
        return cls(client=genai.Client(api_key=api_key, http_options=http_options))

    async def edit_image(
        self,
        *,
        model: str,
        image: EncodedImage,
        prompt: str,
        aspect_ratio: str,
    ) -> EncodedImage | None:
        """Send the image and prompt, returning the first inline image part."""
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=types.Content(
                role="user",
                parts=[
                    types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                    types.Part.from_text(text=prompt),
                ],
            ),
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
            ),
        )
        return first_inline_image(response)

    async def close(self) -> None:
        await self.client.aio.aclose()


def first_inline_image(response: types.GenerateContentResponse) -> EncodedImage | None:
    """Return the first inline image of the first candidate, if any."""
    if not response.candidates:
        return None
    content = response.candidates[0].content
    if content is None or not content.parts:
        return None
    for part in content.parts:
        inline_data = part.inline_data
        if inline_data is not None and inline_data.data:
            return EncodedImage(
                data=inline_data.data,
                mime_type=inline_data.mime_type or DEFAULT_IMAGE_MIME_TYPE,
            )
    return None
