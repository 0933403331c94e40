"""Inline image payloads and data URL helpers."""

import base64
import binascii
import re
from dataclasses import dataclass

DEFAULT_IMAGE_MIME_TYPE = "image/png"

_DATA_URL_PREFIX = re.compile(r"^data:(?P<mime>[^;,]+)?(?:;[^;,]+)*;base64,")


@dataclass(frozen=True)
class EncodedImage:
    """Raw image bytes paired with their media type."""

    data: bytes
    mime_type: str

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"

    @property
    def extension(self) -> str:
        """File extension derived from the media subtype."""
        return file_extension(self.mime_type)

    @classmethod
    def from_base64(cls, payload: str, mime_type: str | None = None) -> "EncodedImage":
        """Decode a data URL or bare base64 string.

        The media type embedded in a data URL wins over ``mime_type``.
        """
        match = _DATA_URL_PREFIX.match(payload)
        if match:
            mime_type = match.group("mime") or mime_type
        try:
            data = base64.b64decode(strip_data_url_prefix(payload), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Image payload is not valid base64") from exc
        return cls(data=data, mime_type=mime_type or DEFAULT_IMAGE_MIME_TYPE)


def strip_data_url_prefix(payload: str) -> str:
    """Drop a leading ``data:<type>;base64,`` header if present."""
    return _DATA_URL_PREFIX.sub("", payload, count=1)


def file_extension(mime_type: str) -> str:
    """Return the media subtype, falling back to png."""
    _, _, subtype = mime_type.partition("/")
    return subtype.split(";")[0].strip() or "png"
