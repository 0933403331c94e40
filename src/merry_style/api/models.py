"""Pydantic request and response models for the HTTP API."""

from uuid import UUID

from pydantic import BaseModel

from merry_style.domain.hats import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_HAT_COLOR,
    AspectRatio,
    HatColor,
)
from merry_style.domain.sessions import SessionState


class SessionView(BaseModel):
    """Client-facing snapshot of a session."""

    id: UUID
    lifecycle: str
    aspect_ratio: str
    color: str
    error: str | None = None
    original_image: str | None = None
    generated_image: str | None = None

    @classmethod
    def from_state(cls, session_id: UUID, state: SessionState) -> "SessionView":
        result = state.displayable_result
        return cls(
            id=session_id,
            lifecycle=state.lifecycle.value,
            aspect_ratio=state.aspect_ratio.value,
            color=state.color.display_name,
            error=state.error,
            original_image=state.original.data_url if state.original else None,
            generated_image=result.data_url if result else None,
        )


class ColorRequest(BaseModel):
    """Body for choosing a hat color."""

    color: str


class ImageDataRequest(BaseModel):
    """Body for submitting an image as a data URL or bare base64."""

    image: str
    mime_type: str | None = None
    filename: str | None = None


class HatColorOption(BaseModel):
    name: str
    hex: str
    value: str


class OptionsView(BaseModel):
    """Colors and aspect ratios offered by the service."""

    colors: list[HatColorOption]
    default_color: str
    aspect_ratios: list[str]
    default_aspect_ratio: str
    sharing_enabled: bool

    @classmethod
    def build(cls, sharing_enabled: bool) -> "OptionsView":
        return cls(
            colors=[
                HatColorOption(name=c.display_name, hex=c.hex, value=c.prompt_value)
                for c in HatColor
            ],
            default_color=DEFAULT_HAT_COLOR.display_name,
            aspect_ratios=[ratio.value for ratio in AspectRatio],
            default_aspect_ratio=DEFAULT_ASPECT_RATIO.value,
            sharing_enabled=sharing_enabled,
        )


class ShareResult(BaseModel):
    shared: bool
