"""Tests for the hat generation service."""

import asyncio

import pytest

from merry_style.domain.hats import AspectRatio, HatColor
from merry_style.domain.images import EncodedImage
from merry_style.services.generation import (
    NO_IMAGE_MESSAGE,
    GenerationError,
    HatGenerationService,
    build_hat_prompt,
)
from tests.conftest import GENERATED_PNG, FakeHatImageClient

SOURCE = EncodedImage(data=b"source-bytes", mime_type="image/jpeg")


def test_prompt_mentions_color_verbatim() -> None:
    prompt = build_hat_prompt(HatColor.GOLD)

    assert "Add a festive Gold and white Christmas hat" in prompt
    assert prompt.endswith("Only add the hats.")


def test_add_hat_sends_image_prompt_and_ratio(
    generation_service: HatGenerationService, image_client: FakeHatImageClient
) -> None:
    result = asyncio.run(
        generation_service.add_hat(SOURCE, AspectRatio.WIDESCREEN, HatColor.BLUE)
    )

    assert result.data == GENERATED_PNG
    call = image_client.calls[0]
    assert call["model"] == "gemini-2.5-flash-image"
    assert call["image"] == SOURCE
    assert call["aspect_ratio"] == "16:9"
    assert "festive Blue and white" in str(call["prompt"])


def test_add_hat_without_image_data_raises() -> None:
    service = HatGenerationService(
        client=FakeHatImageClient(result=None), model="model"
    )

    with pytest.raises(GenerationError) as excinfo:
        asyncio.run(service.add_hat(SOURCE, AspectRatio.SQUARE, HatColor.RED))

    assert excinfo.value.message == NO_IMAGE_MESSAGE


def test_add_hat_with_empty_bytes_raises() -> None:
    service = HatGenerationService(
        client=FakeHatImageClient(
            result=EncodedImage(data=b"", mime_type="image/png")
        ),
        model="model",
    )

    with pytest.raises(GenerationError):
        asyncio.run(service.add_hat(SOURCE, AspectRatio.SQUARE, HatColor.RED))


def test_add_hat_surfaces_client_error_message() -> None:
    service = HatGenerationService(
        client=FakeHatImageClient(error=RuntimeError("quota exceeded")),
        model="model",
    )

    with pytest.raises(GenerationError) as excinfo:
        asyncio.run(service.add_hat(SOURCE, AspectRatio.SQUARE, HatColor.RED))

    assert excinfo.value.message == "quota exceeded"


def test_add_hat_falls_back_when_error_has_no_message() -> None:
    service = HatGenerationService(
        client=FakeHatImageClient(error=RuntimeError()),
        model="model",
    )

    with pytest.raises(GenerationError) as excinfo:
        asyncio.run(service.add_hat(SOURCE, AspectRatio.SQUARE, HatColor.RED))

    assert excinfo.value.message == "Failed to generate image."
