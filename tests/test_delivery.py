"""Tests for download and share actions."""

import asyncio
import logging

import pytest

from merry_style.domain.hats import AspectRatio, HatColor
from merry_style.domain.images import EncodedImage
from merry_style.domain.sessions import SessionState
from merry_style.services.delivery import (
    SHARE_TEXT,
    SHARE_TITLE,
    DeliveryService,
    NoGeneratedImageError,
    ShareUnsupportedError,
    download_filename,
)
from tests.conftest import FakeShareTarget

ORIGINAL = EncodedImage(data=b"original", mime_type="image/jpeg")


def _finished_state(mime_type: str = "image/png") -> SessionState:
    return (
        SessionState()
        .with_image(ORIGINAL, AspectRatio.SQUARE)
        .with_color(HatColor.GOLD)
        .generating()
        .succeeded(EncodedImage(data=b"result", mime_type=mime_type))
    )


def test_download_filename_uses_color_and_subtype() -> None:
    image = EncodedImage(data=b"x", mime_type="image/jpeg")

    assert download_filename("Red", image, 42) == "merry-style-christmas-red-42.jpeg"


def test_download_returns_generated_file() -> None:
    service = DeliveryService(clock_ms=lambda: 1700)

    image_file = service.download(_finished_state("image/webp"))

    assert image_file.filename == "merry-style-christmas-gold-1700.webp"
    assert image_file.content == b"result"
    assert image_file.mime_type == "image/webp"


def test_download_requires_success_state() -> None:
    service = DeliveryService()
    state = SessionState().with_image(ORIGINAL, AspectRatio.SQUARE)

    with pytest.raises(NoGeneratedImageError):
        service.download(state)


def test_share_sends_file_to_target() -> None:
    target = FakeShareTarget()
    service = DeliveryService(share_target=target)

    shared = asyncio.run(service.share(_finished_state()))

    assert shared is True
    image_file, title, text = target.shared[0]
    assert image_file.filename == "merry-christmas.png"
    assert title == SHARE_TITLE
    assert text == SHARE_TEXT


def test_share_without_target_is_unsupported() -> None:
    service = DeliveryService()

    with pytest.raises(ShareUnsupportedError) as excinfo:
        asyncio.run(service.share(_finished_state()))

    assert "download the image" in excinfo.value.message


def test_share_failure_is_logged_not_raised(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logging.getLogger("merry_style"), "propagate", True)
    service = DeliveryService(
        share_target=FakeShareTarget(error=RuntimeError("share sheet closed"))
    )

    with caplog.at_level("ERROR"):
        shared = asyncio.run(service.share(_finished_state()))

    assert shared is False
    assert "Share failed" in caplog.text
