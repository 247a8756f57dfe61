"""Tests for inline terminal previews."""

import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from imagen_form import display
from imagen_form.models import ImageReference


class FakeStream(io.StringIO):
    def __init__(self, tty: bool):
        super().__init__()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


@pytest.fixture
def png_image():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 3), color="red").save(buffer, format="PNG")
    return ImageReference(data=buffer.getvalue(), mime_type="image/png")


def test_load_image_decodes_in_memory(png_image):
    decoded = display.load_image(png_image)
    assert decoded.size == (4, 3)
    assert decoded.getpixel((0, 0)) == (255, 0, 0)


def test_preview_skipped_when_not_a_terminal(png_image, monkeypatch):
    auto_image = MagicMock()
    monkeypatch.setattr(display, "AutoImage", auto_image)

    assert display.preview_image(png_image, stream=FakeStream(tty=False)) is False
    auto_image.assert_not_called()


def test_preview_draws_unsaved_image(png_image, monkeypatch):
    auto_image = MagicMock()
    monkeypatch.setattr(display, "AutoImage", auto_image)

    assert display.preview_image(png_image, max_width=40, stream=FakeStream(tty=True)) is True

    (pil_image,), _ = auto_image.call_args
    assert pil_image.size == (4, 3)
    auto_image.return_value.set_size.assert_called_once_with(width=40)
    auto_image.return_value.draw.assert_called_once()


def test_preview_of_undecodable_bytes(monkeypatch, caplog):
    monkeypatch.setattr(display, "AutoImage", MagicMock())
    broken = ImageReference(data=b"not an image")

    with caplog.at_level("WARNING", logger="imagen_form.display"):
        assert display.preview_image(broken, stream=FakeStream(tty=True)) is False

    assert "Could not preview image/jpeg image" in caplog.text
