"""Shared test doubles."""

import asyncio
import base64

import pytest

from imagen_form.generators import ImageGenerator
from imagen_form.models import GeneratedImage


class FakeGenerator(ImageGenerator):
    """Returns canned images or raises a canned error, recording each call."""

    def __init__(self, images=None, error=None):
        self.images = images or []
        self.error = error
        self.calls = []
        self.closed = False

    def name(self) -> str:
        return "fake"

    async def generate(self, prompt, options):
        self.calls.append((prompt, options))
        if self.error is not None:
            raise self.error
        return list(self.images)

    async def aclose(self) -> None:
        self.closed = True


class BlockingGenerator(FakeGenerator):
    """Holds each call open until ``release`` is set."""

    def __init__(self, images=None):
        super().__init__(images=images)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, prompt, options):
        self.calls.append((prompt, options))
        self.started.set()
        await self.release.wait()
        return list(self.images)


@pytest.fixture
def jpeg_image():
    return GeneratedImage(image_bytes=base64.b64decode("AAAA"), mime_type="image/jpeg")
