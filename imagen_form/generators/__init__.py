"""
Image generators for Imagen Form.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import GeneratedImage, GenerationOptions


class ImageServiceError(RuntimeError):
    """Base class for failures of the image generation service."""


class ImageGenerationError(ImageServiceError):
    """The service answered, but with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ImageServiceUnavailableError(ImageServiceError):
    """The service could not be reached."""


class ImageGenerator(ABC):
    """Abstract base class for image generators."""

    @abstractmethod
    async def generate(self, prompt: str, options: GenerationOptions) -> list[GeneratedImage]:
        """Generate images from a prompt.

        Args:
            prompt: The generation prompt
            options: Image count, output format and aspect ratio

        Returns:
            The generated images, possibly empty

        Raises:
            ImageServiceError: If the call fails
        """
        pass

    @abstractmethod
    def name(self) -> str:
        """Return the generator name."""
        pass

    async def aclose(self) -> None:
        """Release any held resources."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


# Lazy import keeps httpx off the import path of the models
def get_imagen_generator():
    from .imagen import ImagenGenerator
    return ImagenGenerator
