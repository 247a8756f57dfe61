"""
Imagen 3 generator for Imagen Form.

Calls the Imagen ``predict`` endpoint of the Gemini (Generative Language) API.
"""

import base64
import binascii
import logging
from typing import Optional

import httpx

from . import (
    ImageGenerator,
    ImageGenerationError,
    ImageServiceUnavailableError,
)
from ..models import GeneratedImage, GenerationOptions

logger = logging.getLogger(__name__)


IMAGEN_MODEL = "imagen-3.0-generate-002"
IMAGEN_API_URL = f"https://generativelanguage.googleapis.com/v1beta/models/{IMAGEN_MODEL}:predict"


class ImagenGenerator(ImageGenerator):
    """
    Imagen 3 image generator.

    One ``predict`` request per call. Only predictions carrying image bytes
    are returned; safety-filtered predictions are dropped.
    """

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        api_url: str = IMAGEN_API_URL,
    ):
        """
        Initialize the Imagen generator.

        Args:
            api_key: Google API key.
            client: Optional preconfigured HTTP client. Closed by ``aclose``.
            api_url: Endpoint override.
        """
        if not api_key:
            raise ValueError("Google API key not provided.")
        self.api_key = api_key
        self.api_url = api_url
        self._client = client or httpx.AsyncClient(timeout=None)

    def name(self) -> str:
        return "imagen"

    def build_payload(self, prompt: str, options: GenerationOptions) -> dict:
        return {
            "instances": [{"prompt": prompt}],
            "parameters": options.to_parameters(),
        }

    async def generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> list[GeneratedImage]:
        """
        Generate images from a prompt using Imagen 3.

        Args:
            prompt: The generation prompt
            options: Generation options (defaults: one square JPEG)

        Returns:
            Generated images in response order
        """
        options = options or GenerationOptions()
        payload = self.build_payload(prompt, options)

        logger.debug("Requesting %d image(s) from %s", options.number_of_images, IMAGEN_MODEL)

        try:
            response = await self._client.post(
                self.api_url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
            )
        except httpx.TransportError as e:
            raise ImageServiceUnavailableError(f"Could not reach image service: {e}") from e

        if not response.is_success:
            raise ImageGenerationError(_error_message(response), status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ImageGenerationError("Image service returned invalid JSON") from e

        return self.parse_predictions(data, options)

    def parse_predictions(self, data: dict, options: GenerationOptions) -> list[GeneratedImage]:
        """Extract images from a ``predict`` response body."""
        # Response format: predictions[].bytesBase64Encoded / mimeType
        images = []
        for prediction in data.get("predictions") or []:
            encoded = prediction.get("bytesBase64Encoded")
            if not encoded:
                if prediction.get("raiFilteredReason"):
                    logger.info("Prediction filtered: %s", prediction["raiFilteredReason"])
                continue
            try:
                image_bytes = base64.b64decode(encoded, validate=True)
            except binascii.Error as e:
                raise ImageGenerationError(f"Image service returned malformed image data: {e}") from e
            images.append(GeneratedImage(
                image_bytes=image_bytes,
                mime_type=prediction.get("mimeType") or options.output_mime_type,
            ))
        return images

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Pull the API's error message out of a failed response."""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
        if message:
            return message

    body = response.text.strip()
    if body:
        return f"Imagen API error {response.status_code}: {body}"
    return f"Imagen API error {response.status_code}"
