"""
Request controller for Imagen Form.

Owns the form state (prompt, loading flag, result image, error message) and
drives one generation call at a time. State changes are published to
subscribers as immutable ``ControllerState`` snapshots.

All methods are expected to run on a single event loop. The loading check in
``generate`` happens before the first ``await``, which is what keeps a second
call from starting while one is in flight.
"""

import logging
from typing import Callable, Optional

from .config import Config
from .generators import ImageGenerator, ImageServiceError, get_imagen_generator
from .models import ControllerState, GenerationOptions, GenerationOutcome, ImageReference

logger = logging.getLogger(__name__)


MISSING_KEY_MESSAGE = "API_KEY is not defined in the environment variables. Please configure it."
NO_IMAGE_MESSAGE = "No image was generated. Please try a different prompt or model."
UNKNOWN_ERROR_DETAIL = "An unknown error occurred."

StateCallback = Callable[[ControllerState], None]


class RequestController:
    """Single-request state machine around an image generator.

    Usage:
        controller = RequestController(api_key="...")
        controller.prompt = "a red cube on a white background"
        await controller.generate()
        if controller.result:
            controller.result.save(Path("cube.jpg"))
        else:
            print(controller.error)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        generator: Optional[ImageGenerator] = None,
        options: Optional[GenerationOptions] = None,
        initial_prompt: str = "",
    ):
        """
        Initialize the controller.

        Args:
            api_key: Google API key. Checked once, here.
            generator: Image generator to use instead of building one from
                ``api_key``.
            options: Generation options sent with every call.
            initial_prompt: Starting prompt text.
        """
        self._prompt = initial_prompt
        self._is_loading = False
        self._result: Optional[ImageReference] = None
        self._error: Optional[str] = None
        self._subscribers: list[StateCallback] = []

        self.options = options or GenerationOptions()
        self._owns_generator = generator is None

        if generator is None and api_key:
            generator = get_imagen_generator()(api_key=api_key)

        self._generator = generator
        if self._generator is None:
            logger.warning("No API key configured; image generation disabled")
            self._error = MISSING_KEY_MESSAGE

    @classmethod
    def from_config(cls, config: Config, initial_prompt: Optional[str] = None) -> "RequestController":
        if initial_prompt is None:
            initial_prompt = config.defaults.initial_prompt
        return cls(api_key=config.api_keys.google, initial_prompt=initial_prompt)

    @property
    def prompt(self) -> str:
        return self._prompt

    @prompt.setter
    def prompt(self, value: str) -> None:
        if value == self._prompt:
            return
        self._prompt = value
        self._notify()

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def result(self) -> Optional[ImageReference]:
        return self._result

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def enabled(self) -> bool:
        """False when no credential was configured at construction."""
        return self._generator is not None

    def snapshot(self) -> ControllerState:
        return ControllerState(
            prompt=self._prompt,
            is_loading=self._is_loading,
            result=self._result,
            error=self._error,
            enabled=self.enabled,
        )

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """Register a state-change callback. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        state = self.snapshot()
        for callback in list(self._subscribers):
            callback(state)

    async def generate(self) -> None:
        """Run one generation call and fold its outcome into the state.

        Does nothing if the prompt is blank, a call is already in flight, or
        the controller is disabled. Never raises for service failures.
        """
        if not self._prompt.strip() or self._is_loading or self._generator is None:
            return

        self._is_loading = True
        self._error = None
        self._result = None
        self._notify()

        try:
            outcome = await self._call_service(self._prompt)

            if not outcome.success:
                self._log_failure(outcome)
                self._error = f"Failed to generate image: {outcome.detail or UNKNOWN_ERROR_DETAIL}"
            elif outcome.first_image is not None:
                image = outcome.first_image
                self._result = ImageReference(data=image.image_bytes, mime_type=image.mime_type)
            else:
                self._error = NO_IMAGE_MESSAGE
        finally:
            self._is_loading = False
            self._notify()

    async def _call_service(self, prompt: str) -> GenerationOutcome:
        try:
            images = await self._generator.generate(prompt, self.options)
        except Exception as e:
            return GenerationOutcome.failed(e)
        logger.debug("Generation returned %d image(s)", len(images))
        return GenerationOutcome.succeeded(images)

    def _log_failure(self, outcome: GenerationOutcome) -> None:
        # Service errors are expected; anything else is a bug and gets a traceback
        if isinstance(outcome.error, ImageServiceError):
            logger.error("Error generating image: %s", outcome.detail)
        else:
            logger.error("Unexpected error generating image: %r", outcome.error, exc_info=outcome.error)

    async def aclose(self) -> None:
        """Close the generator if this controller created it."""
        if self._generator is not None and self._owns_generator:
            await self._generator.aclose()
