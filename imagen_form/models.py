"""
Data models for Imagen Form.
"""

import base64
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional
import uuid


MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


@dataclass(frozen=True)
class ImageReference:
    """An in-memory image: encoded bytes plus their mime type."""

    data: bytes
    mime_type: str = "image/jpeg"

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str = "image/jpeg") -> "ImageReference":
        return cls(data=base64.b64decode(encoded), mime_type=mime_type)

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        """Render as a data URL, e.g. ``data:image/jpeg;base64,...``."""
        return f"data:{self.mime_type};base64,{self.base64}"

    @property
    def size(self) -> int:
        return len(self.data)

    def suggested_extension(self) -> str:
        return MIME_EXTENSIONS.get(self.mime_type, ".img")

    def default_filename(self) -> str:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        return f"imagen-{stamp}-{uuid.uuid4().hex[:6]}{self.suggested_extension()}"

    def save(self, path: Path) -> Path:
        """Write the image bytes to ``path``, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(self.data)
        return path

    def to_dict(self) -> dict:
        return {
            "mime_type": self.mime_type,
            "size": self.size,
            "data_url": self.data_url,
        }


@dataclass(frozen=True)
class GeneratedImage:
    """One image returned by the generation service."""

    image_bytes: bytes
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class GenerationOptions:
    """Fixed generation options sent with every request."""

    number_of_images: int = 1
    output_mime_type: str = "image/jpeg"
    aspect_ratio: str = "1:1"

    def to_parameters(self) -> dict:
        return {
            "sampleCount": self.number_of_images,
            "aspectRatio": self.aspect_ratio,
            "outputOptions": {"mimeType": self.output_mime_type},
        }


@dataclass
class GenerationOutcome:
    """Result of one generation call.

    Either ``success`` with the returned images (possibly none), or a
    failure carrying the underlying error and its human-readable detail.
    """

    success: bool
    images: list[GeneratedImage] = field(default_factory=list)
    detail: Optional[str] = None
    error: Optional[BaseException] = None

    @classmethod
    def succeeded(cls, images: list[GeneratedImage]) -> "GenerationOutcome":
        return cls(success=True, images=list(images))

    @classmethod
    def failed(cls, error: BaseException) -> "GenerationOutcome":
        return cls(success=False, detail=str(error) or None, error=error)

    @property
    def first_image(self) -> Optional[GeneratedImage]:
        return self.images[0] if self.images else None


@dataclass(frozen=True)
class ControllerState:
    """Immutable snapshot of the request controller's state."""

    prompt: str = ""
    is_loading: bool = False
    result: Optional[ImageReference] = None
    error: Optional[str] = None
    enabled: bool = True

    @property
    def can_generate(self) -> bool:
        return self.enabled and not self.is_loading and bool(self.prompt.strip())

    def to_dict(self) -> dict:
        return {
            "prompt": self.prompt,
            "is_loading": self.is_loading,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "enabled": self.enabled,
        }
