"""
Imagen Form - a terminal prompt form for Google Imagen image generation.

Type a prompt, press Generate, get one square JPEG back.
"""

from pathlib import Path

# Read version from VERSION file (single source of truth)
_version_file = Path(__file__).parent.parent / "VERSION"
if _version_file.exists():
    __version__ = _version_file.read_text().strip()
else:
    __version__ = "0.1.0"  # Fallback for development

from imagen_form.models import ControllerState, GenerationOptions, ImageReference
from imagen_form.controller import RequestController
from imagen_form.config import Config

__all__ = [
    "__version__",
    "ControllerState",
    "GenerationOptions",
    "ImageReference",
    "RequestController",
    "Config",
]
