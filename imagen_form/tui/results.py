"""Result types for TUI apps."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..models import ImageReference


@dataclass
class FormResult:
    """Result from ImagenFormApp execution.

    - image: The last generated image, if the final call succeeded
    - saved_path: Where the image was saved, if the user saved it
    - error: Error message shown when the app exited
    """
    image: Optional[ImageReference] = None
    saved_path: Optional[Path] = None
    error: Optional[str] = None
