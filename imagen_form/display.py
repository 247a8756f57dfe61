"""Inline terminal preview of generated images.

Images are decoded straight from an ``ImageReference``, so a result can be
shown before (or without) it being saved. term-image picks the best render
style the terminal supports (Kitty, iTerm2, or unicode blocks as fallback).
"""

import io
import logging
import sys
from typing import Optional, TextIO

from PIL import Image
from term_image.exceptions import TermImageError
from term_image.image import AutoImage

from .models import ImageReference

logger = logging.getLogger(__name__)


def load_image(image: ImageReference) -> Image.Image:
    """Decode the encoded bytes of ``image`` into a Pillow image in memory."""
    decoded = Image.open(io.BytesIO(image.data))
    decoded.load()
    return decoded


def preview_image(
    image: ImageReference,
    max_width: Optional[int] = None,
    stream: Optional[TextIO] = None,
) -> bool:
    """Draw ``image`` inline in the terminal.

    Args:
        image: The image to draw
        max_width: Maximum width in terminal columns
        stream: Output stream checked for a terminal (default: stdout)

    Returns:
        True if the image was drawn, False if the output is not a terminal
        or the image could not be rendered.
    """
    stream = stream or sys.stdout
    if not stream.isatty():
        logger.debug("Skipping inline preview: output is not a terminal")
        return False

    try:
        rendered = AutoImage(load_image(image))
        if max_width:
            rendered.set_size(width=max_width)
        rendered.draw()
    except (OSError, ValueError, TermImageError) as e:
        logger.warning("Could not preview %s image: %s", image.mime_type, e)
        return False

    return True
