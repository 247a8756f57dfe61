"""Textual form for prompt entry and image generation.

The app binds its widgets to a ``RequestController``: the input edits the
prompt, the button runs ``generate``, and controller snapshots drive the
button state, status line and image panel.
"""
from .apps import ImagenFormApp
from .results import FormResult

__all__ = ["ImagenFormApp", "FormResult"]
