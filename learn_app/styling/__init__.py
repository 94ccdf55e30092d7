"""Styling module for the LearnQt player shell."""

from .color_palette import ColorPalette, PlayerColors
from .styles import Styles

__all__ = ["ColorPalette", "PlayerColors", "Styles"]
