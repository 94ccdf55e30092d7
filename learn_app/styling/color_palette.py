"""Color palette for the LearnQt player shell, matching the player page."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlayerColors:
    """Named colors shared by the Qt shell stylesheets."""

    background: str = "#0b1120"
    surface: str = "#111a30"
    text_primary: str = "#f5f7ff"
    text_muted: str = "#94a3b8"
    accent: str = "#1f9aa5"
    accent_hover: str = "#16808a"
    timer: str = "#facc15"
    timer_low: str = "#f87171"
    danger: str = "#b91c1c"


ColorPalette = PlayerColors()
