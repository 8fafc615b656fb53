"""Color palette for the host console and player windows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the application."""

    TEXT_PRIMARY = ThemeColors(light="#1F1F1F", dark="#F5F5F5")
    TEXT_ON_ACCENT = ThemeColors(light="#FFFFFF", dark="#FFFFFF")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    BACKGROUND_SECONDARY = ThemeColors(light="#F3F0FA", dark="#2D2A35")

    BORDER_PRIMARY = ThemeColors(light="#D1D1D1", dark="#555555")

    BUTTON_PRIMARY_BG = ThemeColors(light="#6D28D9", dark="#8B5CF6")
    BUTTON_HOVER_BG = ThemeColors(light="#E9E3F7", dark="#47405A")

    SUCCESS = ThemeColors(light="#15803D", dark="#4ADE80")
    ERROR = ThemeColors(light="#DC2626", dark="#F87171")

    # One color per answer slot, A to D.
    OPTION_COLORS = (
        ThemeColors(light="#E21B3C", dark="#E21B3C"),
        ThemeColors(light="#1368CE", dark="#1368CE"),
        ThemeColors(light="#D89E00", dark="#D89E00"),
        ThemeColors(light="#26890C", dark="#26890C"),
    )
