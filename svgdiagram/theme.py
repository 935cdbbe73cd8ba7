"""Theme registry: named palettes plus layout and typography defaults.

Palettes and the render config are immutable values built once at import time
and handed to every component that needs them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

RankDirection = Literal["TB", "BT", "LR", "RL"]

RANK_DIRECTIONS: tuple[str, ...] = ("TB", "BT", "LR", "RL")
DEFAULT_THEME = "light"


@dataclass(frozen=True)
class RenderConfig:
    """Typography, spacing and layout defaults shared by the whole pipeline."""

    font_family: str = (
        "Inter, -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"
    )
    title_font_size: int = 16
    line_height: float = 1.4
    padding: int = 20
    border_radius: int = 8
    rankdir: str = "TB"
    nodesep: int = 50
    ranksep: int = 70
    margin: int = 25


DEFAULT_CONFIG = RenderConfig()


@dataclass(frozen=True)
class Palette:
    """A named set of semantic colors."""

    name: str
    colors: Mapping[str, str] = field(default_factory=dict)

    def __getitem__(self, key: str) -> str:
        return self.colors[key]

    def color(self, key: str | None) -> str:
        """Color for a semantic key, falling back to the ``default`` entry."""
        if key and key in self.colors:
            return self.colors[key]
        return self.colors["default"]


_LIGHT = {
    "background": "#ffffff",
    "text": "#111827",
    "textFaded": "#6b7280",
    "border": "#e5e7eb",
    "arrow": "#6b7280",
    "default": "#ffffff",
    "person": "#e0f2fe",
    "system": "#dcfce7",
    "database": "#fef9c3",
    "api": "#fae8ff",
    "tableau": "#f3f4f6",
    "hover": "#eef2f7",
    "clusterBg": "#f9fafb",
    "modalBg": "#ffffff",
    "modalShadow": "rgba(0,0,0,0.10)",
}

# GitHub-dark inspired
_DARK = {
    "background": "#0d1117",
    "text": "#e5e7eb",
    "textFaded": "#9ca3af",
    "border": "#30363d",
    "arrow": "#8b949e",
    "default": "#161b22",
    "person": "#0b2f53",
    "system": "#113227",
    "database": "#3b2f0b",
    "api": "#2b213a",
    "tableau": "#1f242d",
    "hover": "#21262d",
    "clusterBg": "#161b22",
    "modalBg": "#161b22",
    "modalShadow": "rgba(0,0,0,0.45)",
}

THEMES: Mapping[str, Palette] = MappingProxyType(
    {
        "light": Palette("light", MappingProxyType(_LIGHT)),
        "dark": Palette("dark", MappingProxyType(_DARK)),
    }
)


def resolve_palette(name: str | None) -> Palette:
    """Return the palette registered under ``name``; unknown names get ``light``."""
    key = (name or "").strip().lower()
    return THEMES.get(key, THEMES[DEFAULT_THEME])


def normalize_rank_direction(value: str | None, default: str = "TB") -> str:
    direction = (value or "").strip().upper()
    return direction if direction in RANK_DIRECTIONS else default
