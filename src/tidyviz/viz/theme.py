"""
Chart customization overlays and top-level chart defaults.

An overlay contributes a flat mapping of property keys (e.g. "x_title", "legend_orient",
"grid"). A chart folds its overlays left to right, so a later overlay setting the same key
wins and overlays touching disjoint keys commute.

Property keys understood by the renderer
- title, x_title, y_title, color_title, fill_title, size_title, shape_title
- legend_orient ("right" | "left" | "top" | "bottom" | "none")
- palette ({"scheme": name} or {"range": [colors]})
- label_font_size, title_font_size, chart_title_font_size, x_label_angle
- grid, domain_color, tick_color, view_stroke, background
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

import altair as alt

__all__ = [
    "Overlay",
    "Theme",
    "Labels",
    "Legend",
    "Palette",
    "TextSize",
    "THEMES",
    "resolve_overlays",
    "apply_chart_defaults",
]

THEMES: dict[str, dict[str, Any]] = {
    # White background, black axis lines, no grid.
    "classic": {
        "grid": False,
        "domain_color": "#000000",
        "tick_color": "#000000",
        "view_stroke": None,
        "background": "#ffffff",
    },
    # Light grid, no axis lines or frame.
    "minimal": {
        "grid": True,
        "domain_color": None,
        "tick_color": None,
        "view_stroke": None,
        "background": "#ffffff",
    },
    # Grid plus a black panel border.
    "bw": {
        "grid": True,
        "domain_color": "#000000",
        "tick_color": "#000000",
        "view_stroke": "#000000",
        "background": "#ffffff",
    },
    # Grey panel look.
    "grey": {
        "grid": True,
        "domain_color": "#888888",
        "tick_color": "#888888",
        "view_stroke": None,
        "background": "#ebebeb",
    },
}


class Overlay:
    """Base class: subclasses return the property keys they set."""

    def properties(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class Theme(Overlay):
    """A named bundle of appearance properties (see THEMES)."""

    name: str

    def __post_init__(self) -> None:
        if self.name not in THEMES:
            raise ValueError(f"unknown theme {self.name!r} (available: {sorted(THEMES)})")

    def properties(self) -> dict[str, Any]:
        return dict(THEMES[self.name])


@dataclass(frozen=True)
class Labels(Overlay):
    """Chart title and axis/legend titles. Unset fields leave the property untouched."""

    title: str | None = None
    x: str | None = None
    y: str | None = None
    color: str | None = None
    fill: str | None = None
    size: str | None = None
    shape: str | None = None

    def properties(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.title is not None:
            out["title"] = self.title
        for channel in ("x", "y", "color", "fill", "size", "shape"):
            value = getattr(self, channel)
            if value is not None:
                out[f"{channel}_title"] = value
        return out


@dataclass(frozen=True)
class Legend(Overlay):
    """Legend placement; "none" hides legends."""

    position: Literal["right", "left", "top", "bottom", "none"] = "right"

    def properties(self) -> dict[str, Any]:
        return {"legend_orient": self.position}


@dataclass(frozen=True)
class Palette(Overlay):
    """Colour palette for color/fill channels: a named Vega scheme or explicit colours."""

    scheme: str | None = None
    colors: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if (self.scheme is None) == (self.colors is None):
            raise ValueError("Palette takes exactly one of scheme= or colors=")
        if self.colors is not None:
            object.__setattr__(self, "colors", tuple(self.colors))

    def properties(self) -> dict[str, Any]:
        if self.scheme is not None:
            return {"palette": {"scheme": self.scheme}}
        return {"palette": {"range": list(self.colors or ())}}


@dataclass(frozen=True)
class TextSize(Overlay):
    """Font sizes for axis labels, axis/legend titles and the chart title."""

    base: float = 12.0
    title: float | None = None
    x_label_angle: float | None = None

    def properties(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "label_font_size": self.base,
            "title_font_size": self.base + 2,
            "chart_title_font_size": self.title if self.title is not None else self.base + 4,
        }
        if self.x_label_angle is not None:
            out["x_label_angle"] = self.x_label_angle
        return out


def resolve_overlays(overlays: Iterable[Overlay]) -> dict[str, Any]:
    """Fold overlays left to right; later values of the same key override earlier ones."""
    out: dict[str, Any] = {}
    for overlay in overlays:
        out.update(overlay.properties())
    return out


def apply_chart_defaults(ch: alt.TopLevelMixin) -> alt.TopLevelMixin:
    """Uniform config defaults for a top-level chart; spec-level properties still win."""
    return (
        ch.configure_axis(labelFontSize=12, titleFontSize=12)
        .configure_legend(labelFontSize=12, titleFontSize=12)
        .configure_title(fontSize=14)
    )
