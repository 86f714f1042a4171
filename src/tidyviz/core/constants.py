"""
tidyviz defaults and unit tables.

Defines export defaults consumed by the settings loader and the unit conversions used by
the exporter. This module is zero-IO and uses only the Python standard library.

Notes:
    - Vega lays figures out at 72 units per inch; the exporter scales rasters by dpi / 72.
    - The library export functions take every dimension explicitly; these defaults are only
      read by tidyviz.io.config.Settings (and thus the CLI).
"""

from __future__ import annotations

__all__ = [
    "VEGA_UNITS_PER_INCH",
    "UNITS_PER_INCH",
    "RASTER_FORMATS",
    "VECTOR_FORMATS",
    "DOCUMENT_FORMATS",
    "EXPORT_FORMATS",
    "DEFAULT_OUT_DIR",
    "DEFAULT_FORMAT",
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_UNIT",
    "DEFAULT_DPI",
    "DEFAULT_THEME",
]

# Vega-Lite's layout unit: one CSS pixel at 72 ppi.
VEGA_UNITS_PER_INCH: float = 72.0

# Length units accepted by the exporter, expressed per inch. "px" depends on dpi.
UNITS_PER_INCH: dict[str, float] = {
    "in": 1.0,
    "cm": 2.54,
    "mm": 25.4,
}

RASTER_FORMATS: frozenset[str] = frozenset({"png"})
VECTOR_FORMATS: frozenset[str] = frozenset({"svg", "pdf"})
# Formats Altair writes without an image converter.
DOCUMENT_FORMATS: frozenset[str] = frozenset({"html", "json"})
EXPORT_FORMATS: frozenset[str] = RASTER_FORMATS | VECTOR_FORMATS | DOCUMENT_FORMATS

DEFAULT_OUT_DIR: str = "figures"
DEFAULT_FORMAT: str = "png"
DEFAULT_WIDTH: float = 7.0
DEFAULT_HEIGHT: float = 5.0
DEFAULT_UNIT: str = "in"
DEFAULT_DPI: float = 300.0
DEFAULT_THEME: str = "classic"
