"""
Export a chart or composite layout to a single file.

Overview
- Resolves the format from the explicit `format` argument and/or the path suffix.
- Validates dimensions through ExportOptions (pydantic) before doing any work.
- Lays the figure out at 72 Vega units per inch, so a width of 7 in becomes 504 units;
  PNG output is rasterised with scale_factor = dpi / 72 (7 in at 300 dpi -> 2100 px).
- Writes to a hidden sibling file, fsyncs it, then renames it over the target. A failed
  export leaves no file behind.

Formats
- png (raster), svg and pdf (vector) go through vl-convert-python.
- html and json are written by Altair directly and need no converter.

Errors
- ExportTargetError: missing/unwritable directory, target is a directory, unsupported
  format, or a format that contradicts the path suffix.
- RuntimeError: image format requested but vl-convert-python is not installed.
- pydantic.ValidationError: non-positive width, height or dpi, or an unknown unit.
"""

from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path
from typing import Literal, Protocol

import altair as alt
from pydantic import BaseModel, ConfigDict, Field

from tidyviz.core.constants import (
    EXPORT_FORMATS,
    RASTER_FORMATS,
    UNITS_PER_INCH,
    VECTOR_FORMATS,
    VEGA_UNITS_PER_INCH,
)
from tidyviz.core.errors import ExportTargetError

from .fs import fsync_path, is_writable_dir, remove_quietly, rename_atomic, temp_sibling

__all__ = ["Renderable", "ExportOptions", "resolve_format", "check_target", "export_chart"]

logger = logging.getLogger(__name__)


class Renderable(Protocol):
    """Anything with ChartSpec/Layout-style rendering (both satisfy it)."""

    def render(
        self, width: float | None = None, height: float | None = None, *, top_level: bool = True
    ) -> alt.TopLevelMixin: ...


class ExportOptions(BaseModel):
    """
    Validated export dimensions.

    Attributes:
        format (str): Resolved file format.
        width (float): Figure width in `unit` (> 0).
        height (float): Figure height in `unit` (> 0).
        unit (Literal["in","cm","mm","px"]): Length unit of width/height.
        dpi (float): Dots per inch (> 0).

    Raises:
        pydantic.ValidationError: On non-positive sizes/dpi or an unknown unit.

    Examples:
        >>> from tidyviz.io.export import ExportOptions
        >>> opts = ExportOptions(format="png", width=10, height=5, unit="cm", dpi=300)
        >>> round(opts.view_size()[0], 2), round(opts.scale_factor, 3)
        (283.46, 4.167)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: str
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    unit: Literal["in", "cm", "mm", "px"]
    dpi: float = Field(..., gt=0)

    def size_inches(self) -> tuple[float, float]:
        per_inch = self.dpi if self.unit == "px" else UNITS_PER_INCH[self.unit]
        return self.width / per_inch, self.height / per_inch

    def view_size(self) -> tuple[float, float]:
        """Figure size in Vega layout units (72 per inch)."""
        w, h = self.size_inches()
        return w * VEGA_UNITS_PER_INCH, h * VEGA_UNITS_PER_INCH

    @property
    def scale_factor(self) -> float:
        return self.dpi / VEGA_UNITS_PER_INCH

    def pixel_size(self) -> tuple[int, int]:
        """Nominal raster size in pixels (before Vega adds axis/legend padding)."""
        w, h = self.size_inches()
        return round(w * self.dpi), round(h * self.dpi)


def resolve_format(path: Path, format: str | None) -> str:
    """
    Decide the output format from `format` and the path suffix.

    Raises:
        ExportTargetError: If neither gives a supported format, or they disagree.
    """
    suffix = path.suffix.lower().lstrip(".")
    fmt = (format or suffix).lower().lstrip(".")
    if not fmt:
        raise ExportTargetError(f"cannot infer export format for {str(path)!r}; pass format=")
    if fmt not in EXPORT_FORMATS:
        raise ExportTargetError(
            f"unsupported export format {fmt!r} for {str(path)!r} "
            f"(supported: {sorted(EXPORT_FORMATS)})"
        )
    if format is not None and suffix and suffix != fmt:
        raise ExportTargetError(
            f"format {fmt!r} does not match the suffix of {str(path)!r} ({suffix!r})"
        )
    return fmt


def check_target(path: Path) -> None:
    """
    Ensure `path` can be created or replaced.

    Raises:
        ExportTargetError: If the parent directory is missing or not writable, or the
            target itself is a directory.
    """
    parent = path.parent if str(path.parent) else Path(".")
    if not parent.is_dir():
        raise ExportTargetError(f"target directory does not exist: {str(parent)!r}")
    if not is_writable_dir(parent):
        raise ExportTargetError(f"target directory is not writable: {str(parent)!r}")
    if path.is_dir():
        raise ExportTargetError(f"target path is a directory: {str(path)!r}")
    if path.exists() and not os.access(path, os.W_OK):
        raise ExportTargetError(f"target file is not writable: {str(path)!r}")


def _require_converter(fmt: str) -> None:
    try:
        importlib.import_module("vl_convert")
    except ImportError as exc:
        raise RuntimeError(
            f"saving {fmt!r} requires vl-convert-python (pip install vl-convert-python)"
        ) from exc


def export_chart(
    target: Renderable,
    path: str | os.PathLike[str],
    *,
    width: float,
    height: float,
    unit: str,
    dpi: float,
    format: str | None = None,
) -> Path:
    """
    Render `target` and write exactly one file at `path`.

    Args:
        target (Renderable): A ChartSpec or Layout.
        path (str | os.PathLike[str]): Output file.
        width (float): Figure width in `unit`.
        height (float): Figure height in `unit`.
        unit (str): "in", "cm", "mm" or "px".
        dpi (float): Resolution in dots per inch.
        format (str | None): Output format; inferred from the suffix when None.

    Returns:
        Path: The written file.

    Raises:
        ExportTargetError: See module notes; nothing is written.
        RuntimeError: Converter missing for png/svg/pdf; nothing is written.
    """
    out = Path(path)
    fmt = resolve_format(out, format)
    opts = ExportOptions(format=fmt, width=width, height=height, unit=unit, dpi=dpi)
    check_target(out)
    if fmt in RASTER_FORMATS | VECTOR_FORMATS:
        _require_converter(fmt)

    view_w, view_h = opts.view_size()
    chart = target.render(view_w, view_h)

    save_kwargs: dict[str, object] = {"format": fmt}
    if fmt in RASTER_FORMATS:
        save_kwargs["scale_factor"] = opts.scale_factor
        save_kwargs["ppi"] = opts.dpi

    tmp = temp_sibling(out)
    try:
        chart.save(str(tmp), **save_kwargs)
        fsync_path(tmp)
        rename_atomic(tmp, out)
    finally:
        remove_quietly(tmp)
    logger.debug(
        "exported %s (%s, %.4g x %.4g %s @ %.4g dpi)", out, fmt, width, height, unit, dpi
    )
    if fmt in RASTER_FORMATS:
        logger.debug("raster plot area %d x %d px", *opts.pixel_size())
    return out
