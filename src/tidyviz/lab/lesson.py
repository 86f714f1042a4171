"""
Run both lessons end to end and export every figure.

Figures (file stems)
- creature_weight — faceted columns with standard-error bars.
- creature_weight_pitfall — the same chart with the bars on the categorical axis.
- population_scatter, population_boxplot, population_trends — single charts.
- population_figure — the three population charts arranged in one layout. It is the
  last figure built, and is exported through the session's last result.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from tidyviz.core.constants import (
    DEFAULT_DPI,
    DEFAULT_FORMAT,
    DEFAULT_HEIGHT,
    DEFAULT_THEME,
    DEFAULT_UNIT,
    DEFAULT_WIDTH,
)
from tidyviz.core.errors import ExportTargetError
from tidyviz.io.datasets import load_dataset
from tidyviz.session import Session
from tidyviz.viz import ChartSpec, Layout

from .creatures import species_chart, tidy_creatures, weight_summary
from .populations import (
    abundance_boxplot,
    abundance_scatter,
    population_figure,
    select_countries,
    tidy_populations,
    trend_lines,
    with_traits,
)

__all__ = ["LESSON_COUNTRIES", "run_lesson"]

logger = logging.getLogger(__name__)

LESSON_COUNTRIES: tuple[str, ...] = ("Canada", "Norway", "Poland")


def run_lesson(
    session: Session,
    out_dir: str | os.PathLike[str],
    *,
    format: str = DEFAULT_FORMAT,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    unit: str = DEFAULT_UNIT,
    dpi: float = DEFAULT_DPI,
    theme: str = DEFAULT_THEME,
    countries: Sequence[str] = LESSON_COUNTRIES,
) -> list[Path]:
    """
    Build every lesson figure, export each one and return the written paths.

    Args:
        session (Session): Receives each figure as its last result.
        out_dir (str | os.PathLike[str]): Existing directory for the exported files.
        format (str): Export format, also used as the file suffix.
        width (float): Figure width in `unit`.
        height (float): Figure height in `unit`.
        unit (str): "in", "cm", "mm" or "px".
        dpi (float): Resolution in dots per inch.
        theme (str): Theme name for all charts.
        countries (Sequence[str]): Countries kept in the population lesson.

    Returns:
        list[Path]: Exported files, in the order listed in the module notes.

    Raises:
        ExportTargetError: If `out_dir` is not an existing directory.
    """
    out = Path(out_dir)
    if not out.is_dir():
        raise ExportTargetError(f"output directory does not exist: {str(out)!r}")
    dims: dict[str, Any] = {
        "format": format,
        "width": width,
        "height": height,
        "unit": unit,
        "dpi": dpi,
    }
    written: list[Path] = []

    def _export(stem: str, figure: ChartSpec | Layout | None = None) -> None:
        path = out / f"{stem}.{format}"
        written.append(session.export(path, chart=figure, **dims))
        logger.info("wrote %s", path)

    summary = weight_summary(tidy_creatures(load_dataset("creatures")))
    for stem, pitfall in (("creature_weight", False), ("creature_weight_pitfall", True)):
        spec = species_chart(summary, theme=theme, pitfall=pitfall)
        session.record(spec)
        _export(stem, spec)

    long = with_traits(
        select_countries(tidy_populations(load_dataset("populations")), countries),
        load_dataset("traits"),
    )
    scatter = abundance_scatter(long, theme=theme)
    box = abundance_boxplot(long, theme=theme)
    trends = trend_lines(long, theme=theme)
    for stem, spec in (
        ("population_scatter", scatter),
        ("population_boxplot", box),
        ("population_trends", trends),
    ):
        session.record(spec)
        _export(stem, spec)

    session.record(population_figure(scatter, box, trends))
    _export("population_figure")
    return written
