"""
Execution context that remembers the most recently constructed chart or layout.

Exporting without naming a chart writes the session's last result. The reference is a
single optional value and export reads it without changing it. Charts and layouts made by
the session are bound to it, so every later construction or composition call on them
(add_mark, add_overlay, facet_by, with_title, with_grid, and the | / + operators) overwrites
the reference with its result. Nothing is stored at module level; create one
Session per script or notebook and pass it to the code that builds figures.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

import polars as pl

from tidyviz.core.errors import ExportTargetError
from tidyviz.io.export import export_chart
from tidyviz.viz.layout import Layout, beside, flow, stack
from tidyviz.viz.spec import ChartSpec, chart

__all__ = ["Session"]

logger = logging.getLogger(__name__)

Figure = ChartSpec | Layout


class Session:
    """
    Holds the "last result" reference used by parameterless export.

    Examples:
        >>> import polars as pl
        >>> from tidyviz.session import Session
        >>> s = Session()
        >>> s.last is None
        True
        >>> a = s.chart(pl.DataFrame({"x": [1, 2]}), "point", x="x:Q")
        >>> s.last is a
        True
    """

    def __init__(self) -> None:
        self._last: Figure | None = None

    @property
    def last(self) -> Figure | None:
        """Most recently constructed chart or layout (None before the first one)."""
        return self._last

    def record(self, figure: Figure) -> Figure:
        """Make `figure` the session's last result and return it."""
        if not isinstance(figure, (ChartSpec, Layout)):
            raise TypeError(f"expected a ChartSpec or Layout, got {type(figure).__name__}")
        self._last = figure
        logger.debug("last result -> %s", type(figure).__name__)
        return figure

    def chart(self, data: pl.DataFrame, mark: str | None = None, **kwargs: Any) -> ChartSpec:
        """Build a chart (see tidyviz.viz.chart) bound to this session and record it."""
        spec = replace(chart(data, mark, **kwargs), session=self)
        self.record(spec)
        return spec

    def beside(self, *items: Figure, title: str | None = None) -> Layout:
        layout = replace(beside(*items, title=title), session=self)
        self.record(layout)
        return layout

    def stack(self, *items: Figure, title: str | None = None) -> Layout:
        layout = replace(stack(*items, title=title), session=self)
        self.record(layout)
        return layout

    def flow(
        self,
        *items: Figure,
        ncol: int | None = None,
        nrow: int | None = None,
        title: str | None = None,
    ) -> Layout:
        layout = replace(flow(*items, ncol=ncol, nrow=nrow, title=title), session=self)
        self.record(layout)
        return layout

    def export(
        self,
        path: str | os.PathLike[str],
        *,
        chart: Figure | None = None,
        width: float,
        height: float,
        unit: str,
        dpi: float,
        format: str | None = None,
    ) -> Path:
        """
        Export `chart`, or the last result when `chart` is None.

        Raises:
            ExportTargetError: If no chart is given and none has been constructed yet
                (nothing is written), or for any target problem raised by export_chart.
        """
        target = chart if chart is not None else self._last
        if target is None:
            raise ExportTargetError(
                f"nothing to export to {str(path)!r}: no chart or layout has been "
                "constructed in this session"
            )
        return export_chart(
            target, path, width=width, height=height, unit=unit, dpi=dpi, format=format
        )
