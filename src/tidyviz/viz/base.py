"""
Shared helpers for chart construction: inline data values, channel-type inference, grids.
"""

from __future__ import annotations

import math
from typing import Any

import polars as pl
import polars.selectors as cs

__all__ = ["to_values", "infer_type", "grid_shape"]


def to_values(df: pl.DataFrame) -> list[dict[str, Any]]:
    """
    Convert a frame to JSON-friendly row dicts for inline Vega-Lite data.

    Temporal columns become ISO strings and float NaN becomes null.
    """
    out = df.with_columns(cs.temporal().cast(pl.Utf8), cs.float().fill_nan(None))
    return out.to_dicts()


def infer_type(dtype: pl.DataType) -> str:
    """Map a Polars dtype to a Vega-Lite type code: Q, T or N."""
    if dtype.is_numeric():
        return "Q"
    if dtype.is_temporal():
        return "T"
    return "N"


def grid_shape(n: int, *, ncol: int | None = None, nrow: int | None = None) -> tuple[int, int]:
    """
    Rows and columns of a row-major grid holding `n` cells.

    With no counts the grid is near-square (ncol = ceil(sqrt(n))). A single explicit count
    determines the other; two explicit counts must have room for all cells.

    Returns:
        tuple[int, int]: (nrow, ncol)

    Raises:
        ValueError: If a count is not positive or ncol * nrow < n.

    Examples:
        >>> grid_shape(5)
        (2, 3)
        >>> grid_shape(5, nrow=1)
        (1, 5)
    """
    for name, value in (("ncol", ncol), ("nrow", nrow)):
        if value is not None and value < 1:
            raise ValueError(f"{name} must be >= 1, got {value}")
    n = max(n, 1)
    if ncol is not None and nrow is not None:
        if ncol * nrow < n:
            raise ValueError(f"a {nrow}x{ncol} grid cannot hold {n} panels")
        return nrow, ncol
    if ncol is not None:
        return math.ceil(n / ncol), ncol
    if nrow is not None:
        return nrow, math.ceil(n / nrow)
    ncol = math.ceil(math.sqrt(n))
    return math.ceil(n / ncol), ncol
