"""
Summary statistics used inside GroupAggregate.

All helpers return Polars expressions, so they compose with any other aggregation. Missing
values are ignored by the statistic and are not counted in n.
"""

from __future__ import annotations

import polars as pl

__all__ = ["mean", "count", "n_rows", "std_error", "summarise_mean_se"]


def mean(column: str) -> pl.Expr:
    """Arithmetic mean of the non-null values of `column`."""
    return pl.col(column).mean()


def count(column: str) -> pl.Expr:
    """Number of non-null values of `column`."""
    return pl.col(column).is_not_null().sum()


def n_rows() -> pl.Expr:
    """Number of rows in the group, nulls included."""
    return pl.len()


def std_error(column: str) -> pl.Expr:
    """
    Standard error of the mean: sample standard deviation / sqrt(n).

    n is the number of non-null values. Groups with fewer than two values yield null.
    """
    return pl.col(column).std(ddof=1) / count(column).cast(pl.Float64).sqrt()


def summarise_mean_se(
    column: str, *, mean_name: str = "mean", se_name: str = "se"
) -> dict[str, pl.Expr]:
    """Aggregation mapping producing the mean and its standard error for `column`."""
    return {mean_name: mean(column), se_name: std_error(column)}
