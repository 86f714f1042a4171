"""
Lesson: classify surveyed creatures into species and chart mean weight per land.

Steps
1. Derive `species` from colour and age, and `age_class` from age.
2. Count creatures per plot, then summarise weight per (land, species): mean,
   standard error and the mean +/- SE bounds.
3. Draw a column chart of the means with error bars, one panel per land.

Species rule (ages in years)
- blue,  age < 1200          -> reike
- blue,  age > 1200          -> naida
- black, age < 1000          -> ozzyi
- black, 1000 <= age <= 1700 -> whido
- black, age > 1700          -> strummeri

A blue creature aged exactly 1200 matches neither blue branch. The rule leaves that case
undefined, so `species_expr` yields null for it instead of picking a side.

Error-bar pitfall
The bounds of an error bar belong on the value axis (y/y2), next to the mean they
summarise. `species_chart(..., pitfall=True)` maps them to x/x2 instead: the chart
spec is still valid and renders, but draws horizontal bars at the wrong place. Column existence is
the only thing checked, so this mistake is never caught automatically.
"""

from __future__ import annotations

import polars as pl

from tidyviz.transform import Derive, GroupAggregate, Pipeline, Sort
from tidyviz.transform.stats import count, n_rows, summarise_mean_se
from tidyviz.viz import ChartSpec, Labels, Legend, TextSize, Theme, chart

__all__ = [
    "SPECIES",
    "species_expr",
    "age_class_expr",
    "tidy_creatures",
    "plot_counts",
    "weight_summary",
    "species_chart",
]

SPECIES: tuple[str, ...] = ("reike", "naida", "ozzyi", "whido", "strummeri")


def species_expr(colour: str = "colour", age: str = "age") -> pl.Expr:
    """Species from colour and age (null where the rule is undefined)."""
    c = pl.col(colour)
    a = pl.col(age)
    return (
        pl.when((c == "blue") & (a < 1200))
        .then(pl.lit("reike"))
        .when((c == "blue") & (a > 1200))
        .then(pl.lit("naida"))
        .when((c == "black") & (a < 1000))
        .then(pl.lit("ozzyi"))
        .when((c == "black") & (a >= 1000) & (a <= 1700))
        .then(pl.lit("whido"))
        .when((c == "black") & (a > 1700))
        .then(pl.lit("strummeri"))
        .otherwise(pl.lit(None, dtype=pl.Utf8))
    )


def age_class_expr(age: str = "age") -> pl.Expr:
    """young (< 1000), adult (1000-2000 inclusive), ancient (> 2000)."""
    a = pl.col(age)
    return (
        pl.when(a < 1000)
        .then(pl.lit("young"))
        .when(a <= 2000)
        .then(pl.lit("adult"))
        .when(a > 2000)
        .then(pl.lit("ancient"))
        .otherwise(pl.lit(None, dtype=pl.Utf8))
    )


def tidy_creatures(raw: pl.DataFrame) -> pl.DataFrame:
    """Add `species` and `age_class` columns to the raw survey table."""
    return Pipeline((Derive({"species": species_expr(), "age_class": age_class_expr()}),)).run(
        raw
    )


def plot_counts(creatures: pl.DataFrame) -> pl.DataFrame:
    """Number of creatures surveyed per land and plot."""
    return Pipeline(
        (GroupAggregate(("land", "plot"), {"n": n_rows()}), Sort(("land", "plot")))
    ).run(creatures)


def weight_summary(creatures: pl.DataFrame) -> pl.DataFrame:
    """
    Mean weight and its standard error per land and species.

    Output columns: land, species, n, mean, se, lower, upper.
    """
    return Pipeline(
        (
            GroupAggregate(
                ("land", "species"),
                {"n": count("weight"), **summarise_mean_se("weight")},
            ),
            Derive(
                {
                    "lower": pl.col("mean") - pl.col("se"),
                    "upper": pl.col("mean") + pl.col("se"),
                }
            ),
            Sort(("land", "species")),
        )
    ).run(creatures)


def species_chart(
    summary: pl.DataFrame,
    *,
    theme: str = "classic",
    pitfall: bool = False,
    ncol: int | None = None,
) -> ChartSpec:
    """
    Faceted column chart of mean weight per species, with standard-error bars.

    Args:
        summary (pl.DataFrame): Output of weight_summary.
        theme (str): Theme name.
        pitfall (bool): Map the error-bar bounds to x/x2 (the categorical axis) to show
            the mistake described in the module notes.
        ncol (int | None): Panels per row; near-square when None.
    """
    title = "Creature weight by species"
    base = chart(summary, x="species:N", y="mean:Q", fill="species:N").add_mark("column")
    if pitfall:
        title += " (error bars on the wrong axis)"
        base = base.add_mark("errorbar", x="lower", x2="upper", style={"color": "black"})
    else:
        base = base.add_mark("errorbar", y="lower", y2="upper", style={"color": "black"})
    return base.facet_by("land", ncol=ncol).add_overlay(
        Theme(theme),
        Labels(title=title, x="Species", y="Mean weight (kg)"),
        Legend("none"),
        TextSize(base=11, x_label_angle=-45),
    )
