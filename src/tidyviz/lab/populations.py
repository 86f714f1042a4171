"""
Lesson: reshape wide population counts, join species traits and compare countries.

Steps
1. Combine genus and species into `genus_species`.
2. Gather the per-year abundance columns into long form (year, abundance) and drop
   missing counts.
3. Scale each series to [0, 1] over its own range (`scaled`).
4. Keep a chosen set of countries and left-join the traits table; species without traits
   keep null trait columns.
5. Scatter abundance over time, box-plot abundance per country, draw scaled trends per
   family, and arrange the three into one figure.
"""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from tidyviz.transform import Derive, DropNulls, Filter, Join, Pipeline, ReshapeLong, Sort
from tidyviz.viz import ChartSpec, Labels, Layout, Legend, Palette, Theme, chart

__all__ = [
    "YEAR_COLUMNS",
    "tidy_populations",
    "select_countries",
    "with_traits",
    "abundance_scatter",
    "abundance_boxplot",
    "trend_lines",
    "population_figure",
]

YEAR_COLUMNS: tuple[str, ...] = ("1995", "2000", "2005", "2010", "2015")


def tidy_populations(wide: pl.DataFrame, years: Sequence[str] = YEAR_COLUMNS) -> pl.DataFrame:
    """Long-form population table: id, genus, species, country, genus_species, year, abundance, scaled."""
    low = pl.col("abundance").min().over("id")
    high = pl.col("abundance").max().over("id")
    return Pipeline(
        (
            Derive(
                {"genus_species": pl.concat_str([pl.col("genus"), pl.col("species")], separator="_")}
            ),
            ReshapeLong(tuple(years), variable_name="year", value_name="abundance"),
            Derive({"year": pl.col("year").cast(pl.Int64)}),
            DropNulls(("abundance",)),
            Derive({"scaled": (pl.col("abundance") - low) / (high - low)}),
            Sort(("id", "year")),
        )
    ).run(wide)


def select_countries(long: pl.DataFrame, countries: Sequence[str]) -> pl.DataFrame:
    """Rows whose country is in `countries` (an empty selection gives an empty table)."""
    return Pipeline((Filter(pl.col("country").is_in(list(countries))),)).run(long)


def with_traits(long: pl.DataFrame, traits: pl.DataFrame) -> pl.DataFrame:
    """Left-join species traits on genus_species."""
    return Pipeline((Join(traits, on=("genus_species",)),)).run(long)


def abundance_scatter(df: pl.DataFrame, *, theme: str = "classic") -> ChartSpec:
    """Abundance over survey year, coloured by country."""
    return chart(
        df, "point", x="year:O", y="abundance:Q", color="country:N", style={"size": 60}
    ).add_overlay(
        Theme(theme),
        Labels(title="Population counts", x="Year", y="Abundance", color="Country"),
        Palette(scheme="tableau10"),
        Legend("bottom"),
    )


def abundance_boxplot(df: pl.DataFrame, *, theme: str = "classic") -> ChartSpec:
    """Distribution of abundance per country."""
    return chart(df, "box", x="country:N", y="abundance:Q", fill="country:N").add_overlay(
        Theme(theme),
        Labels(title="Abundance by country", x="Country", y="Abundance"),
        Palette(scheme="tableau10"),
        Legend("none"),
    )


def trend_lines(df: pl.DataFrame, *, theme: str = "classic") -> ChartSpec:
    """Scaled abundance per series over time, one line per population, coloured by family.

    Expects the output of with_traits; series without traits are labelled "unknown".
    """
    base = Pipeline((Derive({"family": pl.col("family").fill_null("unknown")}),)).run(df)
    return (
        chart(base, x="year:O", y="scaled:Q", color="family:N", detail="id:N")
        .add_mark("line")
        .add_mark("point", style={"size": 30})
        .add_overlay(
            Theme(theme),
            Labels(title="Scaled trends", x="Year", y="Scaled abundance", color="Family"),
            Legend("right"),
        )
    )


def population_figure(scatter: ChartSpec, box: ChartSpec, trends: ChartSpec) -> Layout:
    """Scatter and box plot side by side, trends underneath."""
    return ((scatter | box) / trends).with_title("Carnivore populations")
