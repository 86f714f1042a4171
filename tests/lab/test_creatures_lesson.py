from __future__ import annotations

from typing import Any

import polars as pl
import pytest

from tidyviz.io import load_dataset
from tidyviz.lab.creatures import (
    SPECIES,
    age_class_expr,
    plot_counts,
    species_chart,
    species_expr,
    tidy_creatures,
    weight_summary,
)


def find_in_spec(obj: Any, predicate) -> bool:
    """Recursively scan a chart spec dict for a predicate match."""
    if isinstance(obj, dict):
        if predicate(obj):
            return True
        return any(find_in_spec(v, predicate) for v in obj.values())
    if isinstance(obj, list):
        return any(find_in_spec(v, predicate) for v in obj)
    return False


def test_species_rule_concrete_scenario() -> None:
    df = pl.DataFrame(
        {
            "colour": ["blue", "blue", "black", "black", "black"],
            "age": [1000, 1500, 500, 1200, 1800],
        }
    )
    out = df.select(species_expr().alias("species"))
    assert out.get_column("species").to_list() == [
        "reike",
        "naida",
        "ozzyi",
        "whido",
        "strummeri",
    ]


def test_blue_aged_exactly_1200_is_left_undefined() -> None:
    df = pl.DataFrame({"colour": ["blue", "blue", "blue"], "age": [1199, 1200, 1201]})
    assert df.select(species_expr()).to_series().to_list() == ["reike", None, "naida"]


@pytest.mark.parametrize(
    "age,expected",
    [(999, "ozzyi"), (1000, "whido"), (1700, "whido"), (1701, "strummeri")],
)
def test_black_boundaries(age: int, expected: str) -> None:
    df = pl.DataFrame({"colour": ["black"], "age": [age]})
    assert df.select(species_expr()).item() == expected


def test_age_classes() -> None:
    df = pl.DataFrame({"age": [999, 1000, 2000, 2001]})
    assert df.select(age_class_expr()).to_series().to_list() == [
        "young",
        "adult",
        "adult",
        "ancient",
    ]


def test_tidy_creatures_on_bundled_data() -> None:
    raw = load_dataset("creatures")
    tidy = tidy_creatures(raw)
    assert tidy.height == raw.height
    assert set(tidy.get_column("species").drop_nulls().unique().to_list()) <= set(SPECIES)
    assert tidy.get_column("species").null_count() == 0
    assert tidy.get_column("age_class").null_count() == 0


def test_plot_counts() -> None:
    counts = plot_counts(load_dataset("creatures"))
    assert counts.height == 9
    assert counts.get_column("n").to_list() == [5] * 9


def test_weight_summary_bounds() -> None:
    summary = weight_summary(tidy_creatures(load_dataset("creatures")))
    assert summary.columns == ["land", "species", "n", "mean", "se", "lower", "upper"]
    assert summary.select("land", "species").is_duplicated().sum() == 0
    assert int(summary.get_column("n").sum()) == 45
    both = summary.filter(pl.col("se").is_not_nan())
    assert (both.get_column("lower") < both.get_column("mean")).all()
    assert (both.get_column("upper") - both.get_column("mean")).to_list() == pytest.approx(
        both.get_column("se").to_list()
    )


def test_species_chart_error_bars_on_value_axis() -> None:
    summary = weight_summary(tidy_creatures(load_dataset("creatures")))
    spec = species_chart(summary)
    assert spec.facet_grid() == (2, 2)

    d = spec.to_dict()
    assert d["facet"]["field"] == "land"
    assert find_in_spec(d, lambda o: "y2" in o and o["y2"].get("field") == "upper")
    assert not find_in_spec(d, lambda o: "x2" in o)


def test_species_chart_pitfall_is_valid_but_misplaced() -> None:
    summary = weight_summary(tidy_creatures(load_dataset("creatures")))
    d = species_chart(summary, pitfall=True, ncol=3).to_dict()
    assert d["columns"] == 3
    assert find_in_spec(d, lambda o: "x2" in o and o["x2"].get("field") == "upper")
    assert "wrong axis" in d["title"]["text"]
