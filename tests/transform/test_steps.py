from __future__ import annotations

import math

import polars as pl
import pytest

from tidyviz.core.errors import JoinKeyError, SchemaError
from tidyviz.transform import (
    Derive,
    DropNulls,
    Filter,
    GroupAggregate,
    Join,
    Rename,
    ReshapeLong,
    ReshapeWide,
    Select,
    Sort,
)
from tidyviz.transform.stats import count, n_rows, summarise_mean_se


def _creatures() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "land": ["A", "A", "B", "B", "B", "A"],
            "colour": ["blue", "black", "blue", "black", "blue", None],
            "age": [1000, 1800, 1500, 500, 1300, 900],
            "weight": [3.0, 5.0, 4.0, 2.5, None, 3.5],
        }
    )


# Filter


@pytest.mark.parametrize(
    "predicate",
    [
        pl.col("age") > 1200,
        pl.col("colour") == "blue",
        (pl.col("land") == "A") & (pl.col("weight") < 4),
        pl.col("age") < 0,
    ],
)
def test_filter_keeps_only_matching_rows_unchanged(predicate: pl.Expr) -> None:
    df = _creatures().with_row_index("row")
    out = Filter(predicate).apply(df)

    assert out.height <= df.height
    assert out.select(predicate.alias("ok")).get_column("ok").all()
    # Retained rows are identical to their input rows
    original = df.filter(pl.col("row").is_in(out.get_column("row").to_list()))
    assert out.equals(original)


def test_filter_drops_rows_where_predicate_is_null() -> None:
    out = Filter(pl.col("colour") == "blue").apply(_creatures())
    assert out.height == 3
    assert out.get_column("colour").null_count() == 0


def test_filter_unknown_column_raises_schema_error() -> None:
    with pytest.raises(SchemaError, match="filter"):
        Filter(pl.col("height") > 1).apply(_creatures())


# Select / Rename


def test_select_by_name_and_position_with_rename() -> None:
    out = Select(("land", 2), rename={"age": "age_years"}).apply(_creatures())
    assert out.columns == ["land", "age_years"]
    assert out.height == 6


def test_select_single_column_string() -> None:
    assert Select("weight").apply(_creatures()).columns == ["weight"]


def test_select_missing_column_or_bad_rename_raises() -> None:
    with pytest.raises(SchemaError):
        Select(("land", "height")).apply(_creatures())
    with pytest.raises(SchemaError, match="rename"):
        Select(("land",), rename={"age": "years"}).apply(_creatures())


def test_rename_requires_existing_source() -> None:
    out = Rename({"colour": "color"}).apply(_creatures())
    assert "color" in out.columns and "colour" not in out.columns
    with pytest.raises(SchemaError):
        Rename({"hue": "color"}).apply(_creatures())


# Derive


def test_derive_then_filter_commutes_when_filter_ignores_derived_column() -> None:
    df = _creatures()
    derive = Derive({"age_k": pl.col("age") / 1000})
    keep = Filter(pl.col("age") > 900)

    assert derive.apply(keep.apply(df)).equals(keep.apply(derive.apply(df)))


def test_independent_derives_commute() -> None:
    df = _creatures()
    a = Derive({"old": pl.col("age") > 1200})
    b = Derive({"heavy": pl.col("weight") > 3})

    ab = b.apply(a.apply(df))
    ba = a.apply(b.apply(df))
    assert set(ab.columns) == set(ba.columns)
    assert ab.equals(ba.select(ab.columns))


def test_derive_evaluates_against_input_and_accepts_literals() -> None:
    out = Derive({"twice": pl.col("age") * 2, "source": "survey"}).apply(_creatures())
    assert out.get_column("twice").to_list()[0] == 2000
    assert out.get_column("source").unique().to_list() == ["survey"]


def test_derive_unknown_column_raises() -> None:
    with pytest.raises(SchemaError, match="derive"):
        Derive({"bmi": pl.col("mass") / 2}).apply(_creatures())


# GroupAggregate


def test_group_aggregate_one_row_per_key_and_matches_direct_computation() -> None:
    df = _creatures()
    out = GroupAggregate(
        ("land", "colour"), {"n": count("weight"), **summarise_mean_se("weight")}
    ).apply(df)

    keys = df.select("land", "colour").unique()
    assert out.height == keys.height
    assert out.select("land", "colour").is_duplicated().sum() == 0

    for row in out.iter_rows(named=True):
        group = df.filter(
            (pl.col("land") == row["land"]) & pl.col("colour").eq_missing(row["colour"])
        )
        values = [v for v in group.get_column("weight").to_list() if v is not None]
        assert row["n"] == len(values)
        if not values:
            assert row["mean"] is None
            continue
        assert row["mean"] == pytest.approx(sum(values) / len(values))
        if len(values) < 2:
            assert row["se"] is None or math.isnan(row["se"])
        else:
            m = sum(values) / len(values)
            sd = math.sqrt(sum((v - m) ** 2 for v in values) / (len(values) - 1))
            assert row["se"] == pytest.approx(sd / math.sqrt(len(values)))


def test_group_aggregate_keeps_first_appearance_order() -> None:
    out = GroupAggregate("land", {"n": n_rows()}).apply(_creatures())
    assert out.get_column("land").to_list() == ["A", "B"]
    assert out.get_column("n").to_list() == [3, 3]


def test_group_aggregate_requires_keys() -> None:
    with pytest.raises(ValueError):
        GroupAggregate((), {"n": n_rows()})
    with pytest.raises(SchemaError):
        GroupAggregate(("region",), {"n": n_rows()}).apply(_creatures())


# Reshape


def test_reshape_long_then_wide_round_trip() -> None:
    wide = pl.DataFrame({"id": [1, 2, 3], "a": [10, 20, 30], "b": [1, None, 3]})
    long = ReshapeLong(("a", "b")).apply(wide)
    assert long.columns == ["id", "variable", "value"]
    assert long.height == 6

    back = ReshapeWide(("id",), on="variable", values="value").apply(long)
    assert back.select(wide.columns).sort("id").equals(wide)


def test_reshape_long_with_explicit_ids_and_names() -> None:
    wide = pl.DataFrame({"id": [1], "site": ["x"], "1995": [5], "2000": [7]})
    out = ReshapeLong(
        ("1995", "2000"), id_columns="id", variable_name="year", value_name="count"
    ).apply(wide)
    assert out.columns == ["id", "year", "count"]
    assert out.get_column("year").to_list() == ["1995", "2000"]


def test_reshape_errors() -> None:
    wide = pl.DataFrame({"id": [1], "a": [1]})
    with pytest.raises(SchemaError):
        ReshapeLong(("b",)).apply(wide)
    dup = pl.DataFrame({"id": [1, 1], "variable": ["a", "a"], "value": [1, 2]})
    with pytest.raises(SchemaError, match="duplicate"):
        ReshapeWide(("id",), on="variable", values="value").apply(dup)


# Join


def test_left_join_preserves_left_rows_with_multiplicity() -> None:
    left = pl.DataFrame({"key": ["a", "b", "c"], "x": [1, 2, 3]})
    right = pl.DataFrame({"key": ["a", "a", "b"], "y": [10, 11, 20]})
    out = Join(right, on="key").apply(left)

    counts = dict(out.group_by("key").len().iter_rows())
    assert counts == {"a": 2, "b": 1, "c": 1}
    unmatched = out.filter(pl.col("key") == "c")
    assert unmatched.get_column("y").to_list() == [None]
    assert sorted(out.filter(pl.col("key") == "a").get_column("y").to_list()) == [10, 11]


def test_inner_join_drops_unmatched() -> None:
    left = pl.DataFrame({"key": ["a", "c"], "x": [1, 3]})
    right = pl.DataFrame({"key": ["a"], "y": [10]})
    assert Join(right, on="key", how="inner").apply(left).height == 1


@pytest.mark.parametrize(
    "left_cols,right_cols,side",
    [(["key"], ["id"], "right"), (["id"], ["key"], "left")],
)
def test_join_missing_key_names_the_side(left_cols, right_cols, side) -> None:
    left = pl.DataFrame({c: [1] for c in left_cols})
    right = pl.DataFrame({c: [1] for c in right_cols})
    with pytest.raises(JoinKeyError, match=f"{side} table"):
        Join(right, on="key").apply(left)


def test_join_without_keys_raises() -> None:
    df = pl.DataFrame({"key": [1]})
    with pytest.raises(JoinKeyError):
        Join(df, on=()).apply(df)


# Sort / DropNulls


def test_sort_and_drop_nulls() -> None:
    df = _creatures()
    assert Sort("age", descending=True).apply(df).get_column("age").to_list()[0] == 1800
    assert DropNulls(("weight",)).apply(df).height == 5
    assert DropNulls().apply(df).height == 4
    with pytest.raises(SchemaError):
        Sort("height").apply(df)
