from __future__ import annotations

import polars as pl
import pytest

from tidyviz.core.errors import ExportTargetError, JoinKeyError, SchemaError, TidyvizError
from tidyviz.core.schema import (
    expr_columns,
    polars_schema_errors,
    require_columns,
    require_expr_columns,
    resolve_column,
)


def test_error_hierarchy() -> None:
    assert issubclass(SchemaError, TidyvizError)
    assert issubclass(SchemaError, ValueError)
    assert issubclass(JoinKeyError, TidyvizError)
    assert issubclass(JoinKeyError, KeyError)
    assert issubclass(ExportTargetError, TidyvizError)


def test_join_key_error_message_is_not_quoted() -> None:
    # KeyError normally repr()s its argument
    assert str(JoinKeyError("join: key(s) ['id'] missing")) == "join: key(s) ['id'] missing"


def test_require_columns_names_missing_and_available() -> None:
    require_columns(["colour", "age"], ["age"], where="filter")
    with pytest.raises(SchemaError) as ei:
        require_columns(["colour", "age"], ["weight", "age"], where="filter")
    msg = str(ei.value)
    assert msg.startswith("filter:")
    assert "['weight']" in msg
    assert "['colour', 'age']" in msg


def test_expr_columns_ignores_literals_and_len() -> None:
    assert expr_columns(pl.col("age") > 1200) == ["age"]
    assert expr_columns(pl.lit(1)) == []
    assert expr_columns(pl.len()) == []
    assert sorted(expr_columns(pl.col("a") + pl.col("b"))) == ["a", "b"]


def test_require_expr_columns_raises_for_unknown_column() -> None:
    with pytest.raises(SchemaError, match="weight"):
        require_expr_columns(["age"], [pl.col("weight") > 3], where="filter")


def test_resolve_column_by_name_and_position() -> None:
    cols = ["land", "plot", "colour"]
    assert resolve_column(cols, "plot", where="select") == "plot"
    assert resolve_column(cols, 0, where="select") == "land"
    assert resolve_column(cols, -1, where="select") == "colour"


@pytest.mark.parametrize("ref", [3, -4, "weight", True])
def test_resolve_column_rejects_bad_refs(ref) -> None:
    with pytest.raises(SchemaError):
        resolve_column(["land", "plot", "colour"], ref, where="select")


def test_polars_schema_errors_translates_column_not_found() -> None:
    df = pl.DataFrame({"a": [1]})
    with pytest.raises(SchemaError) as ei:
        with polars_schema_errors("select"):
            df.select("missing")
    assert isinstance(ei.value.__cause__, pl.exceptions.ColumnNotFoundError)


def test_polars_compute_errors_pass_through_unchanged() -> None:
    with pytest.raises(pl.exceptions.ComputeError) as ei:
        with polars_schema_errors("filter"):
            raise pl.exceptions.ComputeError("cannot compare string with numeric type")
    assert not isinstance(ei.value, SchemaError)
