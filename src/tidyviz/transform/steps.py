"""
Relational operators as immutable transform steps.

Each step is a frozen dataclass with `apply(df) -> pl.DataFrame`. A step never mutates its
input; Polars returns a new frame for every operation used here.

Checks performed before execution
- Every column a step names (directly or inside an expression) exists in the input.
- Join keys are non-empty and present on both sides.

Steps
- Filter — keep rows where a predicate holds (an empty result is valid).
- Select — project by name or position, optionally renaming.
- Rename — rename columns.
- Derive — add or replace columns from expressions evaluated against the input.
- GroupAggregate — one row per distinct key tuple, in first-appearance order.
- ReshapeLong / ReshapeWide — wide <-> long.
- Join — left (default) or inner join on shared keys.
- Sort / DropNulls — ordering and tidying before plotting.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

import polars as pl

from tidyviz.core.errors import JoinKeyError, SchemaError
from tidyviz.core.schema import (
    polars_schema_errors,
    require_columns,
    require_expr_columns,
    resolve_column,
)

__all__ = [
    "Step",
    "Filter",
    "Select",
    "Rename",
    "Derive",
    "GroupAggregate",
    "ReshapeLong",
    "ReshapeWide",
    "Join",
    "Sort",
    "DropNulls",
]


def _as_tuple(value: Any) -> tuple[Any, ...]:
    if isinstance(value, (str, int)):
        return (value,)
    return tuple(value)


def _as_expr(value: Any) -> pl.Expr:
    return value if isinstance(value, pl.Expr) else pl.lit(value)


class Step:
    """Base class for transform steps. Subclasses set `op` and implement `apply`."""

    op: ClassVar[str] = "step"

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        raise NotImplementedError

    def __call__(self, df: pl.DataFrame) -> pl.DataFrame:
        return self.apply(df)

    def describe(self) -> str:
        return self.op


@dataclass(frozen=True, eq=False)
class Filter(Step):
    """Keep rows where `predicate` is true; rows where it is false or null are dropped."""

    predicate: pl.Expr

    op: ClassVar[str] = "filter"

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        require_expr_columns(df.columns, [self.predicate], where=self.op)
        with polars_schema_errors(self.op):
            return df.filter(self.predicate)


@dataclass(frozen=True, eq=False)
class Select(Step):
    """
    Project columns by name or zero-based position, optionally renaming them.

    Attributes:
        columns (tuple[str | int, ...]): Columns to keep, in output order.
        rename (Mapping[str, str] | None): Old name -> new name, applied after selection.
    """

    columns: tuple[str | int, ...]
    rename: Mapping[str, str] | None = None

    op: ClassVar[str] = "select"

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", _as_tuple(self.columns))

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        names = [resolve_column(df.columns, ref, where=self.op) for ref in self.columns]
        mapping = dict(self.rename or {})
        require_columns(names, mapping, where=f"{self.op} (rename)")
        with polars_schema_errors(self.op):
            out = df.select(names)
            return out.rename(mapping) if mapping else out

    def describe(self) -> str:
        return f"{self.op}({', '.join(map(str, self.columns))})"


@dataclass(frozen=True, eq=False)
class Rename(Step):
    """Rename columns; every source name must exist."""

    mapping: Mapping[str, str]

    op: ClassVar[str] = "rename"

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        require_columns(df.columns, self.mapping, where=self.op)
        with polars_schema_errors(self.op):
            return df.rename(dict(self.mapping))


@dataclass(frozen=True, eq=False)
class Derive(Step):
    """
    Add (or replace) columns computed from expressions.

    All expressions are evaluated against the input table in one pass, so a derive never
    sees the columns it creates and independent derives commute.
    """

    columns: Mapping[str, pl.Expr]

    op: ClassVar[str] = "derive"

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        exprs = {name: _as_expr(e) for name, e in self.columns.items()}
        require_expr_columns(df.columns, exprs.values(), where=f"{self.op}({', '.join(exprs)})")
        with polars_schema_errors(self.op):
            return df.with_columns([e.alias(name) for name, e in exprs.items()])

    def describe(self) -> str:
        return f"{self.op}({', '.join(self.columns)})"


@dataclass(frozen=True, eq=False)
class GroupAggregate(Step):
    """
    Partition rows by `keys` and compute one row of aggregates per partition.

    Attributes:
        keys (tuple[str, ...]): Grouping columns (at least one).
        aggregations (Mapping[str, pl.Expr]): Output name -> aggregate expression
            (see tidyviz.transform.stats).

    Notes:
        Output rows follow the first appearance of each key tuple in the input.
    """

    keys: tuple[str, ...]
    aggregations: Mapping[str, pl.Expr] = field(default_factory=dict)

    op: ClassVar[str] = "group_aggregate"

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", _as_tuple(self.keys))
        if not self.keys:
            raise ValueError("group_aggregate requires at least one key column")

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        require_columns(df.columns, self.keys, where=f"{self.op} (keys)")
        require_expr_columns(df.columns, self.aggregations.values(), where=self.op)
        with polars_schema_errors(self.op):
            return df.group_by(list(self.keys), maintain_order=True).agg(
                [e.alias(name) for name, e in self.aggregations.items()]
            )

    def describe(self) -> str:
        return f"{self.op}(by={list(self.keys)}, {', '.join(self.aggregations)})"


@dataclass(frozen=True, eq=False)
class ReshapeLong(Step):
    """
    Gather `value_columns` into a variable-name column and a value column.

    Every other column (or `id_columns` when given) is replicated on each produced row.
    """

    value_columns: tuple[str, ...]
    id_columns: tuple[str, ...] | None = None
    variable_name: str = "variable"
    value_name: str = "value"

    op: ClassVar[str] = "reshape_long"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value_columns", _as_tuple(self.value_columns))
        if self.id_columns is not None:
            object.__setattr__(self, "id_columns", _as_tuple(self.id_columns))

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        require_columns(df.columns, self.value_columns, where=self.op)
        if self.id_columns is None:
            index = [c for c in df.columns if c not in self.value_columns]
        else:
            require_columns(df.columns, self.id_columns, where=f"{self.op} (id columns)")
            index = list(self.id_columns)
        with polars_schema_errors(self.op):
            return df.unpivot(
                on=list(self.value_columns),
                index=index,
                variable_name=self.variable_name,
                value_name=self.value_name,
            )


@dataclass(frozen=True, eq=False)
class ReshapeWide(Step):
    """
    Spread a long table back to wide: one column per distinct value of `on`.

    Raises:
        SchemaError: If an (index, on) pair occurs more than once, since a wide cell
            cannot hold two values.
    """

    index: tuple[str, ...]
    on: str
    values: str

    op: ClassVar[str] = "reshape_wide"

    def __post_init__(self) -> None:
        object.__setattr__(self, "index", _as_tuple(self.index))

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        require_columns(df.columns, [*self.index, self.on, self.values], where=self.op)
        keys = [*self.index, self.on]
        if df.select(keys).is_duplicated().any():
            raise SchemaError(f"{self.op}: duplicate rows for key columns {keys!r}")
        with polars_schema_errors(self.op):
            return df.pivot(
                on=self.on, index=list(self.index), values=self.values, aggregate_function=None
            )


@dataclass(frozen=True, eq=False)
class Join(Step):
    """
    Join the input (left) with `right` on shared key columns.

    Left joins keep every left row: unmatched rows get nulls in right-only columns, and a
    left row matching k right rows appears k times.
    """

    right: pl.DataFrame
    on: tuple[str, ...]
    how: Literal["left", "inner"] = "left"

    op: ClassVar[str] = "join"

    def __post_init__(self) -> None:
        object.__setattr__(self, "on", _as_tuple(self.on))

    def _check_keys(self, left: pl.DataFrame) -> None:
        if not self.on:
            raise JoinKeyError(f"{self.op}: no key columns given")
        for side, frame in (("left", left), ("right", self.right)):
            missing = [k for k in self.on if k not in frame.columns]
            if missing:
                raise JoinKeyError(
                    f"{self.op}: key(s) {missing!r} missing from {side} table "
                    f"(available: {list(frame.columns)!r})"
                )

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        self._check_keys(df)
        with polars_schema_errors(self.op):
            return df.join(self.right, on=list(self.on), how=self.how)

    def describe(self) -> str:
        return f"{self.op}({self.how}, on={list(self.on)})"


@dataclass(frozen=True, eq=False)
class Sort(Step):
    """Sort rows by one or more columns."""

    by: tuple[str, ...]
    descending: bool = False

    op: ClassVar[str] = "sort"

    def __post_init__(self) -> None:
        object.__setattr__(self, "by", _as_tuple(self.by))

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        require_columns(df.columns, self.by, where=self.op)
        return df.sort(list(self.by), descending=self.descending, maintain_order=True)


@dataclass(frozen=True, eq=False)
class DropNulls(Step):
    """Drop rows with a null in any of `subset` (all columns when None)."""

    subset: tuple[str, ...] | None = None

    op: ClassVar[str] = "drop_nulls"

    def __post_init__(self) -> None:
        if self.subset is not None:
            object.__setattr__(self, "subset", _as_tuple(self.subset))

    def apply(self, df: pl.DataFrame) -> pl.DataFrame:
        if self.subset is None:
            return df.drop_nulls()
        require_columns(df.columns, self.subset, where=self.op)
        return df.drop_nulls(subset=list(self.subset))
