"""
Column-existence checks shared by transform steps and the chart builder.

Purpose
- Fail fast, before any computation, when a step or chart references a column the input
  table does not have.
- Resolve positional column references against a table's schema.
- Translate Polars' own column failures (missing column, duplicate name, schema mismatch)
  into SchemaError so a bad column reference raises the same error type wherever it is
  found. Other Polars errors, such as a ComputeError from comparing a string column with
  a number, propagate unchanged.

Notes
- Only existence is checked. Semantic compatibility (e.g., whether a channel suits a mark)
  is never validated here.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager

import polars as pl

from .errors import SchemaError

__all__ = [
    "require_columns",
    "expr_columns",
    "require_expr_columns",
    "resolve_column",
    "polars_schema_errors",
]


def _available(columns: Sequence[str]) -> str:
    return repr(list(columns))


def require_columns(columns: Sequence[str], needed: Iterable[str], *, where: str) -> None:
    """
    Ensure every name in `needed` is one of `columns`.

    Args:
        columns (Sequence[str]): Column names of the table being checked.
        needed (Iterable[str]): Column names the caller is about to use.
        where (str): Short label for the step or chart doing the lookup (used in the message).

    Raises:
        SchemaError: Naming the first missing columns and the available ones.
    """
    have = set(columns)
    missing = [c for c in needed if c not in have]
    if missing:
        raise SchemaError(
            f"{where}: column(s) {missing!r} not found (available: {_available(columns)})"
        )


def expr_columns(expr: pl.Expr) -> list[str]:
    """Return the input column names an expression reads (literals and pl.len() read none)."""
    return [name for name in expr.meta.root_names() if not name.startswith("^")]


def require_expr_columns(columns: Sequence[str], exprs: Iterable[pl.Expr], *, where: str) -> None:
    """Check that every column read by `exprs` exists in `columns`."""
    needed: list[str] = []
    for e in exprs:
        needed.extend(expr_columns(e))
    require_columns(columns, needed, where=where)


def resolve_column(columns: Sequence[str], ref: str | int, *, where: str) -> str:
    """
    Resolve a column reference given by name or zero-based position.

    Args:
        columns (Sequence[str]): Column names of the table.
        ref (str | int): Column name, or integer position (negative counts from the end).
        where (str): Label used in error messages.

    Returns:
        str: The column name.

    Raises:
        SchemaError: If the name is unknown or the position is out of range.
    """
    if isinstance(ref, bool):
        raise SchemaError(f"{where}: column reference must be a name or position, got {ref!r}")
    if isinstance(ref, int):
        try:
            return columns[ref]
        except IndexError:
            raise SchemaError(
                f"{where}: column position {ref} out of range for {len(columns)} column(s) "
                f"{_available(columns)}"
            ) from None
    require_columns(columns, [ref], where=where)
    return ref


@contextmanager
def polars_schema_errors(where: str) -> Iterator[None]:
    """Re-raise Polars column/schema errors as SchemaError, chaining the original."""
    try:
        yield
    except (
        pl.exceptions.ColumnNotFoundError,
        pl.exceptions.DuplicateError,
        pl.exceptions.SchemaError,
    ) as exc:
        raise SchemaError(f"{where}: {exc}") from exc
