"""
Channel mappings: which table column drives which visual property.

A channel is written as a column name with an optional Vega-Lite type suffix, e.g.
"age:Q" or "species:N". Without a suffix the type is inferred from the column's dtype.
Secondary position channels (x2, y2) carry no type; they share the primary axis.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import polars as pl

from tidyviz.core.schema import require_columns

from .base import infer_type

__all__ = ["CHANNELS", "SECONDARY_CHANNELS", "TYPE_CODES", "Channel", "parse_channels"]

CHANNELS: tuple[str, ...] = (
    "x",
    "y",
    "x2",
    "y2",
    "color",
    "fill",
    "size",
    "shape",
    "opacity",
    "detail",
    "text",
)
SECONDARY_CHANNELS: frozenset[str] = frozenset({"x2", "y2"})

TYPE_CODES: dict[str, str] = {
    "Q": "quantitative",
    "N": "nominal",
    "O": "ordinal",
    "T": "temporal",
}


@dataclass(frozen=True)
class Channel:
    """
    One column bound to one visual property.

    Attributes:
        field (str): Column name in the chart's table.
        type (str | None): Type code (Q/N/O/T); None for x2/y2.
        title (str | None): Axis or legend title; defaults to the column name.
    """

    field: str
    type: str | None = None
    title: str | None = None

    @property
    def vega_type(self) -> str | None:
        return TYPE_CODES[self.type] if self.type else None


def _split_shorthand(value: str) -> tuple[str, str | None]:
    head, sep, tail = value.rpartition(":")
    if sep and tail.upper() in TYPE_CODES and head:
        return head, tail.upper()
    return value, None


def _parse_one(name: str, value: Any, schema: Mapping[str, pl.DataType]) -> Channel:
    if isinstance(value, Channel):
        ch = value
    elif isinstance(value, str):
        field, code = _split_shorthand(value)
        ch = Channel(field=field, type=code)
    else:
        raise TypeError(f"channel {name!r} must be a column name or Channel, got {value!r}")
    if ch.type is not None and ch.type not in TYPE_CODES:
        raise ValueError(f"channel {name!r}: unknown type code {ch.type!r}")
    if name in SECONDARY_CHANNELS:
        return Channel(field=ch.field, type=None, title=ch.title)
    if ch.type is None and ch.field in schema:
        return Channel(field=ch.field, type=infer_type(schema[ch.field]), title=ch.title)
    return ch


def parse_channels(
    df: pl.DataFrame, channels: Mapping[str, Any], *, where: str
) -> dict[str, Channel]:
    """
    Parse channel shorthands against a table and check that every column exists.

    Args:
        df (pl.DataFrame): Table the channels refer to.
        channels (Mapping[str, Any]): Channel name -> "column[:T]" or Channel.
        where (str): Label used in error messages.

    Returns:
        dict[str, Channel]: Parsed channels with types resolved.

    Raises:
        ValueError: For an unknown channel name.
        SchemaError: If a referenced column does not exist.
    """
    unknown = [name for name in channels if name not in CHANNELS]
    if unknown:
        raise ValueError(f"{where}: unknown channel(s) {unknown!r} (expected one of {CHANNELS})")
    schema = df.schema
    parsed = {name: _parse_one(name, value, schema) for name, value in channels.items()}
    require_columns(df.columns, [ch.field for ch in parsed.values()], where=where)
    return parsed
