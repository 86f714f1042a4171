"""
Dataset loading: bundled sample tables and tables read from disk.

Bundled datasets (package data under tidyviz/io/data)
- creatures — one row per surveyed creature: land, plot, colour, age, weight.
- populations — wide population time series: id, genus, species, country and one
  abundance column per survey year (blank cells are missing counts).
- traits — species traits keyed by genus_species: family, diet, redlist.

The schema of each table is an external contract; lessons check the columns they use.
"""

from __future__ import annotations

import io
from importlib import resources
from pathlib import Path

import polars as pl

__all__ = ["DATASETS", "list_datasets", "load_dataset", "load_table"]

DATASETS: dict[str, str] = {
    "creatures": "creatures.csv",
    "populations": "populations.csv",
    "traits": "traits.csv",
}


def list_datasets() -> list[str]:
    """Names accepted by load_dataset, sorted."""
    return sorted(DATASETS)


def load_dataset(name: str) -> pl.DataFrame:
    """
    Load a bundled sample dataset.

    Args:
        name (str): One of list_datasets().

    Returns:
        pl.DataFrame: A fresh frame on every call.

    Raises:
        KeyError: If `name` is not a bundled dataset.
    """
    try:
        filename = DATASETS[name]
    except KeyError:
        raise KeyError(f"unknown dataset {name!r} (available: {list_datasets()})") from None
    raw = resources.files("tidyviz.io").joinpath("data", filename).read_bytes()
    return pl.read_csv(io.BytesIO(raw))


def load_table(path: str | Path) -> pl.DataFrame:
    """
    Read a table from CSV, Parquet, JSON or NDJSON, chosen by file suffix.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: For an unsupported suffix.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Required file not found: {p}")
    suffix = p.suffix.lower()
    if suffix == ".csv":
        return pl.read_csv(p)
    if suffix == ".parquet":
        return pl.read_parquet(p)
    if suffix == ".json":
        return pl.read_json(p)
    if suffix in (".ndjson", ".jsonl"):
        return pl.read_ndjson(p)
    raise ValueError(f"unsupported table format {suffix!r} for {p} (csv, parquet, json, ndjson)")
