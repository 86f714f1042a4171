from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from tidyviz.io import list_datasets, load_dataset, load_table


def test_bundled_datasets_load() -> None:
    assert list_datasets() == ["creatures", "populations", "traits"]

    creatures = load_dataset("creatures")
    assert creatures.columns == ["land", "plot", "colour", "age", "weight"]
    assert creatures.height == 45
    assert set(creatures.get_column("colour").unique().to_list()) == {"blue", "black"}

    populations = load_dataset("populations")
    assert populations.columns[:4] == ["id", "genus", "species", "country"]
    assert populations.get_column("2005").null_count() == 2

    traits = load_dataset("traits")
    assert "genus_species" in traits.columns


def test_load_dataset_returns_fresh_frames() -> None:
    a = load_dataset("traits")
    b = load_dataset("traits")
    assert a is not b
    assert a.equals(b)


def test_unknown_dataset_raises_key_error() -> None:
    with pytest.raises(KeyError, match="available"):
        load_dataset("penguins")


def test_load_table_by_suffix(tmp_path: Path) -> None:
    df = pl.DataFrame({"a": [1, 2], "b": ["x", "y"]})
    df.write_csv(tmp_path / "t.csv")
    df.write_parquet(tmp_path / "t.parquet")
    df.write_ndjson(tmp_path / "t.ndjson")

    for name in ("t.csv", "t.parquet", "t.ndjson"):
        assert load_table(tmp_path / name).equals(df)


def test_load_table_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Required file not found"):
        load_table(tmp_path / "missing.csv")
    (tmp_path / "t.xlsx").write_bytes(b"")
    with pytest.raises(ValueError, match="unsupported"):
        load_table(tmp_path / "t.xlsx")
