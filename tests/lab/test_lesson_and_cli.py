from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

import tidyviz.io.export as export_mod
from tidyviz.core.errors import ExportTargetError
from tidyviz.lab import cli
from tidyviz.lab.lesson import run_lesson
from tidyviz.session import Session
from tidyviz.viz import Layout

_STEMS = [
    "creature_weight",
    "creature_weight_pitfall",
    "population_scatter",
    "population_boxplot",
    "population_trends",
    "population_figure",
]


def test_run_lesson_exports_every_figure(tmp_path: Path) -> None:
    session = Session()
    paths = run_lesson(session, tmp_path, format="json", width=18, height=12, unit="cm", dpi=150)

    assert [p.name for p in paths] == [f"{s}.json" for s in _STEMS]
    assert sorted(p.name for p in tmp_path.iterdir()) == sorted(f"{s}.json" for s in _STEMS)
    assert isinstance(session.last, Layout)

    figure = json.loads((tmp_path / "population_figure.json").read_text())
    assert "vconcat" in figure
    weights = json.loads((tmp_path / "creature_weight.json").read_text())
    assert weights["facet"]["field"] == "land"


def test_run_lesson_requires_existing_directory(tmp_path: Path) -> None:
    with pytest.raises(ExportTargetError):
        run_lesson(Session(), tmp_path / "missing", format="json")


def test_cli_list_datasets(capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        cli.main(["list-datasets"])
    assert ei.value.code == 0
    assert capsys.readouterr().out.split() == ["creatures", "populations", "traits"]


def test_cli_show_data(capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        cli.main(["show-data", "traits", "--n", "2"])
    assert ei.value.code == 0
    out = capsys.readouterr().out
    assert "[INFO] traits: 5 rows, 4 columns" in out
    assert "Ursus_arctos" in out


def test_cli_show_data_missing_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        cli.main(["show-data", str(tmp_path / "nope.csv")])
    assert ei.value.code == 1
    assert "[WARN]" in capsys.readouterr().err


def test_cli_lesson_writes_into_new_directory(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TIDYVIZ_FORMAT", raising=False)
    out_dir = tmp_path / "figs"

    with pytest.raises(SystemExit) as ei:
        cli.main(["lesson", "--out-dir", str(out_dir), "--format", "json", "--country", "Norway"])

    assert ei.value.code == 0
    assert len(list(out_dir.glob("*.json"))) == len(_STEMS)
    assert "[INFO] Wrote" in capsys.readouterr().out


def test_cli_lesson_reports_export_errors(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as ei:
        cli.main(["lesson", "--out-dir", str(tmp_path), "--format", "bmp"])
    assert ei.value.code == 1
    assert "unsupported export format" in capsys.readouterr().err


def test_cli_unknown_command() -> None:
    with pytest.raises(SystemExit) as ei:
        cli.main(["plot"])
    assert ei.value.code == 2


def test_cli_lesson_uses_settings_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TIDYVIZ_FORMAT", "html")
    monkeypatch.setenv("TIDYVIZ_UNIT", "cm")
    out_dir = tmp_path / "figs"

    with pytest.raises(SystemExit) as ei:
        cli.main(["lesson", "--out-dir", str(out_dir)])

    assert ei.value.code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == sorted(f"{s}.html" for s in _STEMS)


def test_cli_lesson_reports_missing_converter(tmp_path: Path, monkeypatch, capsys) -> None:
    real_import = export_mod.importlib.import_module

    def fake_import(name: str, *args: Any, **kwargs: Any):
        if name == "vl_convert":
            raise ImportError("No module named 'vl_convert'")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(export_mod.importlib, "import_module", fake_import)
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as ei:
        cli.main(["lesson", "--out-dir", str(tmp_path), "--format", "png"])

    assert ei.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith("[WARN]")
    assert "vl-convert-python" in err
    assert list(tmp_path.iterdir()) == []
