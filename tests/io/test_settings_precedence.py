from __future__ import annotations

from pathlib import Path

from tidyviz.io.config import Settings

_KEYS = [
    "TIDYVIZ_OUT_DIR",
    "TIDYVIZ_FORMAT",
    "TIDYVIZ_WIDTH",
    "TIDYVIZ_HEIGHT",
    "TIDYVIZ_UNIT",
    "TIDYVIZ_DPI",
    "TIDYVIZ_THEME",
]


def _clear_env(monkeypatch) -> None:
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_tidyviz_toml(tmp: Path, content: str) -> Path:
    p = tmp / "tidyviz.toml"
    p.write_text(content)
    return p


def test_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    # Arrange TOML
    _write_tidyviz_toml(
        tmp_path,
        """
        [export]
        out_dir = "figs_toml"
        format = "svg"
        width = 18
        unit = "cm"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    # Arrange ENV that should override TOML
    monkeypatch.setenv("TIDYVIZ_OUT_DIR", "figs_env")
    monkeypatch.setenv("TIDYVIZ_WIDTH", "6.5")
    monkeypatch.setenv("TIDYVIZ_DPI", "150")

    # Act
    s = Settings.load()

    # Assert precedence: env > TOML > defaults
    assert s.out_dir == "figs_env"
    assert s.width == 6.5
    assert s.dpi == 150.0
    assert s.format == "svg"  # from TOML
    assert s.unit == "cm"  # from TOML
    assert s.height == 5.0  # default


def test_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
        [project]
        name = "demo"

        [tool.tidyviz]
        format = "pdf"
        theme = "bw"
        """.strip()
    )
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = Settings.load()

    assert s.format == "pdf"
    assert s.theme == "bw"


def test_settings_ignore_invalid_values(tmp_path: Path, monkeypatch) -> None:
    _write_tidyviz_toml(tmp_path, 'format = "bmp"\nwidth = -3\nunit = "furlong"\n')
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)
    monkeypatch.setenv("TIDYVIZ_DPI", "not-a-number")

    s = Settings.load()

    assert s == Settings()


def test_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _clear_env(monkeypatch)

    s = Settings.load()

    assert s.out_dir == "figures"
    assert s.format == "png"
    assert (s.width, s.height, s.unit, s.dpi) == (7.0, 5.0, "in", 300.0)
    assert s.export_kwargs() == {
        "format": "png",
        "width": 7.0,
        "height": 5.0,
        "unit": "in",
        "dpi": 300.0,
    }
