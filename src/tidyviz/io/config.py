"""
Configuration for tidyviz exports and the command-line interface.

Defines Settings, a frozen dataclass carrying the default output directory, file format,
figure size, unit, resolution and theme. Defaults are sourced from tidyviz.core.constants
(the single source of truth); the library's export functions never read Settings and take
every dimension explicitly.

Precedence
- environment (TIDYVIZ_*) > TOML (./tidyviz.toml or [tool.tidyviz] in ./pyproject.toml)
  > defaults.

Notes
- Invalid or unsupported values in env/TOML are ignored and the previous value is kept.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from tidyviz.core.constants import DEFAULT_DPI as CORE_DPI
from tidyviz.core.constants import DEFAULT_FORMAT as CORE_FORMAT
from tidyviz.core.constants import DEFAULT_HEIGHT as CORE_HEIGHT
from tidyviz.core.constants import DEFAULT_OUT_DIR as CORE_OUT_DIR
from tidyviz.core.constants import DEFAULT_THEME as CORE_THEME
from tidyviz.core.constants import DEFAULT_UNIT as CORE_UNIT
from tidyviz.core.constants import DEFAULT_WIDTH as CORE_WIDTH
from tidyviz.core.constants import EXPORT_FORMATS, UNITS_PER_INCH

__all__ = ["Settings"]

_UNITS: frozenset[str] = frozenset(UNITS_PER_INCH) | {"px"}


def _positive_float(v: Any) -> float | None:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if f > 0 else None


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for exports.

    Attributes:
        out_dir (str): Directory the CLI writes figures into.
        format (str): Default export format ("png", "svg", "pdf", "html", "json").
        width (float): Default figure width, in `unit`.
        height (float): Default figure height, in `unit`.
        unit (str): "in", "cm", "mm" or "px".
        dpi (float): Resolution in dots per inch (raster output scales by dpi / 72).
        theme (str): Theme applied to lesson charts (see tidyviz.viz.theme.THEMES).

    Examples:
        >>> from tidyviz.io import Settings
        >>> Settings(width=18, height=12, unit="cm")  # doctest: +ELLIPSIS
        Settings(...)
    """

    out_dir: str = CORE_OUT_DIR
    format: str = CORE_FORMAT
    width: float = CORE_WIDTH
    height: float = CORE_HEIGHT
    unit: str = CORE_UNIT
    dpi: float = CORE_DPI
    theme: str = CORE_THEME

    @classmethod
    def _apply_mapping(cls, base: Settings, cfg: dict[str, Any] | None) -> Settings:
        """Apply a loose config mapping onto Settings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "out_dir" in cfg and isinstance(cfg["out_dir"], str) and cfg["out_dir"]:
            s = replace(s, out_dir=cfg["out_dir"])

        if "format" in cfg and isinstance(cfg["format"], str):
            fmt = cfg["format"].strip().lower().lstrip(".")
            if fmt in EXPORT_FORMATS:
                s = replace(s, format=fmt)

        for key in ("width", "height", "dpi"):
            if key in cfg:
                value = _positive_float(cfg[key])
                if value is not None:
                    s = replace(s, **{key: value})

        if "unit" in cfg and isinstance(cfg["unit"], str):
            unit = cfg["unit"].strip().lower()
            if unit in _UNITS:
                s = replace(s, unit=unit)

        if "theme" in cfg and isinstance(cfg["theme"], str) and cfg["theme"].strip():
            s = replace(s, theme=cfg["theme"].strip().lower())

        return s

    @classmethod
    def from_env(cls, base: Settings | None = None, prefix: str = "TIDYVIZ_") -> Settings:
        """
        Build Settings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - TIDYVIZ_OUT_DIR
            - TIDYVIZ_FORMAT
            - TIDYVIZ_WIDTH, TIDYVIZ_HEIGHT
            - TIDYVIZ_UNIT ("in" | "cm" | "mm" | "px")
            - TIDYVIZ_DPI
            - TIDYVIZ_THEME
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in ("out_dir", "format", "width", "height", "unit", "dpi", "theme"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Build Settings from a TOML file.

        Search order when `path` is None:
            1) ./tidyviz.toml (with either an [export] table or top-level keys)
            2) ./pyproject.toml under [tool.tidyviz]

        Returns defaults if no file is present or none parses.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "tidyviz.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("tidyviz") if isinstance(tool, dict) else None
            elif isinstance(data.get("export"), dict):
                cfg = data["export"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Load Settings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (tidyviz.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)

    def export_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for tidyviz.io.export.export_chart (format and dimensions)."""
        return {
            "format": self.format,
            "width": self.width,
            "height": self.height,
            "unit": self.unit,
            "dpi": self.dpi,
        }
