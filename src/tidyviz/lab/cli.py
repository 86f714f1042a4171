from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import polars as pl

from tidyviz.core.errors import TidyvizError
from tidyviz.io.config import Settings
from tidyviz.io.datasets import DATASETS, list_datasets, load_dataset, load_table
from tidyviz.session import Session

from .lesson import LESSON_COUNTRIES, run_lesson


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _print_head(df: pl.DataFrame, n: int = 5) -> None:
    """Print the first n rows of a frame."""
    print(df.head(n))


def _cmd_lesson(argv: list[str]) -> int:
    s = Settings.load()
    p = argparse.ArgumentParser(
        prog="lesson",
        description="Build every tutorial figure and export it into --out-dir.",
    )
    p.add_argument("--out-dir", type=str, default=s.out_dir, help="Output directory.")
    p.add_argument("--format", type=str, default=s.format, help="png, svg, pdf, html or json.")
    p.add_argument("--width", type=float, default=s.width, help="Figure width in --unit.")
    p.add_argument("--height", type=float, default=s.height, help="Figure height in --unit.")
    p.add_argument("--unit", type=str, default=s.unit, help="in, cm, mm or px.")
    p.add_argument("--dpi", type=float, default=s.dpi, help="Resolution (dots per inch).")
    p.add_argument("--theme", type=str, default=s.theme, help="Chart theme.")
    p.add_argument(
        "--country",
        dest="countries",
        action="append",
        default=None,
        help=f"Country to keep (repeatable; default {list(LESSON_COUNTRIES)}).",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    out_dir = Path(args.out_dir)
    if not out_dir.exists():
        out_dir.mkdir(parents=True)
        print(f"[INFO] Created output directory {out_dir}")
    countries = tuple(args.countries) if args.countries else LESSON_COUNTRIES

    s = replace(
        s,
        out_dir=str(out_dir),
        format=args.format,
        width=args.width,
        height=args.height,
        unit=args.unit,
        dpi=args.dpi,
        theme=args.theme,
    )
    paths = run_lesson(Session(), out_dir, **s.export_kwargs(), theme=s.theme, countries=countries)
    for path in paths:
        print(f"[INFO] Wrote {path}")
    return 0


def _cmd_show_data(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="show-data", description="Show the head of a bundled dataset or a table file."
    )
    p.add_argument("source", type=str, help="Bundled dataset name or path to csv/parquet/json.")
    p.add_argument("--n", type=int, default=5, help="Rows to display.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    if args.source in DATASETS:
        df = load_dataset(args.source)
    else:
        try:
            df = load_table(args.source)
        except (FileNotFoundError, ValueError) as exc:
            print(f"[WARN] {exc}", file=sys.stderr)
            return 1
    print(f"[INFO] {args.source}: {df.height} rows, {df.width} columns")
    _print_head(df, n=args.n)
    return 0


def _cmd_list_datasets(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="list-datasets", description="List bundled datasets.")
    p.parse_args(argv)
    for name in list_datasets():
        print(name)
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tidyviz", description="tidyviz tutorial utilities CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("lesson")
    sub.add_parser("show-data")
    sub.add_parser("list-datasets")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    try:
        if cmd == "lesson":
            code = _cmd_lesson(rest)
        elif cmd == "show-data":
            code = _cmd_show_data(rest)
        elif cmd == "list-datasets":
            code = _cmd_list_datasets(rest)
        else:
            print(f"Unknown command: {cmd}", file=sys.stderr)
            code = 2
    except (TidyvizError, ValueError, RuntimeError) as exc:
        print(f"[WARN] {exc}", file=sys.stderr)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
