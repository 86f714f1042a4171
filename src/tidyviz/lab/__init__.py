"""
tidyviz.lab — Tutorial lessons built on the transform, viz and io layers.

## Responsibilities
- Walk through the creatures lesson: species rule, age classes, per-plot counts,
  mean/SE per land and species, faceted column chart with error bars.
- Walk through the populations lesson: reshape wide counts long, filter countries,
  scale each series, join traits, scatter/box/trend charts and a combined layout.
- Run both lessons end to end through a Session and export every figure (run_lesson).
- Provide the `tidyviz` command-line entry point (cli).

## Public API
- creatures — species_expr, age_class_expr, tidy_creatures, plot_counts, weight_summary,
  species_chart.
- populations — tidy_populations, select_countries, with_traits, abundance_scatter,
  abundance_boxplot, trend_lines, population_figure.
- lesson — run_lesson, LESSON_COUNTRIES.
- cli — main.

## Import DAG discipline
- Depends on: tidyviz.core, tidyviz.transform, tidyviz.viz, tidyviz.io, tidyviz.session.
- Nothing else in tidyviz imports tidyviz.lab.

## Examples
```python
from pathlib import Path
from tidyviz.lab import run_lesson
from tidyviz.session import Session

out = Path("figures")
out.mkdir(exist_ok=True)
paths = run_lesson(Session(), out, format="svg", width=18, height=12, unit="cm", dpi=300)
```
"""

from .creatures import (
    SPECIES,
    age_class_expr,
    plot_counts,
    species_chart,
    species_expr,
    tidy_creatures,
    weight_summary,
)
from .lesson import LESSON_COUNTRIES, run_lesson
from .populations import (
    YEAR_COLUMNS,
    abundance_boxplot,
    abundance_scatter,
    population_figure,
    select_countries,
    tidy_populations,
    trend_lines,
    with_traits,
)

__all__ = [
    "SPECIES",
    "species_expr",
    "age_class_expr",
    "tidy_creatures",
    "plot_counts",
    "weight_summary",
    "species_chart",
    "YEAR_COLUMNS",
    "tidy_populations",
    "select_countries",
    "with_traits",
    "abundance_scatter",
    "abundance_boxplot",
    "trend_lines",
    "population_figure",
    "LESSON_COUNTRIES",
    "run_lesson",
]
