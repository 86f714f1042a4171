"""
tidyviz.io — Settings, dataset loading and chart export.

## Responsibilities
- Load bundled sample datasets and tables from CSV/Parquet/JSON files.
- Export charts and layouts to png/svg/pdf/html/json with explicit size, unit and dpi.
- Guarantee that an export writes exactly one file or nothing (tmp -> fsync -> rename).
- Carry runtime defaults for the CLI (env > TOML > defaults).

## Public API
- Settings — defaults for out_dir/format/width/height/unit/dpi/theme.
- load_dataset, list_datasets, load_table — dataset access.
- export_chart, ExportOptions — file export.

## Import DAG discipline
- Depends on: tidyviz.core, polars, altair, pydantic (and stdlib); vl-convert-python for
  image formats at call time.
- Must not import tidyviz.lab; renders anything exposing `render(width, height)`.

## Examples
```python
from tidyviz.io import export_chart, load_dataset
from tidyviz.viz import chart

df = load_dataset("creatures")
spec = chart(df, "point", x="age:Q", y="weight:Q", color="colour:N")
export_chart(spec, "figures/age_weight.png", width=7, height=5, unit="in", dpi=300)
```
"""

from .config import Settings
from .datasets import DATASETS, list_datasets, load_dataset, load_table
from .export import ExportOptions, export_chart

__all__ = [
    "Settings",
    "DATASETS",
    "list_datasets",
    "load_dataset",
    "load_table",
    "ExportOptions",
    "export_chart",
]
