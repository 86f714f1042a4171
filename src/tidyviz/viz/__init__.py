"""
tidyviz.viz — Declarative chart specs, overlays and composite layouts over Altair.

## Responsibilities
- Map table columns to visual channels and layer marks into immutable ChartSpecs.
- Validate channel columns against the table when a spec is built.
- Apply customization overlays (theme, labels, legend, palette, text size) in order.
- Arrange charts into beside / stack / flow layouts.

## Public API
- spec — ChartSpec, chart, MARKS.
- channels — Channel, parse_channels.
- theme — Theme, Labels, Legend, Palette, TextSize, THEMES.
- layout — Layout, beside, stack, flow.

## Import DAG discipline
- Depends on: tidyviz.core, polars, altair (and stdlib).
- Never writes files; exporting lives in tidyviz.io.export.

## Examples
```python
import polars as pl
from tidyviz.viz import Labels, Theme, chart

summary = pl.DataFrame(
    {"species": ["reike", "naida"], "mean": [4.1, 5.3], "lower": [3.8, 4.9], "upper": [4.4, 5.7]}
)
spec = (
    chart(summary, x="species:N", y="mean:Q", fill="species:N")
    .add_mark("column")
    .add_mark("errorbar", y="lower", y2="upper")
    .add_overlay(Theme("classic"), Labels(x="Species", y="Mean weight"))
)
spec.to_dict()  # Vega-Lite JSON
```
"""

from .channels import Channel
from .layout import Layout, beside, flow, stack
from .spec import MARKS, ChartSpec, chart
from .theme import THEMES, Labels, Legend, Overlay, Palette, TextSize, Theme

__all__ = [
    "Channel",
    "ChartSpec",
    "chart",
    "MARKS",
    "Layout",
    "beside",
    "stack",
    "flow",
    "Overlay",
    "Theme",
    "Labels",
    "Legend",
    "Palette",
    "TextSize",
    "THEMES",
]
