"""
Declarative chart specs: a table, a channel mapping, layered marks, an optional facet and
customization overlays.

A ChartSpec is immutable. `add_mark`, `add_overlay`, `facet_by` and `with_title` return
new specs, so a base chart can be reused across variants. Every column a channel or facet
refers to is checked against the table when the spec is built, not when it is rendered.

A spec created through a Session carries it along: each spec derived from it, and each
layout composed from it, becomes that session's last result.

Only column existence is validated. Whether a channel pairing makes sense for a mark is
left to the author: an error-bar layer whose bounds are mapped to the categorical axis
(x/x2) instead of the value axis (y/y2) is a valid spec that draws a misleading chart.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import altair as alt
import polars as pl

from tidyviz.core.schema import require_columns

from .base import grid_shape, to_values
from .channels import CHANNELS, Channel, parse_channels
from .theme import Overlay, apply_chart_defaults, resolve_overlays

if TYPE_CHECKING:
    from tidyviz.session import Session

    from .layout import Layout

__all__ = ["MARKS", "Layer", "Facet", "ChartSpec", "chart"]

# Tutorial mark names -> Altair mark methods.
MARKS: dict[str, str] = {
    "point": "point",
    "box": "boxplot",
    "column": "bar",
    "errorbar": "errorbar",
    "line": "line",
    "text": "text",
}

_ALT_CHANNELS: dict[str, Any] = {
    "x": alt.X,
    "y": alt.Y,
    "x2": alt.X2,
    "y2": alt.Y2,
    "color": alt.Color,
    "fill": alt.Fill,
    "size": alt.Size,
    "shape": alt.Shape,
    "opacity": alt.Opacity,
    "detail": alt.Detail,
    "text": alt.Text,
}
_LEGEND_CHANNELS = frozenset({"color", "fill", "size", "shape", "opacity"})
_PALETTE_CHANNELS = frozenset({"color", "fill"})


@dataclass(frozen=True)
class Layer:
    """One mark drawn over the chart's data; `encoding` overrides the base mapping."""

    mark: str
    encoding: Mapping[str, Channel] = field(default_factory=dict)
    props: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Facet:
    """Split a chart into one panel per distinct value of `field`, wrapped row-major."""

    field: str
    ncol: int | None = None
    nrow: int | None = None

    def grid(self, n_panels: int) -> tuple[int, int]:
        """(nrow, ncol) for `n_panels` panels."""
        return grid_shape(n_panels, ncol=self.ncol, nrow=self.nrow)


def _axis_kwargs(name: str, opts: Mapping[str, Any]) -> dict[str, Any]:
    kw: dict[str, Any] = {}
    if "grid" in opts:
        kw["grid"] = opts["grid"]
    if "domain_color" in opts:
        kw["domainColor"] = opts["domain_color"]
    if "tick_color" in opts:
        kw["tickColor"] = opts["tick_color"]
    if "label_font_size" in opts:
        kw["labelFontSize"] = opts["label_font_size"]
    if "title_font_size" in opts:
        kw["titleFontSize"] = opts["title_font_size"]
    if name == "x" and "x_label_angle" in opts:
        kw["labelAngle"] = opts["x_label_angle"]
    return kw


def _legend(opts: Mapping[str, Any]) -> Any:
    orient = opts.get("legend_orient")
    if orient == "none":
        return None
    kw: dict[str, Any] = {}
    if orient is not None:
        kw["orient"] = orient
    if "label_font_size" in opts:
        kw["labelFontSize"] = opts["label_font_size"]
    if "title_font_size" in opts:
        kw["titleFontSize"] = opts["title_font_size"]
    return alt.Legend(**kw) if kw else alt.Undefined


def _alt_channel(name: str, ch: Channel, opts: Mapping[str, Any]) -> Any:
    kw: dict[str, Any] = {"field": ch.field}
    if ch.vega_type is not None:
        kw["type"] = ch.vega_type
    title = opts.get(f"{name}_title", ch.title)
    if title is not None:
        kw["title"] = title
    if name in ("x", "y"):
        axis = _axis_kwargs(name, opts)
        if axis:
            kw["axis"] = alt.Axis(**axis)
    if name in _LEGEND_CHANNELS:
        legend = _legend(opts)
        if legend is not alt.Undefined:
            kw["legend"] = legend
    if name in _PALETTE_CHANNELS and "palette" in opts:
        kw["scale"] = alt.Scale(**opts["palette"])
    return _ALT_CHANNELS[name](**kw)


@dataclass(frozen=True, eq=False)
class ChartSpec:
    """
    Immutable chart specification.

    Attributes:
        data (pl.DataFrame): Source table.
        encoding (Mapping[str, Channel]): Base channel mapping shared by all layers.
        layers (tuple[Layer, ...]): Marks in draw order.
        facet (Facet | None): Optional small-multiples split.
        overlays (tuple[Overlay, ...]): Customizations in application order.
        title (str | None): Chart title (a Labels overlay title takes precedence).
        session (Session | None): Session that records every spec derived from this one.

    Raises:
        SchemaError: If a channel or the facet refers to a column not in `data`.
        ValueError: For an unknown mark name.
    """

    data: pl.DataFrame
    encoding: Mapping[str, Channel] = field(default_factory=dict)
    layers: tuple[Layer, ...] = ()
    facet: Facet | None = None
    overlays: tuple[Overlay, ...] = ()
    title: str | None = None
    session: Session | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "layers", tuple(self.layers))
        object.__setattr__(self, "overlays", tuple(self.overlays))
        for layer in self.layers:
            if layer.mark not in MARKS:
                raise ValueError(f"unknown mark {layer.mark!r} (expected one of {list(MARKS)})")
        used = [ch.field for ch in self.encoding.values()]
        for layer in self.layers:
            used.extend(ch.field for ch in layer.encoding.values())
        if self.facet is not None:
            used.append(self.facet.field)
        require_columns(self.data.columns, used, where="chart")

    def _derive(self, **changes: Any) -> ChartSpec:
        spec = replace(self, **changes)
        if spec.session is not None:
            spec.session.record(spec)
        return spec

    # ----------------------------
    # Builder operations
    # ----------------------------

    def add_mark(
        self, mark: str, /, *, style: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> ChartSpec:
        """
        Layer a mark on top of the existing ones.

        Keyword arguments naming a channel (x, y, x2, y2, color, ...) override the base
        mapping for this layer only; any other keyword is passed to the mark (e.g. size=60,
        extent="min-max"). Constant mark properties that share a channel's name, such as
        a fixed colour, go in `style` (style={"color": "black"}).
        """
        channels = {k: v for k, v in kwargs.items() if k in CHANNELS}
        props = {k: v for k, v in kwargs.items() if k not in CHANNELS}
        props.update(style or {})
        encoding = parse_channels(self.data, channels, where=f"chart ({mark} layer)")
        return self._derive(layers=self.layers + (Layer(mark, encoding, props),))

    def add_overlay(self, *overlays: Overlay) -> ChartSpec:
        """Append customization overlays; later overlays win on conflicting keys."""
        for o in overlays:
            if not isinstance(o, Overlay):
                raise TypeError(f"expected an Overlay, got {type(o).__name__}")
        return self._derive(overlays=self.overlays + overlays)

    def facet_by(
        self, column: str, *, ncol: int | None = None, nrow: int | None = None
    ) -> ChartSpec:
        """Split into one panel per distinct value of `column`."""
        for name, value in (("ncol", ncol), ("nrow", nrow)):
            if value is not None and value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")
        return self._derive(facet=Facet(column, ncol=ncol, nrow=nrow))

    def with_title(self, title: str | None) -> ChartSpec:
        return self._derive(title=title)

    def options(self) -> dict[str, Any]:
        """Resolved overlay properties."""
        return resolve_overlays(self.overlays)

    def facet_grid(self) -> tuple[int, int] | None:
        """(nrow, ncol) of the facet panels, or None when not faceted."""
        if self.facet is None:
            return None
        n_panels = self.data.get_column(self.facet.field).n_unique()
        return self.facet.grid(n_panels)

    # ----------------------------
    # Rendering
    # ----------------------------

    def _unit(self, data: Any, layer: Layer, opts: Mapping[str, Any]) -> alt.Chart:
        base = alt.Chart(data) if data is not None else alt.Chart()
        marked = getattr(base, f"mark_{MARKS[layer.mark]}")(**dict(layer.props))
        encoding = {**self.encoding, **layer.encoding}
        return marked.encode(**{n: _alt_channel(n, ch, opts) for n, ch in encoding.items()})

    def render(
        self,
        width: float | None = None,
        height: float | None = None,
        *,
        top_level: bool = True,
    ) -> alt.TopLevelMixin:
        """
        Build the Altair chart.

        Args:
            width (float | None): Total width in Vega units (split across facet columns).
            height (float | None): Total height in Vega units (split across facet rows).
            top_level (bool): Apply top-level config and background; False inside layouts.

        Raises:
            ValueError: If no mark has been added.
        """
        if not self.layers:
            raise ValueError("chart has no marks; call add_mark() first")
        opts = self.options()
        values = alt.Data(values=to_values(self.data))

        if len(self.layers) == 1:
            ch: Any = self._unit(values, self.layers[0], opts)
        else:
            ch = alt.layer(*[self._unit(None, layer, opts) for layer in self.layers], data=values)

        nrow, ncol = self.facet_grid() or (1, 1)
        size: dict[str, float] = {}
        if width is not None:
            size["width"] = width / ncol
        if height is not None:
            size["height"] = height / nrow
        if size:
            ch = ch.properties(**size)
        if "view_stroke" in opts:
            ch = ch.properties(view=alt.ViewBackground(stroke=opts["view_stroke"]))

        if self.facet is not None:
            ch = ch.facet(
                facet=alt.Facet(self.facet.field, type="nominal", title=None),
                columns=ncol,
            )

        title = opts.get("title", self.title)
        if title is not None:
            if "chart_title_font_size" in opts:
                ch = ch.properties(
                    title=alt.TitleParams(text=title, fontSize=opts["chart_title_font_size"])
                )
            else:
                ch = ch.properties(title=title)

        if top_level:
            if "background" in opts:
                ch = ch.properties(background=opts["background"])
            ch = apply_chart_defaults(ch)
        return ch

    def to_dict(self) -> dict[str, Any]:
        """Vega-Lite JSON of the rendered chart."""
        return self.render().to_dict()

    # ----------------------------
    # Composition operators
    # ----------------------------

    def __or__(self, other: ChartSpec | Layout) -> Layout:
        from .layout import combine

        return combine("beside", self, other)

    def __truediv__(self, other: ChartSpec | Layout) -> Layout:
        from .layout import combine

        return combine("stack", self, other)

    def __add__(self, other: ChartSpec | Layout) -> Layout:
        from .layout import combine

        return combine("flow", self, other)


def chart(
    data: pl.DataFrame,
    mark: str | None = None,
    *,
    style: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> ChartSpec:
    """
    Start a chart: map columns of `data` to channels, optionally with a first mark.

    Args:
        data (pl.DataFrame): Source table.
        mark (str | None): Optional first mark (point, box, column, errorbar, line, text).
        style (Mapping[str, Any] | None): Constant properties for the first mark.
        **kwargs: Channel mappings ("col" or "col:Q"); when `mark` is given, non-channel
            keywords become that mark's properties.

    Examples:
        >>> import polars as pl
        >>> df = pl.DataFrame({"species": ["a", "b"], "mean": [2.0, 3.5]})
        >>> spec = chart(df, "column", x="species:N", y="mean:Q")
        >>> [layer.mark for layer in spec.layers]
        ['column']
    """
    channels = {k: v for k, v in kwargs.items() if k in CHANNELS}
    props = {k: v for k, v in kwargs.items() if k not in CHANNELS}
    if (props or style) and mark is None:
        raise TypeError(f"mark properties {sorted({*props, *(style or {})})!r} need a mark")
    spec = ChartSpec(data=data, encoding=parse_channels(data, channels, where="chart"))
    return spec.add_mark(mark, style=style, **props) if mark is not None else spec
