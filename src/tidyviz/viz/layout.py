"""
Composite layouts: several charts arranged into one figure.

A Layout is a tree. Leaves are ChartSpecs; internal nodes place their children
- "beside": in one row,
- "stack": in one column,
- "flow": row-major in a grid, near-square unless ncol/nrow are given.

Operators build the same trees: `a | b` (beside), `a / b` (stack), `a + b` (flow). A chain
such as `a | b | c` extends the left-hand node, while a parenthesized right-hand operand,
`a | (b / c)`, stays nested as its own cell. Grouping changes nesting, never the set of
leaf charts.

A layout built from session-bound charts (or through a Session) records itself, and every
layout derived from it, as that session's last result.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Literal, Union

import altair as alt

from .base import grid_shape
from .spec import ChartSpec
from .theme import apply_chart_defaults

if TYPE_CHECKING:
    from tidyviz.session import Session

__all__ = ["Layout", "LayoutKind", "beside", "stack", "flow", "combine"]

LayoutKind = Literal["beside", "stack", "flow"]
_KINDS: frozenset[str] = frozenset({"beside", "stack", "flow"})

Item = Union[ChartSpec, "Layout"]


@dataclass(frozen=True, eq=False)
class Layout:
    """
    Immutable composite of charts and nested layouts.

    Attributes:
        kind (LayoutKind): "beside", "stack" or "flow".
        children (tuple[ChartSpec | Layout, ...]): Cells in placement order.
        ncol (int | None): Column count for "flow" grids.
        nrow (int | None): Row count for "flow" grids.
        title (str | None): Figure title.
        session (Session | None): Session that records every layout derived from this one.

    Raises:
        ValueError: For an unknown kind, no children, counts on a non-flow node, or a
            grid too small for its children.
        TypeError: If a child is neither a ChartSpec nor a Layout.
    """

    kind: LayoutKind
    children: tuple[Item, ...]
    ncol: int | None = None
    nrow: int | None = None
    title: str | None = None
    session: Session | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        if self.kind not in _KINDS:
            raise ValueError(f"unknown layout kind {self.kind!r} (expected one of {sorted(_KINDS)})")
        if not self.children:
            raise ValueError("a layout needs at least one chart")
        for child in self.children:
            if not isinstance(child, (ChartSpec, Layout)):
                raise TypeError(f"layouts hold charts or layouts, got {type(child).__name__}")
        if self.kind != "flow" and (self.ncol is not None or self.nrow is not None):
            raise ValueError(f"ncol/nrow apply to 'flow' layouts, not {self.kind!r}")
        self.shape()

    def shape(self) -> tuple[int, int]:
        """(nrow, ncol) of this node's grid."""
        n = len(self.children)
        if self.kind == "beside":
            return 1, n
        if self.kind == "stack":
            return n, 1
        return grid_shape(n, ncol=self.ncol, nrow=self.nrow)

    def cells(self) -> list[tuple[int, int, Item]]:
        """(row, column, child) for every child, row-major."""
        _nrow, ncol = self.shape()
        return [(i // ncol, i % ncol, child) for i, child in enumerate(self.children)]

    def leaves(self) -> list[ChartSpec]:
        """Every chart in the tree, depth-first in placement order."""
        out: list[ChartSpec] = []
        for child in self.children:
            if isinstance(child, Layout):
                out.extend(child.leaves())
            else:
                out.append(child)
        return out

    def with_grid(self, *, ncol: int | None = None, nrow: int | None = None) -> Layout:
        """Re-place the same children row-major in an ncol x nrow grid."""
        return self._derive(kind="flow", ncol=ncol, nrow=nrow)

    def with_title(self, title: str | None) -> Layout:
        return self._derive(title=title)

    def _derive(self, **changes: Any) -> Layout:
        layout = replace(self, **changes)
        if layout.session is not None:
            layout.session.record(layout)
        return layout

    def render(
        self,
        width: float | None = None,
        height: float | None = None,
        *,
        top_level: bool = True,
    ) -> alt.TopLevelMixin:
        """
        Build the Altair concat chart, dividing width and height evenly across cells.

        Args:
            width (float | None): Total width in Vega units.
            height (float | None): Total height in Vega units.
            top_level (bool): Apply top-level config; False when nested.
        """
        nrow, ncol = self.shape()
        cell_w = width / ncol if width is not None else None
        cell_h = height / nrow if height is not None else None
        rows: list[list[Any]] = [[] for _ in range(nrow)]
        for r, _c, child in self.cells():
            rows[r].append(child.render(cell_w, cell_h, top_level=False))
        rows = [row for row in rows if row]

        if len(rows) == 1:
            out: Any = alt.hconcat(*rows[0])
        elif all(len(row) == 1 for row in rows):
            out = alt.vconcat(*[row[0] for row in rows])
        else:
            out = alt.vconcat(*[alt.hconcat(*row) for row in rows])

        if self.title is not None:
            out = out.properties(title=self.title)
        if top_level:
            out = apply_chart_defaults(out)
        return out

    def to_dict(self) -> dict[str, Any]:
        return self.render().to_dict()

    def __or__(self, other: Item) -> Layout:
        return combine("beside", self, other)

    def __truediv__(self, other: Item) -> Layout:
        return combine("stack", self, other)

    def __add__(self, other: Item) -> Layout:
        return combine("flow", self, other)


def _extendable(node: Item, kind: str) -> bool:
    return (
        isinstance(node, Layout)
        and node.kind == kind
        and node.ncol is None
        and node.nrow is None
        and node.title is None
    )


def combine(kind: LayoutKind, left: Item, right: Item) -> Layout:
    """Operator semantics: extend a same-kind left node, otherwise nest both as cells."""
    if not isinstance(right, (ChartSpec, Layout)):
        return NotImplemented  # type: ignore[return-value]
    session = left.session if left.session is not None else right.session
    if _extendable(left, kind):
        assert isinstance(left, Layout)
        out = Layout(kind, left.children + (right,), session=session)
    else:
        out = Layout(kind, (left, right), session=session)
    if session is not None:
        session.record(out)
    return out


def beside(*items: Item, title: str | None = None) -> Layout:
    """Place items in one row."""
    return Layout("beside", items, title=title)


def stack(*items: Item, title: str | None = None) -> Layout:
    """Place items in one column."""
    return Layout("stack", items, title=title)


def flow(
    *items: Item, ncol: int | None = None, nrow: int | None = None, title: str | None = None
) -> Layout:
    """Place items row-major in a grid (near-square unless ncol/nrow are given)."""
    return Layout("flow", items, ncol=ncol, nrow=nrow, title=title)
