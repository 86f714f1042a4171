"""
Ordered application of transform steps.

A Pipeline is an immutable tuple of steps; `run` feeds each step the previous step's
output. Errors propagate unchanged and abort the remaining steps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import polars as pl

from .steps import Step

__all__ = ["Pipeline", "run_steps"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Pipeline:
    """
    Immutable sequence of transform steps.

    Examples:
        >>> import polars as pl
        >>> from tidyviz.transform import Filter, Pipeline, Select
        >>> df = pl.DataFrame({"colour": ["blue", "black"], "age": [1000, 1800]})
        >>> Pipeline((Filter(pl.col("age") > 1200), Select(("colour",)))).run(df).to_dicts()
        [{'colour': 'black'}]
    """

    steps: tuple[Step, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))

    def then(self, *steps: Step) -> Pipeline:
        """Return a new pipeline with `steps` appended."""
        return Pipeline(self.steps + steps)

    def run(self, df: pl.DataFrame) -> pl.DataFrame:
        out = df
        for idx, step in enumerate(self.steps):
            rows_in = out.height
            out = step.apply(out)
            logger.debug("step %d %s: %d -> %d rows", idx, step.describe(), rows_in, out.height)
        return out

    def __len__(self) -> int:
        return len(self.steps)


def run_steps(df: pl.DataFrame, *steps: Step) -> pl.DataFrame:
    """Run `steps` in order over `df` (shorthand for Pipeline(steps).run(df))."""
    return Pipeline(steps).run(df)
