"""
tidyviz.transform — Relational operators over Polars tables.

## Responsibilities
- Express filter / select / rename / derive / group-aggregate / reshape / join as immutable
  steps applied strictly in order.
- Fail fast with SchemaError or JoinKeyError before executing a step that references a
  missing column or key.

## Public API
- steps — Filter, Select, Rename, Derive, GroupAggregate, ReshapeLong, ReshapeWide, Join,
  Sort, DropNulls.
- pipeline — Pipeline, run_steps.
- stats — mean, count, n_rows, std_error, summarise_mean_se.

## Import DAG discipline
- Depends on: tidyviz.core, polars (and stdlib).
- Must not import tidyviz.viz, tidyviz.io or tidyviz.lab.
"""

from .pipeline import Pipeline, run_steps
from .steps import (
    DropNulls,
    Derive,
    Filter,
    GroupAggregate,
    Join,
    Rename,
    ReshapeLong,
    ReshapeWide,
    Select,
    Sort,
    Step,
)

__all__ = [
    "Pipeline",
    "run_steps",
    "Step",
    "Filter",
    "Select",
    "Rename",
    "Derive",
    "GroupAggregate",
    "ReshapeLong",
    "ReshapeWide",
    "Join",
    "Sort",
    "DropNulls",
]
