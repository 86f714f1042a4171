"""
tidyviz.core — Errors, defaults and schema checks shared by every other package.

## Contracts (single source of truth)
- Errors — SchemaError, JoinKeyError, ExportTargetError under TidyvizError.
- Constants — export defaults, unit table, supported formats.
- Schema — column-existence checks and positional column resolution.

## Notes
- Zero-IO policy: stdlib + polars only; no file or network access.
- Downstream packages (transform, viz, io) raise these errors rather than defining their own.

## Examples
```python
import polars as pl
from tidyviz.core.schema import require_columns
from tidyviz.core.errors import SchemaError

df = pl.DataFrame({"colour": ["blue"], "age": [1000]})
require_columns(df.columns, ["age"], where="filter")  # ok
try:
    require_columns(df.columns, ["weight"], where="filter")
except SchemaError as e:
    print(e)  # filter: column(s) ['weight'] not found (available: ['colour', 'age'])
```
"""

from .errors import ExportTargetError, JoinKeyError, SchemaError, TidyvizError

__all__ = [
    "TidyvizError",
    "SchemaError",
    "JoinKeyError",
    "ExportTargetError",
]
