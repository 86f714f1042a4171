"""
Exception types raised by transform steps, chart construction and export.

Provides typed exceptions for pipeline failures:
- SchemaError for references to columns a table does not have.
- JoinKeyError for joins without a valid shared-key set.
- ExportTargetError for export targets that cannot be written (or a missing chart).

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Every message names the offending column, key or path so the failing step can be
      corrected; nothing is silently defaulted.

Examples:
    Catch a missing column.

    >>> from tidyviz.core.errors import SchemaError
    >>> try:
    ...     raise SchemaError("column 'agee' not found (available: ['age', 'colour'])")
    ... except SchemaError as e:
    ...     msg = str(e)
    >>> "agee" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "TidyvizError",
    "SchemaError",
    "JoinKeyError",
    "ExportTargetError",
]


class TidyvizError(Exception):
    """Base class for all tidyviz failures."""


class SchemaError(TidyvizError, ValueError):
    """A referenced column does not exist in the input table (or a position is out of range)."""


class JoinKeyError(TidyvizError, KeyError):
    """A join was requested without a valid set of keys shared by both tables."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class ExportTargetError(TidyvizError):
    """
    Raised when an export cannot produce its file.

    Examples:
        - Target directory missing or not writable
        - Unsupported format, or a format that contradicts the file suffix
        - Parameterless export before any chart was constructed
    """
