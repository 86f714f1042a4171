"""
Filesystem helpers for exports.

Responsibilities
- Check that a target directory exists and is writable before any rendering work.
- Provide the atomic write path: tmp sibling write -> fsync -> os.replace(tmp, final).

Notes
- Atomicity via os.replace holds only when src and dst share a filesystem, which a
  sibling temporary path guarantees.
- stdlib-only.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path

__all__ = ["is_writable_dir", "temp_sibling", "fsync_path", "rename_atomic", "remove_quietly"]


def is_writable_dir(path: Path) -> bool:
    """True if `path` is an existing directory the process may create files in."""
    return path.is_dir() and os.access(path, os.W_OK | os.X_OK)


def temp_sibling(path: Path) -> Path:
    """
    Hidden temporary path next to `path`.

    Example: figures/scatter.png -> figures/.scatter.png.3f2a....tmp
    """
    return path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")


def fsync_path(path: Path) -> None:
    """
    Open a path read-only and fsync its file descriptor.

    Notes:
        Used after a library wrote the file itself (Altair's save), before the atomic rename.
    """
    fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def rename_atomic(src: Path, dst: Path) -> None:
    """Atomically rename src -> dst on the same filesystem (os.replace)."""
    os.replace(src, dst)


def remove_quietly(path: Path) -> None:
    """Remove a leftover temporary file if it exists."""
    path.unlink(missing_ok=True)
