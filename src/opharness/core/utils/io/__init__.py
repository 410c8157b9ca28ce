"""I/O utilities.

- Core: atomic writes, directory management
- YAML: tolerant and strict reader
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write_bytes,
    ensure_directory,
    ensure_parent_dir,
)
from .yaml import read_yaml

__all__ = [
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write_bytes",
    "read_yaml",
]
