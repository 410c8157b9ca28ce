"""Utility helpers.

- io/: atomic writes, directory management, YAML reading
- merge: layered config merging
- subprocess: command execution with timeouts
- dependencies: host binary detection
"""
from __future__ import annotations

from .dependencies import check_required_binaries
from .merge import deep_merge
from .subprocess import run_with_timeout

__all__ = ["check_required_binaries", "deep_merge", "run_with_timeout"]
