"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path

from opharness.core.context import HarnessContext


def build_context(args: argparse.Namespace) -> HarnessContext:
    """Create and initialize a harness context from CLI arguments.

    Raises:
        ConfigError: Configuration is invalid
        WorkspaceIOError: Workspace directories cannot be created
    """
    workspace = getattr(args, "workspace", None)
    context = HarnessContext(Path(workspace) if workspace else None)
    return context.initialize()


__all__ = ["build_context"]
