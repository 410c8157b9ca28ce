"""Domain-specific configuration for the compose engine.

Provides access to the composition file name, the engine command line and
the timeouts applied to engine and in-container commands.
"""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import List

from ..base import BaseDomainConfig


class ComposeConfig(BaseDomainConfig):
    """Accessor for the ``compose`` section (plus the top-level workspace)."""

    def _config_section(self) -> str:
        return "compose"

    @cached_property
    def workspace(self) -> Path:
        """Absolute workspace root (``~/.op`` by default)."""
        return Path(str(self._config["workspace"])).expanduser()

    @cached_property
    def file_name(self) -> str:
        return str(self.section.get("file_name") or "docker-compose.yml")

    @cached_property
    def command(self) -> List[str]:
        """Engine invocation prefix, e.g. ``["docker", "compose"]``."""
        return [str(p) for p in (self.section.get("command") or ["docker", "compose"])]

    @cached_property
    def binaries(self) -> List[str]:
        """Host binaries that must be on PATH."""
        return [str(b) for b in (self._config.get("binaries") or [])]


class TimeoutsConfig(BaseDomainConfig):
    """Accessor for the ``timeouts`` section."""

    def _config_section(self) -> str:
        return "timeouts"

    @cached_property
    def compose_seconds(self) -> float:
        return float(self.section.get("compose_seconds", 600))

    @cached_property
    def exec_seconds(self) -> float:
        return float(self.section.get("exec_seconds", 300))


__all__ = ["ComposeConfig", "TimeoutsConfig"]
