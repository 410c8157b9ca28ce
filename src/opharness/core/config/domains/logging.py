"""Domain-specific configuration for logging."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class LogConfig(BaseDomainConfig):
    """Accessor for the ``log`` section."""

    def _config_section(self) -> str:
        return "log"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level") or "INFO").upper()

    @cached_property
    def include_timestamp(self) -> bool:
        return bool(self.section.get("include_timestamp", False))


__all__ = ["LogConfig"]
