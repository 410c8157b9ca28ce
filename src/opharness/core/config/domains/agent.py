"""Domain-specific configuration for the agent package under test."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import List

from ..base import BaseDomainConfig


class AgentConfig(BaseDomainConfig):
    """Accessor for the ``agent`` section.

    ``version`` may be empty, in which case ``base_version`` is used when
    building artifact names.
    """

    def _config_section(self) -> str:
        return "agent"

    @cached_property
    def artifact(self) -> str:
        return str(self.section.get("artifact") or "elastic-agent")

    @cached_property
    def version(self) -> str:
        return str(self.section.get("version") or "")

    @cached_property
    def base_version(self) -> str:
        return str(self.section.get("base_version") or "")

    @cached_property
    def snapshot(self) -> bool:
        return bool(self.section.get("snapshot", False))


class ArtifactsConfig(BaseDomainConfig):
    """Accessor for the ``artifacts`` section."""

    def _config_section(self) -> str:
        return "artifacts"

    @cached_property
    def local_dirs(self) -> List[Path]:
        raw = self.section.get("local_dirs") or []
        if isinstance(raw, str):
            raw = [raw]
        return [Path(str(p)).expanduser() for p in raw]


__all__ = ["AgentConfig", "ArtifactsConfig"]
