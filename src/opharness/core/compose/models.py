"""Compose data models.

Immutable values describing discovered services/stacks and a single
engine invocation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

SERVICES = "services"
STACKS = "stacks"
DEFAULT_COMPOSE_FILE = "docker-compose.yml"


def compose_type(is_stack: bool) -> str:
    """Return the directory segment for a stack or a service."""
    return STACKS if is_stack else SERVICES


@dataclass(frozen=True, slots=True)
class ServiceSpec:
    """A single independently composable service.

    Attributes:
        name: Unique service name within the registry
        path: Composition file location; relative to the bundled set for
            bundled entries, absolute for workspace entries
        source: Either 'bundled' or 'workspace'
    """

    name: str
    path: str
    source: str = "bundled"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path, "source": self.source}


@dataclass(frozen=True, slots=True)
class StackSpec:
    """An aggregation of services described by one base composition file."""

    name: str
    path: str
    source: str = "bundled"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path, "source": self.source}


@dataclass(frozen=True)
class ComposeInvocation:
    """One call to the compose engine.

    Attributes:
        spec_paths: Composition files, in overlay order
        primary_name: Grouping identity (the compose project name)
        command: Engine subcommand tokens, e.g. ("up", "-d")
        env: Variables exported to the engine process
    """

    spec_paths: tuple[Path, ...]
    primary_name: str
    command: tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def project_name(self) -> str:
        # Compose project names must be lowercase.
        return self.primary_name.lower()

    def argv(self, engine_command: Sequence[str]) -> list[str]:
        """Full command line: ``<engine> -f a.yml -f b.yml -p <project> <command>``."""
        args = [str(p) for p in engine_command]
        for path in self.spec_paths:
            args.extend(["-f", str(path)])
        args.extend(["-p", self.project_name])
        args.extend(self.command)
        return args


__all__ = [
    "SERVICES",
    "STACKS",
    "DEFAULT_COMPOSE_FILE",
    "compose_type",
    "ServiceSpec",
    "StackSpec",
    "ComposeInvocation",
]
