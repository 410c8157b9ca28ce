"""Deployment data models and protocol."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


@dataclass(frozen=True, slots=True)
class ServiceRequest:
    """A running member of a composed environment.

    Attributes:
        name: Compose service name (e.g. "centos-systemd")
        project: Compose project the service belongs to
        spec_paths: Composition files the project was started with
    """

    name: str
    project: str
    spec_paths: tuple[Path, ...] = field(default_factory=tuple)


@runtime_checkable
class Deployment(Protocol):
    """Execution backend for a live environment.

    The harness never manages the backend's lifecycle, it only calls it.
    """

    def add_files(self, service: ServiceRequest, files: Sequence[str | Path]) -> None:
        """Copy host files into the service root (``/``)."""
        ...

    def exec_in(self, service: ServiceRequest, args: Sequence[str]) -> str:
        """Run ``args`` inside the service and return stdout.

        Raises:
            ExecError: On a non-zero exit
        """
        ...

    def logs(self, service: ServiceRequest) -> None:
        """Emit the service logs."""
        ...

    def start(self, service: ServiceRequest) -> None:
        """Start the service container."""
        ...

    def stop(self, service: ServiceRequest) -> None:
        """Stop the service container."""
        ...


__all__ = ["ServiceRequest", "Deployment"]
