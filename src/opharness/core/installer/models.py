"""Installer data models and the lifecycle protocol.

Provides immutable dataclasses for installer configuration and inspection
results, the handle an installer uses to reach its service, and the
``Installer`` protocol every package format implements.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Sequence, runtime_checkable

from opharness.core.deploy.models import Deployment, ServiceRequest


class InstallerState(str, Enum):
    """Lifecycle state reached by the last successful operation.

    Recorded for inspection only; operations never check it.
    """

    UNSTAGED = "unstaged"
    PREINSTALLED = "preinstalled"
    INSTALLED = "installed"
    ENROLLED = "enrolled"
    STARTED = "started"
    STOPPED = "stopped"
    UNINSTALLED = "uninstalled"


@dataclass(frozen=True, slots=True)
class InstallerManifest:
    """Static facts about an installed agent.

    Attributes:
        work_dir: Directory holding the agent's data once installed
        commit_file: File holding the commit hash of the active agent build
    """

    work_dir: str
    commit_file: str

    def to_dict(self) -> dict[str, Any]:
        return {"work_dir": self.work_dir, "commit_file": self.commit_file}


@dataclass(frozen=True, slots=True)
class InstallerSettings:
    """What to install and where to enroll it.

    Attributes:
        artifact: Artifact base name (e.g. "elastic-agent")
        version: Exact version; empty means ``base_version``
        base_version: Fallback version
        snapshot: Append ``-SNAPSHOT`` to the version
        artifact_dirs: Local directories searched for package files
        config: Merged harness config, read for the ``fleet`` section
    """

    artifact: str = "elastic-agent"
    version: str = ""
    base_version: str = "7.10-SNAPSHOT"
    snapshot: bool = False
    artifact_dirs: tuple[Path, ...] = field(default_factory=tuple)
    config: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "InstallerSettings":
        from opharness.core.config.domains import AgentConfig, ArtifactsConfig

        agent = AgentConfig(config=config)
        return cls(
            artifact=agent.artifact,
            version=agent.version,
            base_version=agent.base_version,
            snapshot=agent.snapshot,
            artifact_dirs=tuple(ArtifactsConfig(config=config).local_dirs),
            config=config,
        )


@dataclass(frozen=True, slots=True)
class InstallerHandle:
    """A service plus the deployment that runs it.

    Holds references only; every call is scoped to ``service``.
    """

    service: ServiceRequest
    deployment: Deployment

    def exec(self, args: Sequence[str]) -> str:
        return self.deployment.exec_in(self.service, list(args))

    def add_files(self, files: Sequence[str | Path]) -> None:
        self.deployment.add_files(self.service, list(files))

    def logs(self) -> None:
        self.deployment.logs(self.service)

    def start(self) -> None:
        self.deployment.start(self.service)

    def stop(self) -> None:
        self.deployment.stop(self.service)


@runtime_checkable
class Installer(Protocol):
    """Lifecycle contract for one package format.

    Operations are driven one by one by the caller. None of them chains to
    another and none refuses to run because of the current ``state``.
    """

    format_name: str
    state: InstallerState

    def inspect(self) -> InstallerManifest: ...

    def preinstall(self) -> None:
        """Fetch the package and stage it inside the service."""
        ...

    def install(self) -> None: ...

    def postinstall(self) -> None: ...

    def install_certs(self) -> None:
        """Install CA certificates the agent needs to reach Fleet."""
        ...

    def enroll(self, token: str) -> None:
        """Enroll the agent into Fleet with ``token``."""
        ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def uninstall(self) -> None: ...

    def exec(self, args: Sequence[str]) -> str: ...

    def add_files(self, files: Sequence[str | Path]) -> None: ...

    def logs(self) -> None: ...


__all__ = [
    "Installer",
    "InstallerHandle",
    "InstallerManifest",
    "InstallerSettings",
    "InstallerState",
]
