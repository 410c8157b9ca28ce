"""Artifact naming and local lookup for agent packages.

Artifact names follow the release layout:

- deb/rpm: ``{name}-{version}-{arch}.{ext}`` (e.g. ``elastic-agent-8.0.0-x86_64.rpm``)
- everything else: ``{name}-{version}-{os}-{arch}.{ext}``

How packages are downloaded is out of scope; ``LocalArtifactFetcher`` only
finds files that already exist in configured directories.
"""
from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Protocol, runtime_checkable

from opharness.core.exceptions import ArtifactNotFoundError

logger = logging.getLogger(__name__)

_ARM64_MACHINES = {"arm64", "aarch64"}
_PACKAGE_EXTENSIONS = {"deb", "rpm"}


def get_architecture(machine: str | None = None) -> str:
    """Return ``arm64`` on ARM hosts and ``x86_64`` otherwise."""
    raw = (machine if machine is not None else platform.machine()).lower()
    if raw in _ARM64_MACHINES:
        return "arm64"
    return "x86_64"


def artifact_version(version: str, base_version: str, snapshot: bool = False) -> str:
    """Resolve the version segment of an artifact name."""
    resolved = version or base_version
    if not resolved:
        raise ValueError("Either version or base_version is required")
    if snapshot and not resolved.endswith("-SNAPSHOT"):
        resolved = f"{resolved}-SNAPSHOT"
    return resolved


def build_artifact_name(
    name: str,
    version: str,
    base_version: str,
    os: str,
    arch: str,
    extension: str,
    snapshot: bool = False,
) -> str:
    ver = artifact_version(version, base_version, snapshot)
    ext = extension.lstrip(".").lower()
    if ext in _PACKAGE_EXTENSIONS:
        return f"{name}-{ver}-{arch}.{ext}"
    return f"{name}-{ver}-{os}-{arch}.{ext}"


@runtime_checkable
class ArtifactFetcher(Protocol):
    """Source of package files for installers."""

    def fetch_binary(self, filename: str) -> Path:
        """Return a local path for ``filename``.

        Raises:
            ArtifactNotFoundError: The artifact is unavailable
        """
        ...


class LocalArtifactFetcher:
    """Find artifacts in a list of local directories (first match wins)."""

    def __init__(self, dirs: Iterable[Path | str]) -> None:
        self.dirs: List[Path] = [Path(d).expanduser() for d in dirs]

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "LocalArtifactFetcher":
        from opharness.core.config.domains import ArtifactsConfig

        return cls(ArtifactsConfig(config=config).local_dirs)

    def fetch_binary(self, filename: str) -> Path:
        if not filename or "/" in filename or filename in {".", ".."}:
            raise ArtifactNotFoundError(
                f"Invalid artifact name: {filename!r}",
                context={"artifact": filename},
            )
        for directory in self.dirs:
            candidate = directory / filename
            if candidate.is_file():
                logger.debug("Artifact %s found at %s", filename, candidate)
                return candidate.resolve()
        raise ArtifactNotFoundError(
            f"Artifact {filename} not found in {[str(d) for d in self.dirs]}",
            context={"artifact": filename, "searched": [str(d) for d in self.dirs]},
        )


__all__ = [
    "ArtifactFetcher",
    "LocalArtifactFetcher",
    "artifact_version",
    "build_artifact_name",
    "get_architecture",
]
