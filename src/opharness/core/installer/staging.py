"""Shared steps used by the per-format installers."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from opharness.core.artifacts import ArtifactFetcher, artifact_version, build_artifact_name
from opharness.core.exceptions import ArtifactNotFoundError, ExecError, InstallerError
from opharness.core.fleet import FleetConfig
from opharness.core.installer.models import InstallerHandle, InstallerSettings

logger = logging.getLogger(__name__)


def resolve_version(settings: InstallerSettings, *, installer: str) -> str:
    try:
        return artifact_version(settings.version, settings.base_version, settings.snapshot)
    except ValueError as exc:
        raise InstallerError(str(exc), installer=installer, operation="preinstall") from exc


def package_name(
    settings: InstallerSettings,
    *,
    os_name: str,
    arch: str,
    extension: str,
    installer: str,
) -> str:
    """Artifact file name for ``settings`` on the given platform."""
    try:
        return build_artifact_name(
            settings.artifact,
            settings.version,
            settings.base_version,
            os_name,
            arch,
            extension,
            settings.snapshot,
        )
    except ValueError as exc:
        raise InstallerError(str(exc), installer=installer, operation="preinstall") from exc


def fetch_package(fetcher: ArtifactFetcher, filename: str, *, installer: str) -> Path:
    try:
        return fetcher.fetch_binary(filename)
    except ArtifactNotFoundError as exc:
        logger.error("Could not fetch the package for the agent: %s (%s)", filename, exc)
        raise InstallerError(
            f"Could not fetch {filename}: {exc}",
            installer=installer,
            operation="preinstall",
            context=exc.context,
        ) from exc


def stage_package(
    handle: InstallerHandle,
    fetcher: ArtifactFetcher,
    filename: str,
    *,
    installer: str,
) -> str:
    """Fetch ``filename`` and copy it into the service root.

    Returns:
        Path of the staged file inside the service (``/<filename>``)
    """
    host_path = fetch_package(fetcher, filename, installer=installer)
    try:
        handle.add_files([host_path])
    except ExecError as exc:
        raise InstallerError(
            f"Could not stage {filename} in {handle.service.name}: {exc}",
            installer=installer,
            operation="preinstall",
            context=exc.context,
        ) from exc
    logger.debug("Staged %s in %s", filename, handle.service.name)
    return f"/{filename}"


def run_step(
    handle: InstallerHandle,
    args: Sequence[str],
    *,
    installer: str,
    operation: str,
) -> str:
    """Run ``args`` in the service, wrapping failures in InstallerError."""
    try:
        return handle.exec(args)
    except ExecError as exc:
        raise InstallerError(
            f"Failed to {operation} the agent with {' '.join(args)}: {exc}",
            installer=installer,
            operation=operation,
            context={**exc.context, "command": list(args)},
        ) from exc


def unpack_archive(
    handle: InstallerHandle,
    staged: str,
    extracted_dir: str,
    *,
    installer: str,
    target: str = "/elastic-agent",
) -> None:
    """Extract a staged tarball into ``/`` and move it to ``target``."""
    run_step(handle, ["tar", "-xzf", staged, "-C", "/"], installer=installer, operation="preinstall")
    output = run_step(handle, ["mv", f"/{extracted_dir}", target], installer=installer, operation="preinstall")
    logger.debug("Moved %s to %s: %s", extracted_dir, target, output.strip())


def enroll_command(
    binary: str,
    subcommand: str,
    token: str,
    settings: InstallerSettings,
    *,
    installer: str,
) -> List[str]:
    try:
        cfg = FleetConfig.from_token(token, settings.config)
    except ValueError as exc:
        raise InstallerError(str(exc), installer=installer, operation="enroll") from exc
    return [binary, subcommand, *cfg.flags()]


__all__ = [
    "enroll_command",
    "fetch_package",
    "package_name",
    "resolve_version",
    "run_step",
    "stage_package",
    "unpack_archive",
]
