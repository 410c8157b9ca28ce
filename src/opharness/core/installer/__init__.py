"""Installer contract and registry.

One class per package format, looked up by format name:

    installer = attach_installer("rpm", deployment, service, settings=settings)
    installer.preinstall()
    installer.install()
    installer.enroll(token)
"""
from __future__ import annotations

import logging
from typing import Optional

from opharness.core.artifacts import ArtifactFetcher, LocalArtifactFetcher
from opharness.core.deploy.models import Deployment, ServiceRequest
from opharness.core.exceptions import UnknownInstallerFormatError
from opharness.core.installer.models import (
    Installer,
    InstallerHandle,
    InstallerManifest,
    InstallerSettings,
    InstallerState,
)

logger = logging.getLogger(__name__)


# Registry of installer classes, keyed by format name
_INSTALLER_REGISTRY: dict[str, type] = {}


def register_installer(installer_class: type) -> None:
    """Register an installer class under its ``format_name``.

    Args:
        installer_class: Class implementing the Installer protocol
    """
    raw_name = getattr(installer_class, "format_name", "")
    name = raw_name.strip().lower() if isinstance(raw_name, str) else ""
    if not name:
        raise ValueError(
            f"Cannot register installer {installer_class.__name__} with empty format_name"
        )
    _INSTALLER_REGISTRY[name] = installer_class


def get_installer_class(format_name: str) -> type:
    """Get the installer class for a package format.

    Raises:
        UnknownInstallerFormatError: No installer is registered for the format
    """
    key = str(format_name or "").strip().lower()
    try:
        return _INSTALLER_REGISTRY[key]
    except KeyError:
        raise UnknownInstallerFormatError(
            f"Unknown installer format: {format_name!r}",
            installer=key or None,
            context={"available": available_formats()},
        ) from None


def available_formats() -> list[str]:
    return sorted(_INSTALLER_REGISTRY)


def attach_installer(
    format_name: str,
    deployment: Deployment,
    service: ServiceRequest,
    *,
    settings: Optional[InstallerSettings] = None,
    fetcher: Optional[ArtifactFetcher] = None,
) -> Installer:
    """Create an installer for ``service`` running on ``deployment``.

    Args:
        format_name: Package format key (tar, rpm, deb, docker, darwin)
        deployment: Backend that runs the service
        service: Target service
        settings: What to install; defaults to InstallerSettings()
        fetcher: Artifact source; defaults to a LocalArtifactFetcher over
            ``settings.artifact_dirs``
    """
    installer_class = get_installer_class(format_name)
    settings = settings or InstallerSettings()
    fetcher = fetcher or LocalArtifactFetcher(settings.artifact_dirs)
    handle = InstallerHandle(service=service, deployment=deployment)
    logger.debug("Attaching %s installer to %s", installer_class.format_name, service.name)
    return installer_class(handle, settings=settings, fetcher=fetcher)


def _register_builtin_installers() -> None:
    from opharness.core.installer.darwin import DarwinInstaller
    from opharness.core.installer.deb import DebInstaller
    from opharness.core.installer.docker import DockerInstaller
    from opharness.core.installer.rpm import RpmInstaller
    from opharness.core.installer.tar import TarInstaller

    for installer_class in (TarInstaller, RpmInstaller, DebInstaller, DockerInstaller, DarwinInstaller):
        register_installer(installer_class)


# Auto-register on import
_register_builtin_installers()


__all__ = [
    "Installer",
    "InstallerHandle",
    "InstallerManifest",
    "InstallerSettings",
    "InstallerState",
    "attach_installer",
    "available_formats",
    "get_installer_class",
    "register_installer",
]
