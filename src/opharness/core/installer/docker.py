"""Installer for the container image.

The image itself is the payload: nothing is copied into the service and
removal is the container's teardown. Start and stop act on the container.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from opharness.core.artifacts import ArtifactFetcher, get_architecture
from opharness.core.exceptions import ExecError, InstallerError
from opharness.core.installer import staging
from opharness.core.installer.deb import debian_architecture
from opharness.core.installer.models import (
    InstallerHandle,
    InstallerManifest,
    InstallerSettings,
    InstallerState,
)

logger = logging.getLogger(__name__)


class DockerInstaller:
    format_name = "docker"

    def __init__(
        self,
        handle: InstallerHandle,
        *,
        settings: InstallerSettings,
        fetcher: ArtifactFetcher,
    ) -> None:
        self.handle = handle
        self.settings = settings
        self.fetcher = fetcher
        self.state = InstallerState.UNSTAGED
        self.image_path: Optional[Path] = None

    def inspect(self) -> InstallerManifest:
        return InstallerManifest(
            work_dir="/usr/share/elastic-agent",
            commit_file="/usr/share/elastic-agent/.elastic-agent.active.commit",
        )

    def preinstall(self) -> None:
        name = staging.package_name(
            self.settings,
            os_name="docker-image-linux",
            arch=debian_architecture(get_architecture()),
            extension="tar.gz",
            installer=self.format_name,
        )
        self.image_path = staging.fetch_package(self.fetcher, name, installer=self.format_name)
        logger.debug("Recorded agent image %s", self.image_path)
        self.state = InstallerState.PREINSTALLED

    def install(self) -> None:
        logger.debug("No docker install instructions")
        self.state = InstallerState.INSTALLED

    def postinstall(self) -> None:
        pass

    def install_certs(self) -> None:
        pass

    def enroll(self, token: str) -> None:
        args = staging.enroll_command("elastic-agent", "enroll", token, self.settings, installer=self.format_name)
        staging.run_step(self.handle, args, installer=self.format_name, operation="enroll")
        self.state = InstallerState.ENROLLED

    def _container(self, operation: str) -> None:
        action = self.handle.start if operation == "start" else self.handle.stop
        try:
            action()
        except ExecError as exc:
            raise InstallerError(
                f"Failed to {operation} container {self.handle.service.name}: {exc}",
                installer=self.format_name,
                operation=operation,
                context=exc.context,
            ) from exc

    def start(self) -> None:
        self._container("start")
        self.state = InstallerState.STARTED

    def stop(self) -> None:
        self._container("stop")
        self.state = InstallerState.STOPPED

    def uninstall(self) -> None:
        logger.debug("No docker uninstall instructions")
        self.state = InstallerState.UNINSTALLED

    def exec(self, args: Sequence[str]) -> str:
        return self.handle.exec(args)

    def add_files(self, files: Sequence[str | Path]) -> None:
        self.handle.add_files(files)

    def logs(self) -> None:
        self.handle.logs()


__all__ = ["DockerInstaller"]
