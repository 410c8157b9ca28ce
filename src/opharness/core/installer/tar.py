"""Installer for the generic Linux tarball.

The tarball is staged and unpacked to ``/elastic-agent``; ``elastic-agent
install`` then installs it as a systemd service while enrolling.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from opharness.core.artifacts import ArtifactFetcher, get_architecture
from opharness.core.installer import staging
from opharness.core.installer.models import (
    InstallerHandle,
    InstallerManifest,
    InstallerSettings,
    InstallerState,
)

logger = logging.getLogger(__name__)


class TarInstaller:
    format_name = "tar"

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

    def inspect(self) -> InstallerManifest:
        return InstallerManifest(
            work_dir="/opt/Elastic/Agent",
            commit_file="/elastic-agent/.elastic-agent.active.commit",
        )

    def preinstall(self) -> None:
        arch = get_architecture()
        name = staging.package_name(
            self.settings, os_name="linux", arch=arch, extension="tar.gz", installer=self.format_name
        )
        staged = staging.stage_package(self.handle, self.fetcher, name, installer=self.format_name)
        version = staging.resolve_version(self.settings, installer=self.format_name)
        staging.unpack_archive(
            self.handle,
            staged,
            f"{self.settings.artifact}-{version}-linux-{arch}",
            installer=self.format_name,
        )
        self.state = InstallerState.PREINSTALLED

    def install(self) -> None:
        logger.debug("No TAR install instructions")
        self.state = InstallerState.INSTALLED

    def postinstall(self) -> None:
        pass

    def install_certs(self) -> None:
        pass

    def enroll(self, token: str) -> None:
        args = staging.enroll_command(
            "/elastic-agent/elastic-agent", "install", token, self.settings, installer=self.format_name
        )
        staging.run_step(self.handle, args, installer=self.format_name, operation="enroll")
        self.state = InstallerState.ENROLLED

    def start(self) -> None:
        staging.run_step(
            self.handle, ["systemctl", "start", "elastic-agent"], installer=self.format_name, operation="start"
        )
        self.state = InstallerState.STARTED

    def stop(self) -> None:
        staging.run_step(
            self.handle, ["systemctl", "stop", "elastic-agent"], installer=self.format_name, operation="stop"
        )
        self.state = InstallerState.STOPPED

    def uninstall(self) -> None:
        staging.run_step(
            self.handle, ["elastic-agent", "uninstall", "-f"], installer=self.format_name, operation="uninstall"
        )
        self.state = InstallerState.UNINSTALLED

    def exec(self, args: Sequence[str]) -> str:
        return self.handle.exec(args)

    def add_files(self, files: Sequence[str | Path]) -> None:
        self.handle.add_files(files)

    def logs(self) -> None:
        self.handle.logs()


__all__ = ["TarInstaller"]
