"""Installer for RPM packages (CentOS and friends)."""
from __future__ import annotations

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


class RpmInstaller:
    format_name = "rpm"

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

    def _package(self) -> str:
        return staging.package_name(
            self.settings,
            os_name="linux",
            arch=get_architecture(),
            extension="rpm",
            installer=self.format_name,
        )

    def _run(self, args: Sequence[str], operation: str) -> str:
        return staging.run_step(self.handle, args, installer=self.format_name, operation=operation)

    def inspect(self) -> InstallerManifest:
        return InstallerManifest(
            work_dir="/var/lib/elastic-agent",
            commit_file="/etc/elastic-agent/.elastic-agent.active.commit",
        )

    def preinstall(self) -> None:
        staging.stage_package(self.handle, self.fetcher, self._package(), installer=self.format_name)
        self.state = InstallerState.PREINSTALLED

    def install(self) -> None:
        self._run(["yum", "localinstall", "-y", f"/{self._package()}"], "install")
        self.state = InstallerState.INSTALLED

    def postinstall(self) -> None:
        self._run(["systemctl", "daemon-reload"], "postinstall")
        self._run(["systemctl", "enable", "elastic-agent"], "postinstall")

    def install_certs(self) -> None:
        self._run(["yum", "install", "-y", "ca-certificates"], "install_certs")
        self._run(["update-ca-trust", "force-enable"], "install_certs")
        self._run(["update-ca-trust", "extract"], "install_certs")

    def enroll(self, token: str) -> None:
        args = staging.enroll_command("elastic-agent", "enroll", token, self.settings, installer=self.format_name)
        self._run(args, "enroll")
        self.state = InstallerState.ENROLLED

    def start(self) -> None:
        self._run(["systemctl", "start", "elastic-agent"], "start")
        self.state = InstallerState.STARTED

    def stop(self) -> None:
        self._run(["systemctl", "stop", "elastic-agent"], "stop")
        self.state = InstallerState.STOPPED

    def uninstall(self) -> None:
        self._run(["yum", "remove", "-y", "elastic-agent"], "uninstall")
        self.state = InstallerState.UNINSTALLED

    def exec(self, args: Sequence[str]) -> str:
        return self.handle.exec(args)

    def add_files(self, files: Sequence[str | Path]) -> None:
        self.handle.add_files(files)

    def logs(self) -> None:
        self.handle.logs()


__all__ = ["RpmInstaller"]
