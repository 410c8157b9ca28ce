"""Deployment backed by docker compose.

Every operation targets one service of a running compose project:

- add_files: ``docker compose cp <file> <service>:/``
- exec_in: ``docker compose exec -T <service> <args...>``
- logs: ``docker compose logs <service>``
- start/stop: ``docker compose start|stop <service>``
"""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from opharness.core.deploy.models import ServiceRequest
from opharness.core.exceptions import ExecError
from opharness.core.utils.subprocess import run_with_timeout

logger = logging.getLogger(__name__)


class ComposeDeployment:
    """Deployment implementation that shells out to the compose CLI."""

    def __init__(
        self,
        command: Sequence[str] = ("docker", "compose"),
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self.command = tuple(command)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ComposeDeployment":
        from opharness.core.config.domains import ComposeConfig, TimeoutsConfig

        return cls(
            ComposeConfig(config=config).command,
            timeout=TimeoutsConfig(config=config).exec_seconds,
        )

    def _base_args(self, service: ServiceRequest) -> List[str]:
        args = list(self.command)
        for path in service.spec_paths:
            args.extend(["-f", str(path)])
        args.extend(["-p", service.project.lower()])
        return args

    def _run(self, service: ServiceRequest, args: Sequence[str]) -> str:
        argv = [*self._base_args(service), *args]
        ctx = {"service": service.name, "project": service.project, "argv": argv}
        try:
            result = run_with_timeout(argv, timeout=self.timeout)
        except FileNotFoundError as exc:
            raise ExecError(f"Compose CLI not found: {self.command[0]}", context=ctx) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExecError(f"Command timed out after {self.timeout}s in {service.name}", context=ctx) from exc
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ExecError(
                f"Command failed in {service.name} with exit code {result.returncode}: {stderr}",
                context={**ctx, "returncode": result.returncode, "stderr": stderr},
            )
        return result.stdout or ""

    def add_files(self, service: ServiceRequest, files: Sequence[str | Path]) -> None:
        for file in files:
            logger.debug("Copying file into %s: %s", service.name, file)
            self._run(service, ["cp", str(file), f"{service.name}:/"])

    def exec_in(self, service: ServiceRequest, args: Sequence[str]) -> str:
        output = self._run(service, ["exec", "-T", service.name, *[str(a) for a in args]])
        logger.debug("Executed in %s: %s -> %s", service.name, list(args), output.strip())
        return output

    def logs(self, service: ServiceRequest) -> None:
        output = self._run(service, ["logs", service.name])
        logger.info("Logs for %s:\n%s", service.name, output)

    def start(self, service: ServiceRequest) -> None:
        self._run(service, ["start", service.name])

    def stop(self, service: ServiceRequest) -> None:
        self._run(service, ["stop", service.name])


__all__ = ["ComposeDeployment"]
