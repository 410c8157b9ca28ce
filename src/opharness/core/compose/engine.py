"""Compose engine: runs ``docker compose`` for an invocation."""
from __future__ import annotations

import logging
import subprocess
from typing import Any, Mapping, Optional, Protocol, Sequence, runtime_checkable

from opharness.core.compose.models import ComposeInvocation
from opharness.core.exceptions import ComposeCommandError
from opharness.core.utils.subprocess import run_with_timeout

logger = logging.getLogger(__name__)


@runtime_checkable
class ComposeEngine(Protocol):
    """Anything that can execute a ComposeInvocation."""

    def invoke(self, invocation: ComposeInvocation) -> str:
        """Run the invocation and return its stdout.

        Raises:
            ComposeCommandError: On a non-zero exit or a failure to launch
        """
        ...


class DockerComposeEngine:
    """Engine backed by the docker compose CLI."""

    def __init__(
        self,
        command: Sequence[str] = ("docker", "compose"),
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self.command = tuple(command)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "DockerComposeEngine":
        from opharness.core.config.domains import ComposeConfig, TimeoutsConfig

        return cls(
            ComposeConfig(config=config).command,
            timeout=TimeoutsConfig(config=config).compose_seconds,
        )

    def invoke(self, invocation: ComposeInvocation) -> str:
        argv = invocation.argv(self.command)
        ctx = {"argv": argv, "project": invocation.project_name}
        try:
            result = run_with_timeout(argv, timeout=self.timeout, env=invocation.env)
        except FileNotFoundError as exc:
            raise ComposeCommandError(f"Compose engine not found: {self.command[0]}", context=ctx) from exc
        except subprocess.TimeoutExpired as exc:
            raise ComposeCommandError(
                f"Compose command timed out after {self.timeout}s: {' '.join(argv)}",
                context=ctx,
            ) from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ComposeCommandError(
                f"Compose command failed with exit code {result.returncode}: {stderr}",
                context={**ctx, "returncode": result.returncode, "stderr": stderr},
            )
        return result.stdout or ""


__all__ = ["ComposeEngine", "DockerComposeEngine"]
