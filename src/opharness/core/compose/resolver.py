"""Compose file resolution.

Maps a logical service/stack name to a composition file on disk:

1. ``<workspace>/compose/<type>/<name>/<file>`` when it exists (a tester's
   override always wins)
2. otherwise the bundled default, copied verbatim into that workspace path on
   first use; later resolutions take the workspace path directly

Nothing is cached: every call re-checks the filesystem.
"""
from __future__ import annotations

import logging
from pathlib import Path

from opharness.core.compose.models import DEFAULT_COMPOSE_FILE, compose_type
from opharness.core.compose.resources import ResourceSet
from opharness.core.exceptions import ComposeNotFoundError, WorkspaceIOError
from opharness.core.utils.io import atomic_write_bytes, ensure_directory

logger = logging.getLogger(__name__)


def _validate_name(name: str, kind: str) -> str:
    cleaned = str(name or "").strip()
    if not cleaned or "/" in cleaned or "\\" in cleaned or cleaned in {".", ".."}:
        raise ComposeNotFoundError(
            f"Invalid {kind} name: {name!r}",
            context={"name": name, "type": kind},
        )
    return cleaned


class ComposeResolver:
    """Resolve service and stack names to composition files."""

    def __init__(
        self,
        workspace: Path,
        resources: ResourceSet,
        *,
        file_name: str = DEFAULT_COMPOSE_FILE,
    ) -> None:
        self.workspace = Path(workspace)
        self.resources = resources
        self.file_name = file_name

    @property
    def compose_root(self) -> Path:
        return self.workspace / "compose"

    def resource_path(self, is_stack: bool, name: str) -> str:
        """Path of the bundled default inside the resource set."""
        return f"{compose_type(is_stack)}/{name}/{self.file_name}"

    def workspace_path(self, is_stack: bool, name: str) -> Path:
        """Path the composition file has (or will have) in the workspace."""
        return self.compose_root / compose_type(is_stack) / name / self.file_name

    def resolve(self, is_stack: bool, name: str) -> Path:
        """Return the composition file for ``name``, materializing it if needed.

        Raises:
            ComposeNotFoundError: Name is in neither the workspace nor the
                bundled set. No files are written in that case.
            WorkspaceIOError: The workspace directory or file cannot be written.
        """
        kind = compose_type(is_stack)
        name = _validate_name(name, kind)
        target = self.workspace_path(is_stack, name)

        if target.is_file():
            logger.debug("Compose file found at workdir: %s (type=%s)", target, kind)
            return target

        logger.debug(
            "Compose file not found at workdir, extracting from bundled resources: %s (type=%s)",
            target,
            kind,
        )
        resource = self.resource_path(is_stack, name)
        try:
            content = self.resources.read_bytes(resource)
        except FileNotFoundError as exc:
            logger.error("Could not find compose file: name=%s type=%s", name, kind)
            raise ComposeNotFoundError(
                f"Could not find compose file for {kind[:-1]} '{name}'",
                context={"name": name, "type": kind, "resource": resource},
            ) from exc

        try:
            ensure_directory(target.parent)
            atomic_write_bytes(target, content, mode=0o755)
        except OSError as exc:
            logger.error("Cannot write file at workdir: %s (%s)", target, exc)
            raise WorkspaceIOError(
                f"Cannot write compose file at workdir: {target}: {exc}",
                context={"name": name, "type": kind, "path": str(target)},
            ) from exc

        logger.debug("Compose file generated at workdir: %s (type=%s)", target, kind)
        return target


__all__ = ["ComposeResolver"]
