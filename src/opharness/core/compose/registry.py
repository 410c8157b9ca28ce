"""Environment registry: the catalog of known services and stacks.

Population happens once per registry instance:

1. every bundled resource ``<type>/<name>/<file>`` registers a bundled entry
2. every ``<workspace>/compose/<type>/<name>/`` directory holding the
   composition file registers (or overwrites) a workspace entry

so a workspace directory with the same name shadows the bundled default.
After population the registry is read-only.
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional, Tuple

from opharness.core.compose.models import (
    DEFAULT_COMPOSE_FILE,
    SERVICES,
    STACKS,
    ServiceSpec,
    StackSpec,
)
from opharness.core.compose.resources import ResourceSet
from opharness.core.exceptions import ConfigurationMissingError, WorkspaceIOError
from opharness.core.utils.io import ensure_directory

logger = logging.getLogger(__name__)


class EnvironmentRegistry:
    """Catalog of services and stacks keyed by name.

    Services and stacks live in separate namespaces, so a service and a stack
    may share a name.
    """

    def __init__(self, resources: ResourceSet, *, file_name: str = DEFAULT_COMPOSE_FILE) -> None:
        self.resources = resources
        self.file_name = file_name
        self.workspace: Optional[Path] = None
        self._services: Dict[str, ServiceSpec] = {}
        self._stacks: Dict[str, StackSpec] = {}
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, workspace: Path) -> None:
        """Populate the registry from bundled resources and ``workspace``.

        A no-op once a previous call succeeded. If the bundled scan fails the
        registry stays empty and uninitialized; the failure is logged, not
        raised, and lookups keep raising ConfigurationMissingError.

        Raises:
            WorkspaceIOError: The workspace compose directories cannot be created.
        """
        with self._lock:
            if self._initialized:
                return

            workspace = Path(workspace)
            self._ensure_workspace_dirs(workspace)

            services: Dict[str, ServiceSpec] = {}
            stacks: Dict[str, StackSpec] = {}
            try:
                self._scan_bundled(services, stacks)
            except (OSError, ValueError) as exc:
                logger.error("Could not get packaged compose files (workspace=%s): %s", workspace, exc)
                return

            self._scan_workspace(workspace, SERVICES, services, stacks)
            self._scan_workspace(workspace, STACKS, services, stacks)

            self._services = services
            self._stacks = stacks
            self.workspace = workspace
            self._initialized = True
            logger.debug(
                "Registry initialized: %d services, %d stacks (workspace=%s)",
                len(services),
                len(stacks),
                workspace,
            )

    def _ensure_workspace_dirs(self, workspace: Path) -> None:
        services_path = workspace / "compose" / SERVICES
        stacks_path = workspace / "compose" / STACKS
        try:
            ensure_directory(services_path)
            ensure_directory(stacks_path)
        except OSError as exc:
            raise WorkspaceIOError(
                f"Cannot create workspace directories under {workspace}: {exc}",
                context={"path": str(workspace)},
            ) from exc
        logger.debug("Workspace dirs ready: services=%s stacks=%s", services_path, stacks_path)

    def _scan_bundled(self, services: Dict[str, ServiceSpec], stacks: Dict[str, StackSpec]) -> None:
        for boxed_path in self.resources.walk():
            # Expect exactly three tokens: e.g. 'services/redis/docker-compose.yml'
            tokens = boxed_path.split("/")
            if len(tokens) != 3 or tokens[2] != self.file_name:
                logger.debug("Skipping bundled file: %s", boxed_path)
                continue
            compose_kind, name = tokens[0], tokens[1]
            logger.debug("Bundled file: %s (name=%s)", boxed_path, name)
            if compose_kind == STACKS:
                stacks[name] = StackSpec(name=name, path=boxed_path, source="bundled")
            elif compose_kind == SERVICES:
                services[name] = ServiceSpec(name=name, path=boxed_path, source="bundled")

    def _scan_workspace(
        self,
        workspace: Path,
        compose_kind: str,
        services: Dict[str, ServiceSpec],
        stacks: Dict[str, StackSpec],
    ) -> None:
        base_path = workspace / "compose" / compose_kind
        try:
            entries = sorted(base_path.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.warning("Could not load file system: %s (type=%s): %s", base_path, compose_kind, exc)
            return

        for entry in entries:
            if not entry.is_dir():
                continue
            compose_file = entry / self.file_name
            if not compose_file.is_file():
                continue
            logger.debug("Workspace file: %s (name=%s)", compose_file, entry.name)
            if compose_kind == SERVICES:
                services[entry.name] = ServiceSpec(name=entry.name, path=str(compose_file), source="workspace")
            else:
                stacks[entry.name] = StackSpec(name=entry.name, path=str(compose_file), source="workspace")

    # ========== Lookups ==========

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise ConfigurationMissingError(
                "Environment registry used before successful initialization",
                context={"workspace": str(self.workspace) if self.workspace else None},
            )

    def lookup_service(self, name: str) -> Tuple[Optional[ServiceSpec], bool]:
        self._require_initialized()
        srv = self._services.get(name)
        return srv, srv is not None

    def lookup_stack(self, name: str) -> Tuple[Optional[StackSpec], bool]:
        self._require_initialized()
        stack = self._stacks.get(name)
        return stack, stack is not None

    def available_services(self) -> Dict[str, ServiceSpec]:
        self._require_initialized()
        return dict(self._services)

    def available_stacks(self) -> Dict[str, StackSpec]:
        self._require_initialized()
        return dict(self._stacks)

    def put_service_environment(
        self,
        env: MutableMapping[str, str],
        service: str,
        service_version: str,
    ) -> MutableMapping[str, str]:
        """Export the variables a service's compose file expects.

        Sets ``<SERVICE>_VARIANT``, ``<SERVICE>_VERSION`` and, for registered
        services, ``<SERVICE>_PATH`` (workspace directory of its compose file).
        Example for "apache": APACHE_VARIANT, APACHE_VERSION, APACHE_PATH.
        """
        service_upper = service.upper()
        env[f"{service_upper}_VARIANT"] = service
        env[f"{service_upper}_VERSION"] = service_version

        srv, exists = self.lookup_service(service)
        if not exists or srv is None:
            logger.warning("Could not find compose file for service: %s", service)
            return env

        srv_path = Path(srv.path)
        if not srv_path.is_absolute() and self.workspace is not None:
            srv_path = self.workspace / "compose" / srv.path
        env[f"{service_upper}_PATH"] = str(srv_path.parent)
        return env


def snapshot(registry: EnvironmentRegistry) -> Mapping[str, Mapping[str, dict]]:
    """Serializable view of a populated registry."""
    return {
        SERVICES: {n: s.to_dict() for n, s in sorted(registry.available_services().items())},
        STACKS: {n: s.to_dict() for n, s in sorted(registry.available_stacks().items())},
    }


__all__ = ["EnvironmentRegistry", "snapshot"]
