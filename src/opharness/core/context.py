"""Harness context: the explicitly owned home of config, registry and resolver.

A test-run driver creates one context, initializes it, passes it around and
tears it down at the end. Independent contexts in one process do not share
state; only the workspace directory on disk can be shared.
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from opharness.core.compose.engine import ComposeEngine, DockerComposeEngine
from opharness.core.compose.orchestrator import ComposeOrchestrator
from opharness.core.compose.registry import EnvironmentRegistry
from opharness.core.compose.resolver import ComposeResolver
from opharness.core.compose.resources import PackagedResources, ResourceSet
from opharness.core.config.domains import ComposeConfig, LogConfig
from opharness.core.config.manager import ConfigManager
from opharness.core.exceptions import ConfigurationMissingError
from opharness.core.stdlib_logging import configure_logging
from opharness.core.utils.dependencies import check_required_binaries

logger = logging.getLogger(__name__)


class HarnessContext:
    """Owns the configuration, registry, resolver and orchestrator of one run.

    Usage:
        with HarnessContext().initialize() as ctx:
            ctx.orchestrator.up(True, ["fleet", "apm-server"])
    """

    def __init__(
        self,
        workspace: Optional[Path] = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
        resources: Optional[ResourceSet] = None,
        engine: Optional[ComposeEngine] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._workspace_override = workspace
        self._config_override = config
        self._resources = resources
        self._engine = engine
        self._environ = environ
        self._lock = threading.Lock()
        self._config: Optional[Dict[str, Any]] = None
        self._registry: Optional[EnvironmentRegistry] = None
        self._resolver: Optional[ComposeResolver] = None
        self._orchestrator: Optional[ComposeOrchestrator] = None

    @property
    def is_initialized(self) -> bool:
        return self._registry is not None and self._registry.is_initialized

    def initialize(self, *, check_binaries: bool = False, configure_logs: bool = True) -> "HarnessContext":
        """Load config and populate the registry. A no-op after the first success.

        Raises:
            ConfigError: Configuration is invalid
            MissingBinaryError: ``check_binaries`` is set and a binary is missing
            WorkspaceIOError: Workspace directories cannot be created
        """
        with self._lock:
            if self.is_initialized:
                return self

            if self._config_override is not None:
                config = dict(self._config_override)
                if self._workspace_override is not None:
                    config["workspace"] = str(self._workspace_override)
            else:
                config = ConfigManager(self._workspace_override, environ=self._environ).load_config()

            if configure_logs:
                log_cfg = LogConfig(config=config)
                configure_logging(level=log_cfg.level, include_timestamp=log_cfg.include_timestamp)

            compose_cfg = ComposeConfig(config=config)
            if check_binaries:
                check_required_binaries(compose_cfg.binaries)

            resources = self._resources or PackagedResources()
            registry = self._registry or EnvironmentRegistry(resources, file_name=compose_cfg.file_name)
            registry.initialize(compose_cfg.workspace)

            resolver = ComposeResolver(compose_cfg.workspace, resources, file_name=compose_cfg.file_name)
            engine = self._engine or DockerComposeEngine.from_config(config)

            self._config = config
            self._registry = registry
            self._resolver = resolver
            self._orchestrator = ComposeOrchestrator(resolver, engine)
            if registry.is_initialized:
                logger.debug("Harness context initialized (workspace=%s)", compose_cfg.workspace)
            return self

    def teardown(self) -> None:
        """Drop every reference. Files materialized in the workspace stay on disk."""
        with self._lock:
            self._config = None
            self._registry = None
            self._resolver = None
            self._orchestrator = None

    def __enter__(self) -> "HarnessContext":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()

    def _require(self, value: Any, what: str) -> Any:
        if value is None:
            raise ConfigurationMissingError(
                f"Harness context used before initialization ({what})",
                context={"component": what},
            )
        return value

    @property
    def config(self) -> Dict[str, Any]:
        return self._require(self._config, "config")

    @property
    def workspace(self) -> Path:
        return ComposeConfig(config=self.config).workspace

    @property
    def registry(self) -> EnvironmentRegistry:
        return self._require(self._registry, "registry")

    @property
    def resolver(self) -> ComposeResolver:
        return self._require(self._resolver, "resolver")

    @property
    def orchestrator(self) -> ComposeOrchestrator:
        return self._require(self._orchestrator, "orchestrator")


__all__ = ["HarnessContext"]
