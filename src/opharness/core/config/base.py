"""Base class for domain-specific configuration accessors.

Provides a standardized pattern for all domain configs:
- One merged config dict, loaded once and shared
- Type-safe section access
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific configuration accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("mySetting", "default")

        cfg = MyConfig(config=loaded)
        print(cfg.my_setting)
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        *,
        workspace: Optional[Path] = None,
    ) -> None:
        """Initialize domain config.

        Args:
            config: Already merged configuration. Loaded via ConfigManager if None.
            workspace: Workspace override used only when loading.
        """
        if config is None:
            from opharness.core.config.manager import ConfigManager

            config = ConfigManager(workspace).load_config()
        self._config = config

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """Get this domain's configuration section (empty dict if missing)."""
        return dict(self._config.get(self._config_section(), {}) or {})


__all__ = ["BaseDomainConfig"]
