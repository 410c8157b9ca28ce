"""Domain-specific configuration accessors.

Each class gives typed, cached access to one section of the merged config:

- LogConfig: log level and timestamp display
- ComposeConfig: composition file name and engine command
- TimeoutsConfig: engine and exec timeouts
- AgentConfig: agent artifact name and versions
- ArtifactsConfig: local artifact search directories
- FleetConfigSection: Fleet Server endpoint used for enrollment

Usage:
    from opharness.core.config.domains import ComposeConfig

    compose = ComposeConfig(config=cfg)
    compose.file_name
"""
from __future__ import annotations

from .agent import AgentConfig, ArtifactsConfig
from .compose import ComposeConfig, TimeoutsConfig
from .fleet import FleetConfigSection
from .logging import LogConfig

__all__ = [
    "AgentConfig",
    "ArtifactsConfig",
    "ComposeConfig",
    "TimeoutsConfig",
    "FleetConfigSection",
    "LogConfig",
]
