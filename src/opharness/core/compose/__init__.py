"""Compose resolution and orchestration.

- resources: bundled (read-only) composition file sets
- resolver: name -> composition file, materializing bundled defaults
- registry: catalog of known services and stacks
- engine: docker compose execution
- orchestrator: up/down/add/remove over composed file sets
"""
from __future__ import annotations

from .engine import ComposeEngine, DockerComposeEngine
from .models import ComposeInvocation, ServiceSpec, StackSpec, compose_type
from .orchestrator import ComposeOrchestrator
from .registry import EnvironmentRegistry, snapshot
from .resolver import ComposeResolver
from .resources import MemoryResources, PackagedResources, ResourceSet

__all__ = [
    "ComposeEngine",
    "DockerComposeEngine",
    "ComposeInvocation",
    "ServiceSpec",
    "StackSpec",
    "compose_type",
    "ComposeOrchestrator",
    "EnvironmentRegistry",
    "snapshot",
    "ComposeResolver",
    "MemoryResources",
    "PackagedResources",
    "ResourceSet",
]
