"""Domain-specific configuration for Fleet enrollment."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class FleetConfigSection(BaseDomainConfig):
    """Accessor for the ``fleet`` section."""

    def _config_section(self) -> str:
        return "fleet"

    @cached_property
    def scheme(self) -> str:
        return str(self.section.get("scheme") or "http")

    @cached_property
    def host(self) -> str:
        return str(self.section.get("host") or "fleet-server")

    @cached_property
    def port(self) -> int:
        return int(self.section.get("port") or 8220)

    @cached_property
    def insecure(self) -> bool:
        return bool(self.section.get("insecure", True))


__all__ = ["FleetConfigSection"]
