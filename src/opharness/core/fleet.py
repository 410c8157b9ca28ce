"""Fleet enrollment configuration.

Turns an enrollment token plus the configured Fleet Server endpoint into the
flags accepted by ``elastic-agent install`` and ``elastic-agent enroll``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional


@dataclass(frozen=True, slots=True)
class FleetConfig:
    enrollment_token: str
    scheme: str = "http"
    host: str = "fleet-server"
    port: int = 8220
    insecure: bool = True

    @classmethod
    def from_token(cls, token: str, settings: Optional[Mapping[str, Any]] = None) -> "FleetConfig":
        """Build a config for ``token``.

        Args:
            token: Enrollment token (must be non-empty)
            settings: Merged harness config; the ``fleet`` section is read when given
        """
        if not token:
            raise ValueError("Enrollment token is required")
        if settings is None:
            return cls(enrollment_token=token)

        from opharness.core.config.domains import FleetConfigSection

        section = FleetConfigSection(config=settings)
        return cls(
            enrollment_token=token,
            scheme=section.scheme,
            host=section.host,
            port=section.port,
            insecure=section.insecure,
        )

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def flags(self) -> List[str]:
        flags = ["-e", "-v", "--force"]
        if self.insecure:
            flags.append("--insecure")
        flags.extend([f"--enrollment-token={self.enrollment_token}", f"--url={self.url}"])
        return flags


__all__ = ["FleetConfig"]
