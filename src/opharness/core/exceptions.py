from __future__ import annotations

from typing import Any, Dict, Mapping


class OpError(Exception):
    """Base exception for the harness."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ComposeNotFoundError(OpError, FileNotFoundError):
    """Raised when a service or stack is in neither the workspace nor the bundled set."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OpError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class WorkspaceIOError(OpError, OSError):
    """Raised when the workspace tree cannot be created or written."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OpError.__init__(self, message, context=context)
        OSError.__init__(self, message)


class ComposeCommandError(OpError, RuntimeError):
    """Raised when the compose engine returns non-zero or cannot be run."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OpError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ExecError(OpError, RuntimeError):
    """Raised when a command run inside a service environment fails."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OpError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class ConfigurationMissingError(OpError):
    """Raised when the registry or context is used before initialization."""


class ConfigError(OpError, ValueError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OpError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class MissingBinaryError(OpError):
    """Raised when a required host binary is not on PATH."""


class ArtifactNotFoundError(OpError, FileNotFoundError):
    """Raised when a package artifact is not available locally."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        OpError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class InstallerError(OpError):
    """Raised when an installer lifecycle operation fails."""

    def __init__(
        self,
        message: str,
        *,
        installer: str | None = None,
        operation: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if installer:
            ctx["installer"] = installer
        if operation:
            ctx["operation"] = operation
        super().__init__(message, context=ctx)


class UnknownInstallerFormatError(InstallerError):
    """Raised when no installer is registered for a package format."""


__all__ = [
    "OpError",
    "ComposeNotFoundError",
    "WorkspaceIOError",
    "ComposeCommandError",
    "ExecError",
    "ConfigurationMissingError",
    "ConfigError",
    "MissingBinaryError",
    "ArtifactNotFoundError",
    "InstallerError",
    "UnknownInstallerFormatError",
]
