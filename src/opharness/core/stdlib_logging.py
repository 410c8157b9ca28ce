from __future__ import annotations

import logging
import sys

_OP_HANDLER: logging.Handler | None = None

# TRACE and PANIC follow logrus level names.
_LEVEL_ALIASES = {
    "TRACE": logging.DEBUG,
    "WARN": logging.WARNING,
    "FATAL": logging.CRITICAL,
    "PANIC": logging.CRITICAL,
}


def level_from_name(name: str) -> int:
    upper = str(name or "").upper()
    if upper in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[upper]
    value = logging.getLevelName(upper)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(*, level: str = "INFO", include_timestamp: bool = False) -> None:
    """Configure stdlib logging with a single stderr handler.

    Idempotent per-process: calling again replaces the handler installed by a
    previous call (so level/format changes apply) and leaves foreign handlers
    alone.
    """
    global _OP_HANDLER

    root = logging.getLogger()
    resolved = level_from_name(level)
    root.setLevel(resolved)

    if _OP_HANDLER is not None:
        root.removeHandler(_OP_HANDLER)
        _OP_HANDLER.close()
        _OP_HANDLER = None

    fmt = "%(levelname)s %(name)s: %(message)s"
    if include_timestamp:
        fmt = "%(asctime)s " + fmt

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
    _OP_HANDLER = handler


def reset_logging_for_tests() -> None:
    """Test-only: remove the handler installed by configure_logging."""
    global _OP_HANDLER
    if _OP_HANDLER is not None:
        logging.getLogger().removeHandler(_OP_HANDLER)
        _OP_HANDLER.close()
    _OP_HANDLER = None
    logging.getLogger().setLevel(logging.WARNING)


__all__ = ["configure_logging", "level_from_name", "reset_logging_for_tests"]
