"""Host binary detection."""

from __future__ import annotations

import logging
import shutil
from typing import Callable, Dict, Iterable, Optional

from opharness.core.exceptions import MissingBinaryError

logger = logging.getLogger(__name__)


def check_required_binaries(
    binaries: Iterable[str],
    which_func: Callable[[str], Optional[str]] = shutil.which,
) -> Dict[str, str]:
    """
    Verify that every binary in ``binaries`` is on PATH.

    Args:
        binaries: Executable names (e.g. ["docker"])
        which_func: Function to locate a command (defaults to shutil.which)

    Returns:
        Mapping of binary name to resolved path

    Raises:
        MissingBinaryError: Listing every binary that could not be found
    """
    logger.debug("Validating required tools...")
    found: Dict[str, str] = {}
    missing: list[str] = []
    for binary in binaries:
        path = which_func(binary)
        if not path:
            missing.append(binary)
            continue
        logger.debug("Binary is present: %s -> %s", binary, path)
        found[binary] = path

    if missing:
        raise MissingBinaryError(
            f"Required binaries are not present: {', '.join(missing)}",
            context={"missing": missing},
        )
    return found


__all__ = ["check_required_binaries"]
