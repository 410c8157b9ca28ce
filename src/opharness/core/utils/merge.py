"""Deep merge for layered configuration.

Dictionaries merge key by key. Lists are replaced by the higher layer unless
the override list starts with ``"+"``, in which case its remaining items are
appended (``binaries: ["+", "systemctl"]`` adds a binary to the defaults).
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = merge_arrays(current, value)
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge a list override onto a base list.

    Example:
        >>> merge_arrays(["docker"], ["podman"])
        ['podman']
        >>> merge_arrays(["docker"], ["+", "systemctl"])
        ['docker', 'systemctl']
    """
    if override and override[0] == "+":
        return [*base, *override[1:]]
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
