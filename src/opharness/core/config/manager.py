from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from opharness.core.exceptions import ConfigError
from opharness.core.utils.io import read_yaml
from opharness.core.utils.merge import deep_merge
from opharness.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "OP_"
WORKSPACE_CONFIG_FILE = "config.yaml"

# Flat variable names, mapped onto nested keys.
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "OP_LOG_LEVEL": ("log", "level"),
    "OP_LOG_INCLUDE_TIMESTAMP": ("log", "include_timestamp"),
    "OP_WORKSPACE": ("workspace",),
}

# Values kept verbatim: "7.10" is a version, not a float.
_STRING_KEYS = {
    ("workspace",),
    ("agent", "version"),
    ("agent", "base_version"),
}


class ConfigManager:
    """Load, merge, and validate the harness configuration.

    Configuration sources (highest to lowest priority):
    1. Explicit ``workspace`` passed to the constructor
    2. Environment variables: OP_* (``__`` separates nested keys)
    3. Workspace config: <workspace>/config.yaml
    4. Bundled defaults: opharness.data/config/defaults.yaml

    The workspace location itself is bootstrapped from defaults + env before
    the workspace config file is read.
    """

    def __init__(
        self,
        workspace: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._explicit_workspace = Path(workspace).expanduser() if workspace else None
        self._environ = environ if environ is not None else os.environ
        self.core_config_path = get_data_path("config", "defaults.yaml")

    # ========== Env overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _typed(self, path: Tuple[str, ...] | List[str], value: str) -> Any:
        if tuple(path) in _STRING_KEYS:
            return value.strip()
        return self._coerce_type(value)

    def _split_env_key(self, raw: str) -> List[str]:
        return raw.split("__") if "__" in raw else raw.split("_")

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = self._split_env_key(raw)
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                context={"key": f"{ENV_PREFIX}{raw}"},
            )
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self, sections: List[str]) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self._environ.keys()):
            value = self._environ[key]
            if key in ENV_ALIASES:
                yield list(ENV_ALIASES[key]), self._typed(ENV_ALIASES[key], value)
                continue
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                continue
            # Unrelated OP_* variables from other tools are not config.
            if self._split_env_key(raw)[0].lower() not in sections:
                continue
            path = self._parse_env_key(raw)
            yield path, self._typed(path, value)

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        sections = list(cfg.keys())
        for path, typed_value in self._iter_env_overrides(sections):
            self._set_nested(cfg, path, typed_value)

    # ========== Loading ==========

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except Exception as exc:
            raise ConfigError(f"Cannot read configuration file {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must be a mapping: {path}", context={"path": str(path)})
        return data

    def resolve_workspace(self, cfg: Mapping[str, Any]) -> Path:
        if self._explicit_workspace is not None:
            return self._explicit_workspace.resolve()
        raw = os.path.expandvars(str(cfg.get("workspace") or "~/.op"))
        p = Path(raw).expanduser()
        if not p.is_absolute():
            p = Path.home() / p
        return p.resolve()

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from every layer.

        Args:
            validate: If True, validate against the bundled JSON schema

        Returns:
            Merged configuration; ``workspace`` is an absolute path string.

        Raises:
            ConfigError: On unreadable YAML, malformed env keys or schema errors.
        """
        cfg = self.load_yaml(self.core_config_path)

        bootstrap = dict(cfg)
        self.apply_env_overrides(bootstrap)
        workspace = self.resolve_workspace(bootstrap)

        workspace_cfg_path = workspace / WORKSPACE_CONFIG_FILE
        if workspace_cfg_path.exists():
            logger.debug("Loading workspace config: %s", workspace_cfg_path)
            cfg = deep_merge(cfg, self.load_yaml(workspace_cfg_path))

        self.apply_env_overrides(cfg)
        cfg["workspace"] = str(workspace)
        log_section = cfg.get("log")
        if isinstance(log_section, dict) and isinstance(log_section.get("level"), str):
            log_section["level"] = log_section["level"].upper()

        if validate:
            from opharness.core.config.validation import validate_payload

            validate_payload(cfg, "config.schema.yaml")
        return cfg


__all__ = ["ConfigManager", "ENV_PREFIX", "ENV_ALIASES", "WORKSPACE_CONFIG_FILE"]
