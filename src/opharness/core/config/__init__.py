"""Configuration loading and typed accessors."""
from __future__ import annotations

from .base import BaseDomainConfig
from .manager import ConfigManager

__all__ = ["BaseDomainConfig", "ConfigManager"]
