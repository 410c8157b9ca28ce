"""Execution backends for live environments."""
from __future__ import annotations

from .compose import ComposeDeployment
from .models import Deployment, ServiceRequest

__all__ = ["ComposeDeployment", "Deployment", "ServiceRequest"]
