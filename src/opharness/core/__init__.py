"""opharness core library: compose resolution, orchestration and installers."""

from . import exceptions  # noqa: F401

__all__ = ["exceptions"]
