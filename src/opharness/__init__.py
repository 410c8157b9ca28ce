"""
opharness - end-to-end test harness for agent packages

Provisions disposable docker compose environments, attaches a package
installer to one of their services and drives the agent through its
install, enroll, start, stop and uninstall lifecycle.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
