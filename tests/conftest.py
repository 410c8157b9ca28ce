import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'opharness' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.fakes import FakeDeployment, FakeFetcher, RecordingEngine


@pytest.fixture(autouse=True)
def _isolate_op_environment(monkeypatch: pytest.MonkeyPatch):
    """Drop developer OP_* variables and reset process-wide caches per test."""
    for key in list(os.environ):
        if key.startswith("OP_"):
            monkeypatch.delenv(key, raising=False)

    from opharness.core.stdlib_logging import reset_logging_for_tests
    from opharness.data import clear_caches

    clear_caches()
    yield
    reset_logging_for_tests()
    clear_caches()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty workspace root (not created on disk)."""
    return tmp_path / "op-workspace"


@pytest.fixture
def memory_resources():
    """Small bundled set: two stacks and three services."""
    from opharness.core.compose.resources import MemoryResources

    return MemoryResources(
        {
            "stacks/fleet-server/docker-compose.yml": "services:\n  kibana:\n    image: kibana\n",
            "stacks/a/docker-compose.yml": "services:\n  a:\n    image: busybox\n",
            "services/apm-server/docker-compose.yml": "services:\n  apm-server:\n    image: apm\n",
            "services/redis/docker-compose.yml": "services:\n  redis:\n    image: redis:${REDIS_VERSION}\n",
            "services/a/docker-compose.yml": "services:\n  a-svc:\n    image: busybox\n",
        }
    )


@pytest.fixture
def recording_engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def fake_deployment() -> FakeDeployment:
    return FakeDeployment()


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
