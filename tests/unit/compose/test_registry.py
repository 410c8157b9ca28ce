"""Tests for the environment registry."""
from __future__ import annotations

from pathlib import Path

import pytest


def write_compose(workspace: Path, kind: str, name: str, content: str = "services: {}\n") -> Path:
    """Helper to place a composition file in the workspace."""
    path = workspace / "compose" / kind / name / "docker-compose.yml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestInitialize:
    def test_bundled_entries_are_registered(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)

        assert set(registry.available_stacks()) == {"fleet-server", "a"}
        assert set(registry.available_services()) == {"apm-server", "redis", "a"}
        srv, found = registry.lookup_service("redis")
        assert found
        assert srv is not None
        assert srv.path == "services/redis/docker-compose.yml"
        assert srv.source == "bundled"

    def test_creates_workspace_compose_dirs(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        EnvironmentRegistry(memory_resources).initialize(workspace)

        assert (workspace / "compose" / "services").is_dir()
        assert (workspace / "compose" / "stacks").is_dir()

    def test_workspace_entries_overwrite_bundled(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        custom = write_compose(workspace, "services", "redis")
        extra = write_compose(workspace, "stacks", "custom-stack")
        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)

        srv, _ = registry.lookup_service("redis")
        stack, found = registry.lookup_stack("custom-stack")
        assert srv is not None and srv.path == str(custom)
        assert srv.source == "workspace"
        assert found and stack is not None and stack.path == str(extra)

    def test_workspace_dirs_without_compose_file_are_ignored(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        (workspace / "compose" / "services" / "empty").mkdir(parents=True)
        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)

        _, found = registry.lookup_service("empty")
        assert not found

    def test_bundled_paths_with_unexpected_shape_are_skipped(self, workspace: Path) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry
        from opharness.core.compose.resources import MemoryResources

        res = MemoryResources(
            {
                "services/ok/docker-compose.yml": "",
                "services/deep/nested/docker-compose.yml": "",
                "services/other/README.md": "",
                "README.md": "",
            }
        )
        registry = EnvironmentRegistry(res)
        registry.initialize(workspace)

        assert list(registry.available_services()) == ["ok"]

    def test_initialize_is_idempotent(self, workspace: Path, memory_resources, tmp_path: Path) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)
        before = registry.available_services()

        write_compose(workspace, "services", "late-arrival")
        registry.initialize(workspace)
        registry.initialize(tmp_path / "elsewhere")

        assert registry.available_services() == before
        assert registry.workspace == workspace
        assert not (tmp_path / "elsewhere").exists()

    def test_bundled_scan_failure_leaves_registry_uninitialized(self, workspace: Path) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry
        from opharness.core.exceptions import ConfigurationMissingError

        class BrokenResources:
            def walk(self):
                raise OSError("package data missing")

            def read_bytes(self, path: str) -> bytes:
                raise FileNotFoundError(path)

        registry = EnvironmentRegistry(BrokenResources())
        registry.initialize(workspace)

        assert not registry.is_initialized
        with pytest.raises(ConfigurationMissingError):
            registry.lookup_service("redis")

    def test_unwritable_workspace_raises(self, tmp_path: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry
        from opharness.core.exceptions import WorkspaceIOError

        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(WorkspaceIOError):
            EnvironmentRegistry(memory_resources).initialize(blocker)

    def test_concurrent_initialize_scans_once(self, workspace: Path) -> None:
        import threading

        from opharness.core.compose.registry import EnvironmentRegistry
        from opharness.core.compose.resources import MemoryResources

        class CountingResources(MemoryResources):
            def __init__(self, files) -> None:
                super().__init__(files)
                self.walks = 0
                self._count_lock = threading.Lock()

            def walk(self):
                with self._count_lock:
                    self.walks += 1
                return super().walk()

        resources = CountingResources(
            {
                "stacks/fleet-server/docker-compose.yml": "services: {}\n",
                "services/redis/docker-compose.yml": "services: {}\n",
            }
        )
        registry = EnvironmentRegistry(resources)
        barrier = threading.Barrier(8)
        errors: list[Exception] = []

        def worker() -> None:
            barrier.wait()
            try:
                registry.initialize(workspace)
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert errors == []
        assert resources.walks == 1
        assert registry.is_initialized
        assert registry.lookup_service("redis")[1]


class TestLookups:
    def test_lookup_before_initialize_raises(self, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry
        from opharness.core.exceptions import ConfigurationMissingError

        registry = EnvironmentRegistry(memory_resources)

        with pytest.raises(ConfigurationMissingError):
            registry.lookup_stack("fleet-server")
        with pytest.raises(ConfigurationMissingError):
            registry.available_services()

    def test_unknown_name_is_not_found(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)

        assert registry.lookup_stack("nope") == (None, False)

    def test_available_returns_copies(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)
        registry.available_services().clear()

        assert registry.lookup_service("redis")[1]


class TestServiceEnvironment:
    def test_bundled_service_gets_variant_version_and_path(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)

        env = registry.put_service_environment({}, "redis", "6.2")

        assert env == {
            "REDIS_VARIANT": "redis",
            "REDIS_VERSION": "6.2",
            "REDIS_PATH": str(workspace / "compose" / "services" / "redis"),
        }

    def test_workspace_service_path_is_its_directory(self, workspace: Path, memory_resources) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        custom = write_compose(workspace, "services", "apache")
        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)

        env = registry.put_service_environment({"KEEP": "1"}, "apache", "2.4")

        assert env["APACHE_PATH"] == str(custom.parent)
        assert env["KEEP"] == "1"

    def test_unknown_service_sets_variant_and_version_only(
        self, workspace: Path, memory_resources, caplog: pytest.LogCaptureFixture
    ) -> None:
        from opharness.core.compose.registry import EnvironmentRegistry

        registry = EnvironmentRegistry(memory_resources)
        registry.initialize(workspace)

        with caplog.at_level("WARNING"):
            env = registry.put_service_environment({}, "ghost", "1.0")

        assert env == {"GHOST_VARIANT": "ghost", "GHOST_VERSION": "1.0"}
        assert "ghost" in caplog.text


def test_snapshot_is_serializable(workspace: Path, memory_resources) -> None:
    import json

    from opharness.core.compose.registry import EnvironmentRegistry, snapshot

    registry = EnvironmentRegistry(memory_resources)
    registry.initialize(workspace)

    data = snapshot(registry)

    assert json.loads(json.dumps(data))["stacks"]["fleet-server"]["source"] == "bundled"
