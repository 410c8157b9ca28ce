"""Tests for compose orchestration over a recording engine."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def orchestrator(workspace: Path, memory_resources, recording_engine):
    from opharness.core.compose.orchestrator import ComposeOrchestrator
    from opharness.core.compose.resolver import ComposeResolver

    return ComposeOrchestrator(ComposeResolver(workspace, memory_resources), recording_engine)


def _rel(paths, workspace: Path) -> list[str]:
    return [str(Path(p).relative_to(workspace / "compose").parent) for p in paths]


class TestUp:
    def test_stack_with_service_runs_one_invocation(self, orchestrator, recording_engine, workspace: Path) -> None:
        orchestrator.up(True, ["fleet-server", "apm-server"], {"A": "1"})

        assert len(recording_engine.invocations) == 1
        inv = recording_engine.invocations[0]
        assert _rel(inv.spec_paths, workspace) == ["stacks/fleet-server", "services/apm-server"]
        assert inv.command == ("up", "-d")
        assert inv.primary_name == "fleet-server"
        assert dict(inv.env) == {"A": "1"}

    def test_service_only_resolves_every_name_as_service(
        self, orchestrator, recording_engine, workspace: Path
    ) -> None:
        orchestrator.up(False, ["redis", "apm-server"])

        inv = recording_engine.invocations[0]
        assert _rel(inv.spec_paths, workspace) == ["services/redis", "services/apm-server"]

    def test_argv_groups_files_under_one_project(self, orchestrator, recording_engine) -> None:
        orchestrator.up(True, ["fleet-server", "apm-server"])

        argv = recording_engine.invocations[0].argv(["docker", "compose"])
        assert argv[:2] == ["docker", "compose"]
        assert argv.count("-f") == 2
        assert argv[-4:] == ["-p", "fleet-server", "up", "-d"]

    def test_unknown_name_fails_before_engine_call(self, orchestrator, recording_engine) -> None:
        from opharness.core.exceptions import ComposeNotFoundError

        with pytest.raises(ComposeNotFoundError):
            orchestrator.up(True, ["fleet-server", "nope"])

        assert recording_engine.invocations == []

    def test_empty_names_rejected(self, orchestrator) -> None:
        with pytest.raises(ValueError):
            orchestrator.up(True, [])

    def test_engine_failure_carries_paths_and_command(self, workspace: Path, memory_resources) -> None:
        from helpers.fakes import RecordingEngine
        from opharness.core.compose.orchestrator import ComposeOrchestrator
        from opharness.core.compose.resolver import ComposeResolver
        from opharness.core.exceptions import ComposeCommandError

        engine = RecordingEngine(fail_on=lambda inv: True)
        orch = ComposeOrchestrator(ComposeResolver(workspace, memory_resources), engine)

        with pytest.raises(ComposeCommandError) as exc_info:
            orch.up(False, ["redis"])

        ctx = exc_info.value.context
        assert ctx["command"] == ["up", "-d"]
        assert ctx["stack"] == "redis"
        assert ctx["paths"][0].endswith("services/redis/docker-compose.yml")
        assert isinstance(exc_info.value.__cause__, ComposeCommandError)
        assert len(engine.invocations) == 1


class TestDown:
    def test_single_char_service_name_resolves_as_stack(
        self, orchestrator, recording_engine, workspace: Path
    ) -> None:
        orchestrator.down(False, ["a"])

        inv = recording_engine.invocations[0]
        assert _rel(inv.spec_paths, workspace) == ["stacks/a"]
        assert inv.command == ("down",)

    def test_longer_service_name_resolves_as_service(
        self, orchestrator, recording_engine, workspace: Path
    ) -> None:
        orchestrator.down(False, ["redis"])

        assert _rel(recording_engine.invocations[0].spec_paths, workspace) == ["services/redis"]

    def test_stack_down_uses_up_resolution(self, orchestrator, recording_engine, workspace: Path) -> None:
        orchestrator.down(True, ["fleet-server", "apm-server"])

        inv = recording_engine.invocations[0]
        assert _rel(inv.spec_paths, workspace) == ["stacks/fleet-server", "services/apm-server"]
        assert inv.project_name == "fleet-server"


class TestServices:
    def test_add_services_prepends_stack(self, orchestrator, recording_engine, workspace: Path) -> None:
        orchestrator.add_services("fleet-server", ["apm-server", "redis"], {"X": "y"})

        inv = recording_engine.invocations[0]
        assert _rel(inv.spec_paths, workspace) == [
            "stacks/fleet-server",
            "services/apm-server",
            "services/redis",
        ]
        assert inv.command == ("up", "-d")

    def test_remove_services_runs_one_rm_per_service(self, orchestrator, recording_engine) -> None:
        orchestrator.remove_services("fleet-server", ["apm-server", "redis"])

        commands = [inv.command for inv in recording_engine.invocations]
        assert commands == [("rm", "-fvs", "apm-server"), ("rm", "-fvs", "redis")]
        assert all(len(inv.spec_paths) == 3 for inv in recording_engine.invocations)

    def test_remove_services_stops_at_first_failure(self, workspace: Path, memory_resources) -> None:
        from helpers.fakes import RecordingEngine
        from opharness.core.compose.orchestrator import ComposeOrchestrator
        from opharness.core.compose.resolver import ComposeResolver
        from opharness.core.exceptions import ComposeCommandError

        engine = RecordingEngine(fail_on=lambda inv: inv.command[-1] == "apm-server")
        orch = ComposeOrchestrator(ComposeResolver(workspace, memory_resources), engine)
        raised = None

        try:
            orch.remove_services("fleet-server", ["apm-server", "redis"])
        except ComposeCommandError as exc:
            raised = exc

        assert raised is not None
        assert "Could not run compose file" in str(raised)
        assert isinstance(raised.__cause__, ComposeCommandError)
        assert "rm -fvs apm-server" in str(raised.__cause__)
        assert raised.context["command"] == ["rm", "-fvs", "apm-server"]
        assert [inv.command[-1] for inv in engine.invocations] == ["apm-server"]
