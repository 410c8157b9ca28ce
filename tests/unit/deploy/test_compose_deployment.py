"""Tests for the docker compose backed deployment."""
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any, List

import pytest


@pytest.fixture
def service():
    from opharness.core.deploy import ServiceRequest

    return ServiceRequest(
        name="centos-systemd",
        project="Fleet",
        spec_paths=(Path("/ws/stacks/fleet.yml"), Path("/ws/services/centos.yml")),
    )


@pytest.fixture
def recorded(monkeypatch: pytest.MonkeyPatch) -> List[List[str]]:
    from opharness.core.deploy import compose as compose_mod

    calls: List[List[str]] = []

    def fake_run(cmd, **kwargs: Any):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, 0, stdout="hello\n", stderr="")

    monkeypatch.setattr(compose_mod, "run_with_timeout", fake_run)
    return calls


BASE = ["docker", "compose", "-f", "/ws/stacks/fleet.yml", "-f", "/ws/services/centos.yml", "-p", "fleet"]


class TestComposeDeployment:
    def test_exec_in_runs_without_tty(self, service, recorded) -> None:
        from opharness.core.deploy import ComposeDeployment

        out = ComposeDeployment().exec_in(service, ["systemctl", "start", "elastic-agent"])

        assert out == "hello\n"
        assert recorded == [[*BASE, "exec", "-T", "centos-systemd", "systemctl", "start", "elastic-agent"]]

    def test_add_files_copies_each_into_root(self, service, recorded) -> None:
        from opharness.core.deploy import ComposeDeployment

        ComposeDeployment().add_files(service, ["/tmp/a.rpm", Path("/tmp/b.rpm")])

        assert recorded == [
            [*BASE, "cp", "/tmp/a.rpm", "centos-systemd:/"],
            [*BASE, "cp", "/tmp/b.rpm", "centos-systemd:/"],
        ]

    def test_lifecycle_commands(self, service, recorded) -> None:
        from opharness.core.deploy import ComposeDeployment

        deployment = ComposeDeployment()
        deployment.start(service)
        deployment.stop(service)
        deployment.logs(service)

        assert [c[len(BASE):] for c in recorded] == [
            ["start", "centos-systemd"],
            ["stop", "centos-systemd"],
            ["logs", "centos-systemd"],
        ]

    def test_non_zero_exit_raises_exec_error(self, service, monkeypatch: pytest.MonkeyPatch) -> None:
        from opharness.core.deploy import ComposeDeployment
        from opharness.core.deploy import compose as compose_mod
        from opharness.core.exceptions import ExecError

        monkeypatch.setattr(
            compose_mod,
            "run_with_timeout",
            lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout="", stderr="no such file\n"),
        )

        with pytest.raises(ExecError) as exc_info:
            ComposeDeployment().exec_in(service, ["ls", "/nope"])

        assert exc_info.value.context["returncode"] == 1
        assert exc_info.value.context["service"] == "centos-systemd"

    def test_satisfies_protocol(self) -> None:
        from opharness.core.deploy import ComposeDeployment, Deployment

        assert isinstance(ComposeDeployment(), Deployment)

    def test_from_config_uses_exec_timeout(self) -> None:
        from opharness.core.deploy import ComposeDeployment

        deployment = ComposeDeployment.from_config(
            {
                "workspace": "/tmp",
                "compose": {"file_name": "docker-compose.yml", "command": ["podman-compose"]},
                "timeouts": {"exec_seconds": 12},
            }
        )

        assert deployment.command == ("podman-compose",)
        assert deployment.timeout == 12.0
