"""Lifecycle tests for every installer format against a fake deployment."""
from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _x86_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("platform.machine", lambda: "x86_64")


@pytest.fixture
def settings():
    from opharness.core.installer import InstallerSettings

    return InstallerSettings(version="8.0.0", base_version="7.10")


def _attach(format_name, deployment, fetcher, settings):
    from opharness.core.deploy import ServiceRequest
    from opharness.core.installer import attach_installer

    service = ServiceRequest(name="agent-host", project="fleet")
    return attach_installer(format_name, deployment, service, settings=settings, fetcher=fetcher)


FLAGS = [
    "-e",
    "-v",
    "--force",
    "--insecure",
    "--enrollment-token=TOKEN",
    "--url=http://fleet-server:8220",
]


class TestTarInstaller:
    def test_preinstall_fetches_stages_and_unpacks(self, fake_deployment, fake_fetcher, settings) -> None:
        installer = _attach("tar", fake_deployment, fake_fetcher, settings)

        installer.preinstall()

        name = "elastic-agent-8.0.0-linux-x86_64.tar.gz"
        assert fake_fetcher.requested == [name]
        assert fake_deployment.calls[0] == ("add_files", "agent-host", [f"/artifacts/{name}"])
        assert fake_deployment.exec_calls == [
            ["tar", "-xzf", f"/{name}", "-C", "/"],
            ["mv", "/elastic-agent-8.0.0-linux-x86_64", "/elastic-agent"],
        ]

    def test_full_cycle_reaches_enrolled_without_uninstall(self, fake_deployment, fake_fetcher, settings) -> None:
        from opharness.core.installer import InstallerState

        installer = _attach("tar", fake_deployment, fake_fetcher, settings)

        installer.preinstall()
        installer.install()
        installer.enroll("TOKEN")

        assert installer.state is InstallerState.ENROLLED
        assert fake_deployment.exec_calls[-1] == ["/elastic-agent/elastic-agent", "install", *FLAGS]
        assert not any("uninstall" in call for call in fake_deployment.exec_calls)

    def test_enroll_before_install_still_executes(self, fake_deployment, fake_fetcher, settings) -> None:
        installer = _attach("tar", fake_deployment, fake_fetcher, settings)

        installer.enroll("TOKEN")

        assert fake_deployment.exec_calls == [["/elastic-agent/elastic-agent", "install", *FLAGS]]

    def test_start_stop_uninstall(self, fake_deployment, fake_fetcher, settings) -> None:
        from opharness.core.installer import InstallerState

        installer = _attach("tar", fake_deployment, fake_fetcher, settings)

        installer.start()
        installer.stop()
        installer.uninstall()

        assert fake_deployment.exec_calls == [
            ["systemctl", "start", "elastic-agent"],
            ["systemctl", "stop", "elastic-agent"],
            ["elastic-agent", "uninstall", "-f"],
        ]
        assert installer.state is InstallerState.UNINSTALLED

    def test_inspect(self, fake_deployment, fake_fetcher, settings) -> None:
        manifest = _attach("tar", fake_deployment, fake_fetcher, settings).inspect()

        assert manifest.work_dir == "/opt/Elastic/Agent"
        assert manifest.commit_file == "/elastic-agent/.elastic-agent.active.commit"

    def test_missing_artifact_is_terminal_installer_error(self, fake_deployment, settings) -> None:
        from helpers.fakes import FakeFetcher
        from opharness.core.exceptions import InstallerError
        from opharness.core.installer import InstallerState

        installer = _attach("tar", fake_deployment, FakeFetcher(missing=True), settings)

        with pytest.raises(InstallerError) as exc_info:
            installer.preinstall()

        assert exc_info.value.context["operation"] == "preinstall"
        assert exc_info.value.context["installer"] == "tar"
        assert installer.state is InstallerState.UNSTAGED
        assert fake_deployment.calls == []


class TestRpmInstaller:
    def test_lifecycle_commands(self, fake_deployment, fake_fetcher, settings) -> None:
        installer = _attach("rpm", fake_deployment, fake_fetcher, settings)

        installer.preinstall()
        installer.install()
        installer.postinstall()
        installer.enroll("TOKEN")
        installer.start()
        installer.uninstall()

        assert fake_fetcher.requested == ["elastic-agent-8.0.0-x86_64.rpm"]
        assert fake_deployment.exec_calls == [
            ["yum", "localinstall", "-y", "/elastic-agent-8.0.0-x86_64.rpm"],
            ["systemctl", "daemon-reload"],
            ["systemctl", "enable", "elastic-agent"],
            ["elastic-agent", "enroll", *FLAGS],
            ["systemctl", "start", "elastic-agent"],
            ["yum", "remove", "-y", "elastic-agent"],
        ]

    def test_install_certs_uses_ca_trust(self, fake_deployment, fake_fetcher, settings) -> None:
        installer = _attach("rpm", fake_deployment, fake_fetcher, settings)

        installer.install_certs()

        assert fake_deployment.exec_calls == [
            ["yum", "install", "-y", "ca-certificates"],
            ["update-ca-trust", "force-enable"],
            ["update-ca-trust", "extract"],
        ]

    def test_enroll_failure_is_wrapped(self, fake_fetcher, settings) -> None:
        from helpers.fakes import FakeDeployment
        from opharness.core.exceptions import ExecError, InstallerError
        from opharness.core.installer import InstallerState

        deployment = FakeDeployment(fail_on=lambda argv: "enroll" in argv)
        installer = _attach("rpm", deployment, fake_fetcher, settings)

        with pytest.raises(InstallerError) as exc_info:
            installer.enroll("TOKEN")

        assert exc_info.value.context["command"] == ["elastic-agent", "enroll", *FLAGS]
        assert isinstance(exc_info.value.__cause__, ExecError)
        assert installer.state is InstallerState.UNSTAGED


class TestDebInstaller:
    def test_uses_debian_architecture_and_apt(self, fake_deployment, fake_fetcher, settings) -> None:
        installer = _attach("deb", fake_deployment, fake_fetcher, settings)

        installer.preinstall()
        installer.install()
        installer.stop()
        installer.uninstall()

        assert fake_fetcher.requested == ["elastic-agent-8.0.0-amd64.deb"]
        assert fake_deployment.exec_calls == [
            ["apt", "install", "/elastic-agent-8.0.0-amd64.deb", "-y"],
            ["systemctl", "stop", "elastic-agent"],
            ["apt-get", "remove", "-y", "elastic-agent"],
        ]

    def test_install_certs_uses_apt(self, fake_deployment, fake_fetcher, settings) -> None:
        from opharness.core.installer import InstallerState

        installer = _attach("deb", fake_deployment, fake_fetcher, settings)

        installer.install_certs()

        assert fake_deployment.exec_calls == [
            ["apt-get", "update"],
            ["apt", "install", "ca-certificates", "-y"],
            ["update-ca-certificates", "-f"],
        ]
        assert installer.state is InstallerState.UNSTAGED


class TestDockerInstaller:
    def test_image_is_recorded_not_copied(self, fake_deployment, fake_fetcher, settings) -> None:
        from opharness.core.installer import InstallerState

        installer = _attach("docker", fake_deployment, fake_fetcher, settings)

        installer.preinstall()
        installer.install()
        installer.uninstall()

        assert str(installer.image_path).endswith("elastic-agent-8.0.0-docker-image-linux-amd64.tar.gz")
        assert fake_deployment.calls == []
        assert installer.state is InstallerState.UNINSTALLED

    def test_start_stop_act_on_the_container(self, fake_deployment, fake_fetcher, settings) -> None:
        installer = _attach("docker", fake_deployment, fake_fetcher, settings)

        installer.start()
        installer.stop()

        assert fake_deployment.operations() == ["start", "stop"]

    def test_container_failure_is_wrapped(self, fake_fetcher, settings) -> None:
        from helpers.fakes import FakeDeployment
        from opharness.core.exceptions import InstallerError

        deployment = FakeDeployment()
        deployment.fail_lifecycle = True
        installer = _attach("docker", deployment, fake_fetcher, settings)

        with pytest.raises(InstallerError) as exc_info:
            installer.start()

        assert exc_info.value.context["operation"] == "start"


class TestDarwinInstaller:
    def test_launchctl_and_darwin_artifact(self, fake_deployment, fake_fetcher, settings) -> None:
        installer = _attach("darwin", fake_deployment, fake_fetcher, settings)

        installer.preinstall()
        installer.start()
        installer.stop()

        assert fake_fetcher.requested == ["elastic-agent-8.0.0-darwin-x86_64.tar.gz"]
        assert fake_deployment.exec_calls[-2:] == [
            ["launchctl", "start", "co.elastic.elastic-agent"],
            ["launchctl", "stop", "co.elastic.elastic-agent"],
        ]


@pytest.mark.parametrize("format_name", ["tar", "rpm", "deb", "docker", "darwin"])
def test_pass_through_operations(format_name, fake_deployment, fake_fetcher, settings) -> None:
    installer = _attach(format_name, fake_deployment, fake_fetcher, settings)

    assert installer.exec(["cat", "/etc/os-release"]) == "ok\n"
    installer.add_files(["/tmp/cert.pem"])
    installer.logs()

    assert fake_deployment.calls == [
        ("exec", "agent-host", ["cat", "/etc/os-release"]),
        ("add_files", "agent-host", ["/tmp/cert.pem"]),
        ("logs", "agent-host", None),
    ]


@pytest.mark.parametrize("format_name", ["tar", "rpm", "deb", "docker", "darwin"])
def test_empty_token_is_rejected(format_name, fake_deployment, fake_fetcher, settings) -> None:
    from opharness.core.exceptions import InstallerError

    installer = _attach(format_name, fake_deployment, fake_fetcher, settings)

    with pytest.raises(InstallerError):
        installer.enroll("")
    assert fake_deployment.calls == []


@pytest.mark.parametrize("format_name", ["tar", "docker", "darwin"])
def test_install_certs_is_a_no_op_for_bundled_formats(format_name, fake_deployment, fake_fetcher, settings) -> None:
    installer = _attach(format_name, fake_deployment, fake_fetcher, settings)

    installer.install_certs()

    assert fake_deployment.calls == []
