"""Tests for the client launchd job and its pyinfra operations."""

import plistlib
from unittest.mock import MagicMock, patch

import pytest

from hostwright.launchd import (
    CLIENT_LABEL,
    client_command,
    client_job,
    launchctl_load_command,
    launchctl_unload_command,
    launchd_plist_path,
    render_job,
    splay_sleep_time,
)
from hostwright.pyinfra_facts.launchd import LaunchdJobDefinition, LaunchdJobLoaded
from hostwright.pyinfra_operations import launchd as launchd_ops

PLIST_PATH = "/Library/LaunchDaemons/com.hostwright.client.plist"


def test_plist_path():
    assert launchd_plist_path(CLIENT_LABEL) == PLIST_PATH


class TestSplaySleepTime:
    def test_stable_per_host(self):
        assert splay_sleep_time(300, "mac-mini-01") == splay_sleep_time(300, "mac-mini-01")

    def test_within_range(self):
        for name in ["a", "b", "mac-mini-01", "build-07.example.com"]:
            assert 0 <= splay_sleep_time(300, name) < 300

    def test_shard_seed_overrides_host_name(self):
        assert splay_sleep_time(300, "a", shard_seed=42) == splay_sleep_time(300, "b", shard_seed=42)

    def test_splay_of_one_is_zero(self):
        assert splay_sleep_time(1, "mac-mini-01") == 0


def test_client_command():
    args = client_command(
        "/usr/local/bin/pyinfra", "/etc/hostwright", 17, daemon_options=["-v", "--limit", "mac mini"]
    )

    assert args == [
        "/bin/sh",
        "-c",
        "/bin/sleep 17; /usr/local/bin/pyinfra -v --limit 'mac mini' @local /etc/hostwright/deploy.py -y",
    ]


class TestClientJob:
    def test_required_keys(self):
        job = client_job(
            user="root",
            working_directory="/var/root",
            interval=30,
            program_arguments=["/bin/true"],
            log_path="/Library/Logs/Hostwright/client.log",
        )

        assert job == {
            "Label": CLIENT_LABEL,
            "UserName": "root",
            "WorkingDirectory": "/var/root",
            "StartInterval": 1800,
            "ProgramArguments": ["/bin/true"],
            "StandardOutPath": "/Library/Logs/Hostwright/client.log",
            "StandardErrorPath": "/Library/Logs/Hostwright/client.log",
            "LowPriorityIO": True,
        }

    def test_optional_keys(self):
        job = client_job(
            user="root",
            working_directory="/var/root",
            interval=5,
            program_arguments=["/bin/true"],
            log_path="/tmp/client.log",
            environment={"HTTPS_PROXY": "http://proxy:3128"},
            nice=10,
        )

        assert job["EnvironmentVariables"] == {"HTTPS_PROXY": "http://proxy:3128"}
        assert job["Nice"] == 10

    def test_render_job_is_xml_plist(self):
        job = client_job("root", "/var/root", 30, ["/bin/true"], "/tmp/client.log", nice=-5)
        rendered = render_job(job)

        assert rendered.startswith("<?xml")
        assert plistlib.loads(rendered.encode("utf-8")) == job


def test_launchctl_commands():
    assert launchctl_load_command(PLIST_PATH) == f"/bin/launchctl load -w {PLIST_PATH}"
    assert launchctl_unload_command(PLIST_PATH) == f"/bin/launchctl unload {PLIST_PATH}"
    assert launchctl_unload_command(PLIST_PATH, disable=True) == (
        f"/bin/launchctl unload -w {PLIST_PATH}"
    )


class TestLaunchdFacts:
    def test_job_loaded(self):
        fact = LaunchdJobLoaded()
        assert fact.command(label=CLIENT_LABEL) == (
            f"/bin/launchctl list {CLIENT_LABEL} > /dev/null 2>&1; echo $?"
        )
        assert fact.process(["0"]) is True
        assert fact.process(["113"]) is False

    def test_job_definition(self):
        fact = LaunchdJobDefinition()
        document = plistlib.dumps({"Label": CLIENT_LABEL}).decode("utf-8")

        assert fact.command(path=PLIST_PATH).startswith(
            f"/usr/bin/plutil -convert xml1 -o - {PLIST_PATH}"
        )
        assert fact.process(document.splitlines()) == {"Label": CLIENT_LABEL}
        assert fact.process([]) is None


@pytest.fixture
def fake_files():
    """Stand-in for pyinfra.operations.files whose sub-operations yield markers."""
    files = MagicMock()
    files.directory._inner.side_effect = lambda **kwargs: iter([])
    files.put._inner.side_effect = lambda **kwargs: iter([f"put {kwargs['dest']}"])
    return files


def _expected_job(fake_host):
    sleep_time = splay_sleep_time(300, fake_host.name)
    return client_job(
        user="root",
        working_directory="/var/root",
        interval=30,
        program_arguments=client_command("/usr/local/bin/pyinfra", "/etc/hostwright", sleep_time),
        log_path="/Library/Logs/Hostwright/client.log",
    )


class TestClientLaunchdOperations:
    def test_enable_writes_and_loads_new_job(self, fake_host, fake_files):
        fake_host.facts.update({LaunchdJobDefinition: None, LaunchdJobLoaded: False})

        with patch.object(launchd_ops, "host", fake_host), patch.object(launchd_ops, "files", fake_files):
            commands = list(launchd_ops.client_launchd_enable._inner())

        assert commands == [f"put {PLIST_PATH}", f"/bin/launchctl load -w {PLIST_PATH}"]
        fake_files.directory._inner.assert_called_once_with(
            path="/Library/Logs/Hostwright", user="root", mode="750"
        )
        written = fake_files.put._inner.call_args.kwargs["src"].getvalue()
        assert plistlib.loads(written.encode("utf-8")) == _expected_job(fake_host)

    def test_enable_reloads_changed_job(self, fake_host, fake_files):
        fake_host.facts.update({LaunchdJobDefinition: {"Label": CLIENT_LABEL}, LaunchdJobLoaded: True})

        with patch.object(launchd_ops, "host", fake_host), patch.object(launchd_ops, "files", fake_files):
            commands = list(launchd_ops.client_launchd_enable._inner())

        assert commands == [
            f"put {PLIST_PATH}",
            f"/bin/launchctl unload {PLIST_PATH}",
            f"/bin/launchctl load -w {PLIST_PATH}",
        ]

    def test_enable_noop_when_current(self, fake_host, fake_files):
        fake_host.facts.update(
            {LaunchdJobDefinition: _expected_job(fake_host), LaunchdJobLoaded: True}
        )

        with patch.object(launchd_ops, "host", fake_host), patch.object(launchd_ops, "files", fake_files):
            commands = list(launchd_ops.client_launchd_enable._inner())

        assert commands == []
        fake_host.noop.assert_called_once()
        fake_files.put._inner.assert_not_called()

    def test_enable_loads_unloaded_job(self, fake_host, fake_files):
        fake_host.facts.update(
            {LaunchdJobDefinition: _expected_job(fake_host), LaunchdJobLoaded: False}
        )

        with patch.object(launchd_ops, "host", fake_host), patch.object(launchd_ops, "files", fake_files):
            commands = list(launchd_ops.client_launchd_enable._inner())

        assert commands == [f"/bin/launchctl load -w {PLIST_PATH}"]

    def test_disable(self, fake_host):
        fake_host.facts[LaunchdJobLoaded] = True
        with patch.object(launchd_ops, "host", fake_host):
            commands = list(launchd_ops.client_launchd_disable._inner())

        assert commands == [f"/bin/launchctl unload -w {PLIST_PATH}"]

    def test_disable_noop_when_not_loaded(self, fake_host):
        fake_host.facts[LaunchdJobLoaded] = False
        with patch.object(launchd_ops, "host", fake_host):
            commands = list(launchd_ops.client_launchd_disable._inner())

        assert commands == []
        fake_host.noop.assert_called_once()
