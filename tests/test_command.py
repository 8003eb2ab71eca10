from __future__ import annotations

import sys

import pytest

from netbird_edgeos.lib.agent import NetbirdCli
from netbird_edgeos.lib.command import CmdResult, CommandError, run_cmd
from netbird_edgeos.lib.systemd import Systemctl


def test_run_cmd_captures_output():
    r = run_cmd([sys.executable, "-c", "print('hello')"])
    assert r.ok
    assert r.stdout.strip() == "hello"


def test_run_cmd_raises_on_failure():
    with pytest.raises(CommandError) as exc:
        run_cmd([sys.executable, "-c", "import sys; sys.stderr.write('nope'); sys.exit(3)"])
    assert exc.value.returncode == 3
    assert "nope" in str(exc.value)


def test_run_cmd_unchecked_failure():
    r = run_cmd([sys.executable, "-c", "raise SystemExit(2)"], check=False)
    assert r.returncode == 2


def test_missing_executable_is_a_command_failure(tmp_path):
    with pytest.raises(CommandError) as exc:
        run_cmd([str(tmp_path / "no-such-binary")])
    assert exc.value.returncode == 127


class Recorder:
    def __init__(self, returncode=0):
        self.returncode = returncode
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append(list(argv))
        return CmdResult(argv=list(argv), returncode=self.returncode, stdout="", stderr="")


def test_systemctl_verbs(monkeypatch):
    rec = Recorder()
    monkeypatch.setattr("netbird_edgeos.lib.systemd.run_cmd", rec)
    sc = Systemctl()

    assert sc.is_active("netbird.service")
    sc.enable("var-lib-netbird.mount")
    sc.daemon_reload()

    assert rec.calls == [
        ["systemctl", "is-active", "--quiet", "netbird.service"],
        ["systemctl", "enable", "var-lib-netbird.mount"],
        ["systemctl", "daemon-reload"],
    ]


def test_systemctl_query_false_on_nonzero(monkeypatch):
    monkeypatch.setattr("netbird_edgeos.lib.systemd.run_cmd", Recorder(returncode=3))
    assert not Systemctl().is_enabled("netbird.service")


def test_netbird_cli_argv(monkeypatch, tmp_path):
    rec = Recorder()
    monkeypatch.setattr("netbird_edgeos.lib.agent.run_cmd", rec)
    cli = NetbirdCli(tmp_path / "netbird")

    cli.install(config_path="/config/netbird/config.json", management_url="https://nb.example.net")
    cli.uninstall()

    assert rec.calls == [
        [
            str(tmp_path / "netbird"),
            "service",
            "install",
            "--config",
            "/config/netbird/config.json",
            "--management-url",
            "https://nb.example.net",
        ],
        [str(tmp_path / "netbird"), "service", "uninstall"],
    ]
