from __future__ import annotations

import io
import shutil
import tarfile
from pathlib import Path
from typing import List, Optional, Set, Tuple

import pytest

from netbird_edgeos.artifacts import ArtifactStore
from netbird_edgeos.installer_config import write_installer_config
from netbird_edgeos.lib.command import CmdResult, CommandError
from netbird_edgeos.lib.env import Layout
from netbird_edgeos.system import SystemState

MANAGEMENT_URL = "https://netbird.example.net"
BINARY_BYTES = b"#!/bin/sh\necho netbird\n"


def make_archive(path: Path, *, member: str = "netbird", content: bytes = BINARY_BYTES) -> Path:
    """A release-shaped tarball: the binary plus the usual extra files."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, data in [("LICENSE", b"BSD-3-Clause\n"), ("README.md", b"# netbird\n"), (member, content)]:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return path


def _failure(argv: List[str]) -> CommandError:
    return CommandError(CmdResult(argv=argv, returncode=1, stdout="", stderr="simulated failure"))


class FakeUnitManager:
    """In-memory unit manager. Only mutating verbs are recorded in ``calls``."""

    def __init__(self) -> None:
        self.enabled: Set[str] = set()
        self.active: Set[str] = set()
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.fail: Set[Tuple[str, Optional[str]]] = set()

    def _record(self, verb: str, unit: Optional[str] = None) -> None:
        self.calls.append((verb, unit))
        if (verb, unit) in self.fail:
            raise _failure(["systemctl", verb] + ([unit] if unit else []))

    def is_active(self, unit: str) -> bool:
        return unit in self.active

    def is_enabled(self, unit: str) -> bool:
        return unit in self.enabled

    def enable(self, unit: str) -> None:
        self._record("enable", unit)
        self.enabled.add(unit)

    def disable(self, unit: str) -> None:
        self._record("disable", unit)
        self.enabled.discard(unit)

    def start(self, unit: str) -> None:
        self._record("start", unit)
        self.active.add(unit)

    def stop(self, unit: str) -> None:
        self._record("stop", unit)
        self.active.discard(unit)

    def daemon_reload(self) -> None:
        self._record("daemon_reload")

    def wipe(self) -> None:
        self.enabled.clear()
        self.active.clear()


class FakeAgent:
    """Stands in for ``netbird service install|uninstall``; install writes the unit file like the real one."""

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.installs: List[Tuple[str, str]] = []
        self.uninstalls = 0
        self.fail_install = False

    def install(self, *, config_path: str, management_url: str) -> None:
        if self.fail_install:
            raise _failure(["netbird", "service", "install"])
        if self.layout.service_unit_file.exists():
            # netbird refuses with "Init already exists".
            raise _failure(["netbird", "service", "install"])
        self.installs.append((config_path, management_url))
        self.layout.service_unit_file.parent.mkdir(parents=True, exist_ok=True)
        self.layout.service_unit_file.write_text("[Service]\nExecStart=/usr/sbin/netbird service run\n")

    def uninstall(self) -> None:
        self.uninstalls += 1


def wipe_ephemeral(layout: Layout, units: FakeUnitManager) -> None:
    """What a firmware upgrade does: /usr and /etc come back from the image, /config stays."""

    for top in ("usr", "etc", "var"):
        shutil.rmtree(layout.path(top), ignore_errors=True)
    units.wipe()


@pytest.fixture
def layout(tmp_path: Path) -> Layout:
    root = tmp_path / "root"
    root.mkdir()
    return Layout(root=root)


@pytest.fixture
def scratch(tmp_path: Path) -> Path:
    return tmp_path / "scratch"


@pytest.fixture
def units() -> FakeUnitManager:
    return FakeUnitManager()


@pytest.fixture
def agent(layout: Layout) -> FakeAgent:
    return FakeAgent(layout)


@pytest.fixture
def system(layout: Layout, units: FakeUnitManager, agent: FakeAgent, scratch: Path) -> SystemState:
    return SystemState(
        layout=layout,
        units=units,
        agent=agent,
        artifacts=ArtifactStore(layout.cached_archive, scratch_dir=scratch),
    )


@pytest.fixture
def provisioned(system: SystemState) -> SystemState:
    """Persistent store as left by setup: installer config and cached archive."""

    write_installer_config(system.layout.installer_config, MANAGEMENT_URL)
    make_archive(system.layout.cached_archive)
    return system
