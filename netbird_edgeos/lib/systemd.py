from __future__ import annotations

import logging
from typing import Protocol

from .command import run_cmd

logger = logging.getLogger(__name__)


class UnitManager(Protocol):
    """The unit-manager verbs the reconciler and uninstaller rely on."""

    def is_active(self, unit: str) -> bool:
        ...

    def is_enabled(self, unit: str) -> bool:
        ...

    def enable(self, unit: str) -> None:
        ...

    def disable(self, unit: str) -> None:
        ...

    def start(self, unit: str) -> None:
        ...

    def stop(self, unit: str) -> None:
        ...

    def daemon_reload(self) -> None:
        ...


class Systemctl:
    """UnitManager backed by ``systemctl``. Failing control verbs raise CommandError."""

    def __init__(self, executable: str = "systemctl"):
        self.executable = executable

    def _query(self, verb: str, unit: str) -> bool:
        return run_cmd([self.executable, verb, "--quiet", unit], check=False, quiet=True).ok

    def is_active(self, unit: str) -> bool:
        return self._query("is-active", unit)

    def is_enabled(self, unit: str) -> bool:
        return self._query("is-enabled", unit)

    def enable(self, unit: str) -> None:
        run_cmd([self.executable, "enable", unit])

    def disable(self, unit: str) -> None:
        run_cmd([self.executable, "disable", unit])

    def start(self, unit: str) -> None:
        run_cmd([self.executable, "start", unit])

    def stop(self, unit: str) -> None:
        run_cmd([self.executable, "stop", unit])

    def daemon_reload(self) -> None:
        run_cmd([self.executable, "daemon-reload"])
