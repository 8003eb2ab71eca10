from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .lib.env import MOUNT_UNIT, SERVICE_UNIT
from .lib.fsutil import remove_path
from .system import SystemState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeardownResult:
    action: str
    ok: bool
    error: Optional[str] = None


@dataclass
class UninstallReport:
    results: List[TeardownResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def failures(self) -> List[TeardownResult]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "actions": [
                {"action": r.action, "ok": r.ok, **({"error": r.error} if r.error else {})}
                for r in self.results
            ],
        }


def _remove(path) -> Callable[[], None]:
    def action() -> None:
        if remove_path(path):
            logger.info("Removed %s", path)

    return action


def _agent_uninstall(system: SystemState) -> Callable[[], None]:
    def action() -> None:
        if not system.layout.binary.exists():
            logger.info("NetBird binary not present, skipping service uninstall")
            return
        system.agent.uninstall()

    return action


def teardown_plan(system: SystemState) -> List[Tuple[str, Callable[[], None]]]:
    layout = system.layout
    units = system.units

    plan: List[Tuple[str, Callable[[], None]]] = [
        (f"stop {SERVICE_UNIT}", lambda: units.stop(SERVICE_UNIT)),
        (f"disable {SERVICE_UNIT}", lambda: units.disable(SERVICE_UNIT)),
        (f"stop {MOUNT_UNIT}", lambda: units.stop(MOUNT_UNIT)),
        (f"disable {MOUNT_UNIT}", lambda: units.disable(MOUNT_UNIT)),
        ("netbird service uninstall", _agent_uninstall(system)),
        (f"remove {layout.service_unit_file}", _remove(layout.service_unit_file)),
        (f"remove {layout.override_link}", _remove(layout.override_link)),
        (f"remove {layout.mount_unit_file}", _remove(layout.mount_unit_file)),
        (f"remove {layout.binary}", _remove(layout.binary)),
    ]
    plan += [(f"remove {p}", _remove(p)) for p in (layout.boot_hook, layout.upgrade_hook)]
    plan += [
        (f"remove {layout.archive_cache_dir}", _remove(layout.archive_cache_dir)),
        (f"remove {layout.persistent_dir}", _remove(layout.persistent_dir)),
        ("daemon-reload", units.daemon_reload),
    ]
    return plan


def uninstall(system: SystemState) -> UninstallReport:
    """Remove everything the reconciler and setup can create.

    Unconditional and best-effort: each action is attempted regardless of
    earlier failures, and a failure is logged and recorded, never raised.
    """

    logger.info("Uninstalling NetBird")
    report = UninstallReport()
    for name, action in teardown_plan(system):
        try:
            action()
        except Exception as e:
            logger.warning("Uninstall: %s failed (continuing): %s", name, e)
            report.results.append(TeardownResult(action=name, ok=False, error=str(e)))
        else:
            report.results.append(TeardownResult(action=name, ok=True))

    if report.ok:
        logger.info("NetBird has been uninstalled")
    else:
        logger.warning("NetBird uninstalled with %d failed action(s)", len(report.failures))
    return report
