from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ..lib.env import ROUTER_UNIT, STATE_MOUNTPOINT
from ..lib.fsutil import path_present, write_file_atomic
from .base import Observed, ReconcileContext, ResourceKind

logger = logging.getLogger(__name__)

WAIT_FOR_NETWORKING = f"""\
# Start NetBird only after the EdgeOS routing daemons are up.
[Unit]
Wants={ROUTER_UNIT}
After={ROUTER_UNIT}
"""

STATE_MOUNT = f"""\
# NetBird keeps its state on /config through the bind mount.
[Unit]
RequiresMountsFor={STATE_MOUNTPOINT}
"""


@dataclass(frozen=True)
class OverrideFragmentResource:
    """A drop-in kept in the persistent store and published by the override symlink."""

    filename: str
    contents: str

    kind = ResourceKind.OVERRIDE_FRAGMENT
    triggers_reload = True

    @property
    def resource_id(self) -> str:
        return f"override:{self.filename}"

    def observe(self, ctx: ReconcileContext) -> Observed:
        p = ctx.system.layout.override_source_dir / self.filename
        return Observed.MATCHING if path_present(p) else Observed.ABSENT

    def create(self, ctx: ReconcileContext) -> None:
        p = ctx.system.layout.override_source_dir / self.filename
        write_file_atomic(p, self.contents)
        logger.info("Wrote override fragment %s", p)

    def repair(self, ctx: ReconcileContext) -> None:
        self.create(ctx)


def default_fragments() -> List[OverrideFragmentResource]:
    return [
        OverrideFragmentResource("10-wait-for-networking.conf", WAIT_FOR_NETWORKING),
        OverrideFragmentResource("20-state-mount.conf", STATE_MOUNT),
    ]
