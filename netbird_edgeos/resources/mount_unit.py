from __future__ import annotations

import logging

from ..lib.env import MOUNT_UNIT, SERVICE_UNIT, STATE_MOUNTPOINT, Layout
from ..lib.fsutil import path_present, write_file_atomic
from .base import Observed, ReconcileContext, ResourceKind

logger = logging.getLogger(__name__)


def render_mount_unit(layout: Layout) -> str:
    return "\n".join(
        [
            "[Unit]",
            "Description=Persistent NetBird state (bind mount from /config)",
            f"Before={SERVICE_UNIT}",
            "",
            "[Mount]",
            f"What={layout.state_source_logical}",
            f"Where={STATE_MOUNTPOINT}",
            "Type=none",
            "Options=bind",
            "",
            "[Install]",
            "WantedBy=multi-user.target",
            "",
        ]
    )


class MountUnitResource:
    resource_id = MOUNT_UNIT
    kind = ResourceKind.MOUNT_UNIT
    triggers_reload = True

    def observe(self, ctx: ReconcileContext) -> Observed:
        # Static content: presence is correctness.
        return Observed.MATCHING if path_present(ctx.system.layout.mount_unit_file) else Observed.ABSENT

    def create(self, ctx: ReconcileContext) -> None:
        layout = ctx.system.layout
        layout.state_source_dir.mkdir(parents=True, exist_ok=True)
        write_file_atomic(layout.mount_unit_file, render_mount_unit(layout))
        logger.info("Wrote %s", layout.mount_unit_file)

    def repair(self, ctx: ReconcileContext) -> None:
        self.create(ctx)
