from __future__ import annotations

import logging

from ..errors import ArtifactMissingError
from ..lib.fsutil import write_file_atomic
from .base import Observed, ReconcileContext, ResourceKind

logger = logging.getLogger(__name__)


class BinaryResource:
    """The agent executable in the ephemeral store, rebuilt from the cached archive.

    Presence is trusted: an installed binary is never re-verified or upgraded.
    """

    resource_id = "binary"
    kind = ResourceKind.BINARY
    triggers_reload = False

    def observe(self, ctx: ReconcileContext) -> Observed:
        return Observed.MATCHING if ctx.system.layout.binary.is_file() else Observed.ABSENT

    def create(self, ctx: ReconcileContext) -> None:
        layout = ctx.system.layout
        artifacts = ctx.system.artifacts
        if not artifacts.has():
            raise ArtifactMissingError(
                f"NetBird cache missing ({artifacts.path}), cannot proceed unattended"
            )

        logger.info("NetBird binary not found, installing from cache")
        # Registration must follow every fresh install, even if this pass dies in between.
        write_file_atomic(layout.registration_marker, "binary installed, service registration pending\n")
        artifacts.extract_binary_to(layout.binary)

    def repair(self, ctx: ReconcileContext) -> None:
        self.create(ctx)
