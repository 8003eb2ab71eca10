from __future__ import annotations

import logging
import os
from pathlib import Path

from ..lib.fsutil import remove_path
from .base import Observed, ReconcileContext, ResourceKind

logger = logging.getLogger(__name__)


def _describe(path: Path) -> str:
    if path.is_symlink():
        return f"symlink -> {os.readlink(path)}"
    if path.is_dir():
        return "directory"
    return "regular file"


class OverrideSymlinkResource:
    """Publishes the persistent drop-in directory as ``netbird.service.d`` in the unit tree."""

    resource_id = "override-link"
    kind = ResourceKind.DIRECTORY_SYMLINK
    triggers_reload = True

    def observe(self, ctx: ReconcileContext) -> Observed:
        layout = ctx.system.layout
        link = layout.override_link
        if link.is_symlink():
            if os.readlink(link) == layout.override_source_logical:
                return Observed.MATCHING
            return Observed.DIVERGENT
        if link.exists():
            return Observed.DIVERGENT
        return Observed.ABSENT

    def create(self, ctx: ReconcileContext) -> None:
        layout = ctx.system.layout
        layout.override_link.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(layout.override_source_logical, layout.override_link)
        logger.info("Linked %s -> %s", layout.override_link, layout.override_source_logical)

    def repair(self, ctx: ReconcileContext) -> None:
        link = ctx.system.layout.override_link
        logger.warning("Removing %s occupying %s", _describe(link), link)
        remove_path(link)
        self.create(ctx)
