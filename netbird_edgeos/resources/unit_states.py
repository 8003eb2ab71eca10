from __future__ import annotations

import logging

from .base import Observed, ReconcileContext, ResourceKind

logger = logging.getLogger(__name__)


class UnitEnablementResource:
    kind = ResourceKind.UNIT_ENABLEMENT
    triggers_reload = False

    def __init__(self, unit: str):
        self.unit = unit
        self.resource_id = f"enabled:{unit}"

    def observe(self, ctx: ReconcileContext) -> Observed:
        return Observed.MATCHING if ctx.system.units.is_enabled(self.unit) else Observed.ABSENT

    def create(self, ctx: ReconcileContext) -> None:
        ctx.system.units.enable(self.unit)

    def repair(self, ctx: ReconcileContext) -> None:
        self.create(ctx)


class UnitRunningStateResource:
    """Starts the unit only when it is not active, so a healthy agent session is left alone."""

    kind = ResourceKind.UNIT_RUNNING_STATE
    triggers_reload = False

    def __init__(self, unit: str):
        self.unit = unit
        self.resource_id = f"active:{unit}"

    def observe(self, ctx: ReconcileContext) -> Observed:
        return Observed.MATCHING if ctx.system.units.is_active(self.unit) else Observed.ABSENT

    def create(self, ctx: ReconcileContext) -> None:
        ctx.system.units.start(self.unit)

    def repair(self, ctx: ReconcileContext) -> None:
        self.create(ctx)
