from __future__ import annotations

import logging

from .base import Observed, ReconcileContext, ResourceKind

logger = logging.getLogger(__name__)


class ServiceRegistrationResource:
    """``netbird service install``, run once per fresh binary install.

    The pending-registration marker written by the binary step is the observed
    state. The agent's installer is not safe to re-run against a live unit, so
    an already-installed binary never triggers registration, and neither does
    a marker left behind once the unit file exists.
    """

    resource_id = "service"
    kind = ResourceKind.SERVICE_UNIT
    triggers_reload = False

    def observe(self, ctx: ReconcileContext) -> Observed:
        layout = ctx.system.layout
        if layout.registration_marker.exists():
            if layout.service_unit_file.exists():
                # Registered, but the pass died before clearing the marker.
                return Observed.DIVERGENT
            return Observed.ABSENT
        if not layout.service_unit_file.exists():
            logger.warning(
                "%s missing although the binary is installed; not re-registering", layout.service_unit_file
            )
        return Observed.MATCHING

    def create(self, ctx: ReconcileContext) -> None:
        layout = ctx.system.layout
        layout.persistent_dir.mkdir(parents=True, exist_ok=True)
        ctx.system.agent.install(
            config_path=layout.agent_config_logical,
            management_url=ctx.config.management_url,
        )
        layout.registration_marker.unlink()

    def repair(self, ctx: ReconcileContext) -> None:
        marker = ctx.system.layout.registration_marker
        logger.warning("Service already registered, clearing stale %s", marker)
        marker.unlink()
