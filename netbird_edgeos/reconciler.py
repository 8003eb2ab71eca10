from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .errors import ConfigMissingError
from .installer_config import load_installer_config
from .lib.env import MOUNT_UNIT, SERVICE_UNIT
from .resources import (
    BinaryResource,
    ManagedResource,
    MountUnitResource,
    Observed,
    OverrideSymlinkResource,
    Outcome,
    ReconcileContext,
    ResourceKind,
    ResourceResult,
    ServiceRegistrationResource,
    UnitEnablementResource,
    UnitRunningStateResource,
    default_fragments,
    transition,
)
from .system import SystemState

logger = logging.getLogger(__name__)

CONFIG_RESOURCE_ID = "installer-config"


def build_file_resources() -> List[ManagedResource]:
    """Files and registrations, in dependency order. Changes here may need a reload."""

    return [
        BinaryResource(),
        ServiceRegistrationResource(),
        MountUnitResource(),
        *default_fragments(),
        OverrideSymlinkResource(),
    ]


def build_unit_resources() -> List[ManagedResource]:
    """Unit states, evaluated after the (optional) reload. Mount before service."""

    return [
        UnitEnablementResource(MOUNT_UNIT),
        UnitRunningStateResource(MOUNT_UNIT),
        UnitEnablementResource(SERVICE_UNIT),
        UnitRunningStateResource(SERVICE_UNIT),
    ]


@dataclass
class ReconciliationReport:
    results: List[ResourceResult] = field(default_factory=list)
    reloaded: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return self.reloaded or any(r.changed for r in self.results)

    def outcome_of(self, resource_id: str) -> Optional[Outcome]:
        for r in self.results:
            if r.resource_id == resource_id:
                return r.outcome
        return None

    def outcomes(self) -> Dict[str, Outcome]:
        return {r.resource_id: r.outcome for r in self.results}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "changed": self.changed,
            "reloaded": self.reloaded,
            "error": self.error,
            "resources": [r.to_dict() for r in self.results],
        }


def _converge(ctx: ReconcileContext, resource: ManagedResource, report: ReconciliationReport) -> bool:
    observed: Optional[Observed] = None
    try:
        observed = resource.observe(ctx)
        outcome = transition(observed)
        if outcome is Outcome.CREATED:
            resource.create(ctx)
        elif outcome is Outcome.REPAIRED:
            resource.repair(ctx)
    except Exception as e:
        logger.error("%s: failed (%s), aborting this pass", resource.resource_id, e)
        result = ResourceResult(
            resource_id=resource.resource_id,
            kind=resource.kind,
            observed=observed,
            outcome=Outcome.FAILED_FATAL,
            detail=str(e),
        )
        ctx.results[resource.resource_id] = result
        report.results.append(result)
        report.error = f"{resource.resource_id}: {e}"
        return False

    if outcome is Outcome.UNCHANGED:
        logger.debug("%s: %s", resource.resource_id, observed.value)
    else:
        logger.info("%s: %s -> %s", resource.resource_id, observed.value, outcome.value)

    result = ResourceResult(
        resource_id=resource.resource_id,
        kind=resource.kind,
        observed=observed,
        outcome=outcome,
    )
    ctx.results[resource.resource_id] = result
    report.results.append(result)
    return True


def reconcile(
    system: SystemState,
    *,
    file_resources: Optional[Sequence[ManagedResource]] = None,
    unit_resources: Optional[Sequence[ManagedResource]] = None,
) -> ReconciliationReport:
    """Run one convergence pass.

    Safe to repeat: every resource is observed first and only acted on when it
    is not already in its desired state. The first failure ends the pass; the
    next invocation (normally the next boot) resumes from whatever is left.
    """

    report = ReconciliationReport()

    try:
        config = load_installer_config(system.layout.installer_config)
    except ConfigMissingError as e:
        logger.error("%s. Cannot proceed.", e)
        report.results.append(
            ResourceResult(
                resource_id=CONFIG_RESOURCE_ID,
                kind=ResourceKind.PERSISTENT_CONFIG,
                observed=Observed.ABSENT,
                outcome=Outcome.FAILED_FATAL,
                detail=str(e),
            )
        )
        report.error = f"{CONFIG_RESOURCE_ID}: {e}"
        return report

    ctx = ReconcileContext(system=system, config=config)
    file_resources = build_file_resources() if file_resources is None else list(file_resources)
    unit_resources = build_unit_resources() if unit_resources is None else list(unit_resources)

    for resource in file_resources:
        if not _converge(ctx, resource, report):
            return report

    if any(r.triggers_reload and ctx.results[r.resource_id].changed for r in file_resources):
        try:
            system.units.daemon_reload()
        except Exception as e:
            logger.error("daemon-reload failed (%s), aborting this pass", e)
            report.error = f"daemon-reload: {e}"
            return report
        report.reloaded = True

    for resource in unit_resources:
        if not _converge(ctx, resource, report):
            return report

    if report.changed:
        logger.info("Reconciliation converged with changes")
    else:
        logger.info("Reconciliation: everything already converged")
    return report
