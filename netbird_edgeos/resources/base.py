from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from ..installer_config import InstallerConfig
from ..system import SystemState

logger = logging.getLogger(__name__)


class ResourceKind(str, enum.Enum):
    BINARY = "binary"
    SERVICE_UNIT = "service_unit"
    MOUNT_UNIT = "mount_unit"
    OVERRIDE_FRAGMENT = "override_fragment"
    DIRECTORY_SYMLINK = "directory_symlink"
    UNIT_ENABLEMENT = "unit_enablement"
    UNIT_RUNNING_STATE = "unit_running_state"
    PERSISTENT_CONFIG = "persistent_config"


class Observed(str, enum.Enum):
    ABSENT = "absent"
    MATCHING = "present_matching"
    DIVERGENT = "present_divergent"


class Outcome(str, enum.Enum):
    UNCHANGED = "unchanged"
    CREATED = "created"
    REPAIRED = "repaired"
    FAILED_FATAL = "failed_fatal"


_TRANSITIONS = {
    Observed.ABSENT: Outcome.CREATED,
    Observed.DIVERGENT: Outcome.REPAIRED,
    Observed.MATCHING: Outcome.UNCHANGED,
}


def transition(observed: Observed) -> Outcome:
    """The only action a resource may take from an observed state."""

    return _TRANSITIONS[observed]


@dataclass(frozen=True)
class ResourceResult:
    resource_id: str
    kind: ResourceKind
    observed: Optional[Observed]
    outcome: Outcome
    detail: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.outcome in {Outcome.CREATED, Outcome.REPAIRED}

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "resource": self.resource_id,
            "kind": self.kind.value,
            "observed": self.observed.value if self.observed else None,
            "outcome": self.outcome.value,
        }
        if self.detail:
            d["detail"] = self.detail
        return d


@dataclass
class ReconcileContext:
    system: SystemState
    config: InstallerConfig
    results: Dict[str, ResourceResult] = field(default_factory=dict)

    def outcome_of(self, resource_id: str) -> Optional[Outcome]:
        r = self.results.get(resource_id)
        return r.outcome if r else None


class ManagedResource(Protocol):
    """A single idempotent resource.

    ``observe`` must not mutate anything. ``create``/``repair`` must leave the
    resource observed as MATCHING.
    """

    resource_id: str
    kind: ResourceKind
    # Whether a change to this resource requires a unit-manager reload.
    triggers_reload: bool

    def observe(self, ctx: ReconcileContext) -> Observed:
        ...

    def create(self, ctx: ReconcileContext) -> None:
        ...

    def repair(self, ctx: ReconcileContext) -> None:
        ...
