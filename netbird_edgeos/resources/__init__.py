from .base import (
    ManagedResource,
    Observed,
    Outcome,
    ReconcileContext,
    ResourceKind,
    ResourceResult,
    transition,
)
from .binary import BinaryResource
from .mount_unit import MountUnitResource
from .override_fragments import OverrideFragmentResource, default_fragments
from .override_symlink import OverrideSymlinkResource
from .service_unit import ServiceRegistrationResource
from .unit_states import UnitEnablementResource, UnitRunningStateResource

__all__ = [
    "ManagedResource",
    "Observed",
    "Outcome",
    "ReconcileContext",
    "ResourceKind",
    "ResourceResult",
    "transition",
    "BinaryResource",
    "ServiceRegistrationResource",
    "MountUnitResource",
    "OverrideFragmentResource",
    "default_fragments",
    "OverrideSymlinkResource",
    "UnitEnablementResource",
    "UnitRunningStateResource",
]
