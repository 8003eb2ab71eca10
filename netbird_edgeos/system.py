from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .artifacts import ArtifactStore
from .lib.agent import AgentService, NetbirdCli
from .lib.env import LAYOUT, Layout
from .lib.systemd import Systemctl, UnitManager


@dataclass
class SystemState:
    """Everything a pass may observe or change, passed in explicitly.

    Filesystem access goes through ``layout`` paths; unit-manager and agent
    calls through the two collaborator adapters. Tests swap in fakes.
    """

    layout: Layout
    units: UnitManager
    agent: AgentService
    artifacts: ArtifactStore


def host_system(layout: Optional[Layout] = None) -> SystemState:
    layout = layout or LAYOUT
    return SystemState(
        layout=layout,
        units=Systemctl(),
        agent=NetbirdCli(layout.binary),
        artifacts=ArtifactStore(layout.cached_archive),
    )
