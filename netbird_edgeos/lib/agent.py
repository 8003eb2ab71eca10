from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .command import run_cmd

logger = logging.getLogger(__name__)


class AgentService(Protocol):
    """The agent's own service registration commands.

    Neither is guaranteed idempotent against a live unit; call each once per registration.
    """

    def install(self, *, config_path: str, management_url: str) -> None:
        ...

    def uninstall(self) -> None:
        ...


class NetbirdCli:
    def __init__(self, binary: Path):
        self.binary = Path(binary)

    def install(self, *, config_path: str, management_url: str) -> None:
        logger.info("Registering service with config %s", config_path)
        run_cmd(
            [
                str(self.binary),
                "service",
                "install",
                "--config",
                config_path,
                "--management-url",
                management_url,
            ]
        )

    def uninstall(self) -> None:
        run_cmd([str(self.binary), "service", "uninstall"])
