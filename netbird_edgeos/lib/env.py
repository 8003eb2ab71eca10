from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# Logical (on-router) paths. Everything under /config survives a firmware upgrade.
CONFIG_ROOT = "/config"
PERSISTENT_DIR = f"{CONFIG_ROOT}/netbird"
ARCHIVE_CACHE_DIR = "/config/data/netbird"
SCRIPTS_DIR = f"{CONFIG_ROOT}/scripts"
BINARY_PATH = "/usr/sbin/netbird"
UNIT_DIR = "/etc/systemd/system"
STATE_MOUNTPOINT = "/var/lib/netbird"

SERVICE_UNIT = "netbird.service"
MOUNT_UNIT = "var-lib-netbird.mount"
ROUTER_UNIT = "vyatta-router.service"


@dataclass(frozen=True)
class Layout:
    """Filesystem layout, optionally relocated under ``root``.

    Properties return host paths (prefixed with root). File *contents* such as
    unit files and symlink targets keep the logical paths, since they are read
    by the router itself.
    """

    root: Path = field(default_factory=lambda: Path("/"))

    def path(self, logical: str) -> Path:
        return Path(self.root) / logical.lstrip("/")

    # --- persistent store ---

    @property
    def persistent_dir(self) -> Path:
        return self.path(PERSISTENT_DIR)

    @property
    def installer_config(self) -> Path:
        return self.persistent_dir / "installer.conf"

    @property
    def agent_config_logical(self) -> str:
        return f"{PERSISTENT_DIR}/config.json"

    @property
    def state_source_logical(self) -> str:
        return f"{PERSISTENT_DIR}/state"

    @property
    def state_source_dir(self) -> Path:
        return self.path(self.state_source_logical)

    @property
    def override_source_logical(self) -> str:
        return f"{PERSISTENT_DIR}/systemd/{SERVICE_UNIT}.d"

    @property
    def override_source_dir(self) -> Path:
        return self.path(self.override_source_logical)

    @property
    def run_record(self) -> Path:
        return self.persistent_dir / "reconcile-state.json"

    @property
    def registration_marker(self) -> Path:
        return self.persistent_dir / ".registration-pending"

    @property
    def archive_cache_dir(self) -> Path:
        return self.path(ARCHIVE_CACHE_DIR)

    @property
    def cached_archive(self) -> Path:
        return self.archive_cache_dir / "netbird-latest.tar.gz"

    @property
    def boot_hook(self) -> Path:
        return self.path(f"{SCRIPTS_DIR}/post-config.d/99-netbird-boot.sh")

    @property
    def upgrade_hook(self) -> Path:
        return self.path(f"{SCRIPTS_DIR}/firstboot.d/99-netbird-upgrade.sh")

    # --- ephemeral store ---

    @property
    def binary(self) -> Path:
        return self.path(BINARY_PATH)

    @property
    def unit_dir(self) -> Path:
        return self.path(UNIT_DIR)

    @property
    def service_unit_file(self) -> Path:
        return self.unit_dir / SERVICE_UNIT

    @property
    def mount_unit_file(self) -> Path:
        return self.unit_dir / MOUNT_UNIT

    @property
    def override_link(self) -> Path:
        return self.unit_dir / f"{SERVICE_UNIT}.d"

    def ephemeral_paths(self) -> list[Path]:
        return [
            self.binary,
            self.service_unit_file,
            self.mount_unit_file,
            self.override_link,
        ]


LAYOUT = Layout()
