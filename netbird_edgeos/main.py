from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from .boot_hooks import BootHookInstaller
from .errors import InvalidManagementUrlError, ProvisioningError
from .installer_config import validate_management_url, write_installer_config
from .lib.arch import resolve_architecture
from .lib.command import CommandError
from .lib.env import Layout
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .reconciler import ReconciliationReport, reconcile
from .releases import ReleaseFetcher
from .state_store import ensure_defaults, load_state, record_pass, save_state
from .system import SystemState, host_system
from .uninstall import UninstallReport, uninstall

logger = logging.getLogger(__name__)


def run_reconcile(
    *,
    layout: Layout,
    system: Optional[SystemState] = None,
    trigger: str = "boot",
) -> ReconciliationReport:
    """Run one pass and persist its report next to the installer config."""

    system = system or host_system(layout)
    report = reconcile(system)

    try:
        state = ensure_defaults(load_state(layout.run_record))
        record_pass(state, report.to_dict(), trigger=trigger)
        save_state(layout.run_record, state)
    except (OSError, ValueError) as e:
        logger.warning("Could not write run record %s: %s", layout.run_record, e)
    return report


def run_setup(
    management_url: str,
    *,
    layout: Layout,
    system: Optional[SystemState] = None,
    fetcher: Optional[ReleaseFetcher] = None,
    machine: Optional[str] = None,
    hook_command: Optional[Sequence[str]] = None,
) -> ReconciliationReport:
    """Initial, human-triggered installation.

    Everything persistent (config, cached archive, boot hooks) is written
    here; the ephemeral footprint is left to a regular reconciliation pass.
    """

    url = validate_management_url(management_url)
    system = system or host_system(layout)
    fetcher = fetcher or ReleaseFetcher()

    logger.info("Setting up NetBird for management server: %s", url)
    arch = resolve_architecture(machine)
    logger.info("Architecture: %s", arch.value)

    fetcher.fetch_and_cache(arch, system.artifacts)
    write_installer_config(layout.installer_config, url)
    BootHookInstaller(layout, hook_command).install()

    logger.info("Running reconciliation now to perform the initial installation")
    return run_reconcile(layout=layout, system=system, trigger="setup")


def run_uninstall(*, layout: Layout, system: Optional[SystemState] = None) -> UninstallReport:
    return uninstall(system or host_system(layout))


def _print_next_steps(management_url: str) -> None:
    up_cmd = f"sudo /usr/sbin/netbird up --setup-key YOUR_SETUP_KEY --management-url {management_url}"
    print("")
    print("--------------------------------------------------------------------")
    print(" NetBird installation complete!")
    print(f" To connect your router, run: {up_cmd}")
    print("--------------------------------------------------------------------")


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="netbird-edgeos", description="Keep NetBird installed across EdgeOS firmware upgrades")
    p.add_argument("--root", default="/", help="Filesystem root to operate on (default: /)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")

    sub = p.add_subparsers(dest="command", parser_class=_Parser)

    sp = sub.add_parser("setup", aliases=["install"], help="Download NetBird, persist config, install boot hooks")
    sp.add_argument("management_url", nargs="?", help="Self-hosted NetBird management URL")
    sp.set_defaults(func=cmd_setup)

    sp = sub.add_parser("uninstall", help="Remove NetBird and everything this tool created")
    sp.set_defaults(func=cmd_uninstall)

    sp = sub.add_parser("reconcile", help="Converge the NetBird installation (run by the boot hooks)")
    sp.add_argument("--trigger", default="boot", help="Recorded in the run record (default: boot)")
    sp.set_defaults(func=cmd_reconcile)

    return p


def cmd_setup(args: argparse.Namespace, layout: Layout) -> int:
    try:
        url = validate_management_url(args.management_url)
    except InvalidManagementUrlError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        print("Usage: netbird-edgeos setup <management-url>", file=sys.stderr)
        return 1

    report = run_setup(url, layout=layout)
    if not report.ok:
        logger.error("Initial reconciliation failed: %s", report.error)
        return 1
    _print_next_steps(url)
    return 0


def cmd_uninstall(args: argparse.Namespace, layout: Layout) -> int:
    report = run_uninstall(layout=layout)
    for r in report.failures:
        print(f"WARNING: {r.action} failed: {r.error}", file=sys.stderr)
    print("NetBird has been uninstalled.")
    return 0


def cmd_reconcile(args: argparse.Namespace, layout: Layout) -> int:
    report = run_reconcile(layout=layout, trigger=args.trigger)
    return 0 if report.ok else 1


def is_root() -> bool:
    return os.geteuid() == 0


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    if not getattr(args, "func", None):
        p.print_usage(sys.stderr)
        return 1

    if not is_root():
        print("This command must be run as root.", file=sys.stderr)
        return 1

    configure_logging(log_path=args.log)
    layout = Layout(root=Path(args.root))

    try:
        return int(args.func(args, layout))
    except (ProvisioningError, CommandError) as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 130
