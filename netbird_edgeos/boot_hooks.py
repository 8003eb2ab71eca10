from __future__ import annotations

import logging
import shlex
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .lib.env import CONFIG_ROOT, Layout
from .lib.fsutil import write_file_atomic

logger = logging.getLogger(__name__)


PACKAGE_PARENT = str(Path(__file__).resolve().parent.parent)


def default_reconcile_command(layout: Layout) -> List[str]:
    argv = [sys.executable, "-m", "netbird_edgeos"]
    if str(layout.root) != "/":
        argv += ["--root", str(layout.root)]
    return argv + ["reconcile"]


class BootHookInstaller:
    """Arms the reconciler at the two EdgeOS script hook points.

    - post-config.d: runs on every boot; this is the real entry point.
    - firstboot.d: runs once after a firmware upgrade; it only delegates to
      the every-boot hook so the convergence logic lives in one place.
    """

    def __init__(self, layout: Layout, command: Optional[Sequence[str]] = None, *, pythonpath: str = PACKAGE_PARENT):
        self.layout = layout
        self.command = list(command) if command is not None else default_reconcile_command(layout)
        self.pythonpath = pythonpath

    def render_boot_hook(self) -> str:
        return "\n".join(
            [
                "#!/bin/sh",
                "# Installed by netbird-edgeos: re-materializes NetBird after every boot.",
                f"PYTHONPATH={shlex.quote(self.pythonpath)}${{PYTHONPATH:+:$PYTHONPATH}}",
                "export PYTHONPATH",
                f"exec {' '.join(shlex.quote(a) for a in self.command)}",
                "",
            ]
        )

    def render_upgrade_hook(self) -> str:
        return "\n".join(
            [
                "#!/bin/sh",
                "# Installed by netbird-edgeos: runs once after a firmware upgrade.",
                f"BOOT_HOOK={shlex.quote(str(self.layout.boot_hook))}",
                'if [ -x "$BOOT_HOOK" ]; then',
                '    exec "$BOOT_HOOK"',
                "fi",
                'echo "netbird-edgeos: $BOOT_HOOK missing, nothing to do" >&2',
                "exit 0",
                "",
            ]
        )

    def hooks(self) -> List[tuple[Path, str]]:
        return [
            (self.layout.boot_hook, self.render_boot_hook()),
            (self.layout.upgrade_hook, self.render_upgrade_hook()),
        ]

    def install(self) -> List[Path]:
        """Write hooks whose content differs. Returns the paths written."""

        persistent = self.layout.path(CONFIG_ROOT)
        if not Path(self.pythonpath).resolve().is_relative_to(persistent.resolve()):
            logger.warning(
                "netbird-edgeos is installed at %s, outside %s; the boot hooks will not find it after a firmware upgrade",
                self.pythonpath,
                persistent,
            )

        written: List[Path] = []
        for path, contents in self.hooks():
            if path.is_file() and path.read_text(encoding="utf-8") == contents:
                logger.info("Boot hook up to date: %s", path)
                continue
            write_file_atomic(path, contents, mode=0o755)
            logger.info("Installed boot hook %s", path)
            written.append(path)
        return written
