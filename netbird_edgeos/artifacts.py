from __future__ import annotations

import logging
import tarfile
import tempfile
from pathlib import Path
from typing import Optional

from .errors import ArtifactError, ArtifactMissingError
from .lib.fsutil import copy_file_atomic

logger = logging.getLogger(__name__)

BINARY_NAME = "netbird"


class ArtifactStore:
    """The single cached release archive in the persistent store.

    Written by setup (``store``), read by every reconciliation pass
    (``has`` / ``extract_binary_to``). Never versioned: a re-fetch overwrites it.
    """

    def __init__(self, path: Path, *, binary_name: str = BINARY_NAME, scratch_dir: Optional[Path] = None):
        self.path = Path(path)
        self.binary_name = binary_name
        self.scratch_dir = scratch_dir

    def has(self) -> bool:
        return self.path.is_file()

    def store(self, source: Path) -> Path:
        copy_file_atomic(Path(source), self.path)
        logger.info("Cached archive %s (%d bytes)", self.path, self.path.stat().st_size)
        return self.path

    def extract_binary_to(self, target: Path) -> Path:
        """Unpack the archive to a scratch dir and install the agent binary at target (0755)."""

        if not self.has():
            raise ArtifactMissingError(f"Cached archive missing: {self.path}")

        target = Path(target)
        if self.scratch_dir is not None:
            self.scratch_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="netbird-extract-", dir=self.scratch_dir) as scratch:
            try:
                with tarfile.open(self.path, "r:*") as tar:
                    member = self._find_binary(tar)
                    # extract(filter=) only exists on newer patch releases of the supported Pythons.
                    if hasattr(tarfile, "data_filter"):
                        tar.extract(member, scratch, filter="data")
                    else:
                        tar.extract(member, scratch)
            except (tarfile.TarError, OSError) as e:
                raise ArtifactError(f"Cannot extract {self.path}: {e}") from e

            extracted = Path(scratch) / member.name
            copy_file_atomic(extracted, target, mode=0o755)

        logger.info("Installed %s from %s", target, self.path)
        return target

    def _find_binary(self, tar: tarfile.TarFile) -> tarfile.TarInfo:
        for member in tar.getmembers():
            name = member.name[2:] if member.name.startswith("./") else member.name
            if member.isfile() and name == self.binary_name:
                return member
        raise ArtifactError(f"{self.path} does not contain '{self.binary_name}'")
