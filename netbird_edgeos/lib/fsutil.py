from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def write_file_atomic(path: Path, contents: str | bytes, *, mode: int = 0o644) -> None:
    """Write via a sibling temp file + rename.

    A reader (or the next boot) sees either the old file, no file, or the complete new file.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.partial")
    data = contents.encode("utf-8") if isinstance(contents, str) else contents
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.chmod(tmp, mode)
    os.replace(tmp, path)


def copy_file_atomic(src: Path, dst: Path, *, mode: int = 0o644) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    tmp = dst.with_name(f".{dst.name}.partial")
    shutil.copyfile(src, tmp)
    os.chmod(tmp, mode)
    os.replace(tmp, dst)


def path_present(path: Path) -> bool:
    """True for anything occupying path, including a dangling symlink."""

    return path.is_symlink() or path.exists()


def remove_path(path: Path) -> bool:
    """Remove a file, symlink or directory tree. Returns False if nothing was there."""

    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    if path.exists():
        path.unlink()
        return True
    return False
