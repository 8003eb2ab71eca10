from __future__ import annotations

import enum
import platform
from typing import Optional

from ..errors import UnsupportedArchitectureError


class Architecture(str, enum.Enum):
    """Release asset architecture tags (``netbird_<version>_linux_<tag>.tar.gz``)."""

    MIPS_SOFTFLOAT = "mips_softfloat"
    MIPS64_HARDFLOAT = "mips64_hardfloat"
    ARM64 = "arm64"
    AMD64 = "amd64"


# EdgeRouter X reports "mips" (MT7621, no FPU); Lite/4/6P/Infinity report "mips64" or "aarch64".
_MACHINE_MAP = {
    "mips": Architecture.MIPS_SOFTFLOAT,
    "mips64": Architecture.MIPS64_HARDFLOAT,
    "aarch64": Architecture.ARM64,
    "arm64": Architecture.ARM64,
    "x86_64": Architecture.AMD64,
    "amd64": Architecture.AMD64,
}


def resolve_architecture(machine: Optional[str] = None) -> Architecture:
    m = (platform.machine() if machine is None else machine).strip().lower()
    try:
        return _MACHINE_MAP[m]
    except KeyError:
        raise UnsupportedArchitectureError(f"Unsupported architecture: {m or '<empty>'}") from None
