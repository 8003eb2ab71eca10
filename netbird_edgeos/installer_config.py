from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from .errors import ConfigMissingError, InvalidManagementUrlError
from .lib.fsutil import write_file_atomic

logger = logging.getLogger(__name__)

MANAGEMENT_URL_KEY = "SELF_HOSTED_MANAGEMENT_URL"
PLACEHOLDER_URL = "https://netbird.yourdomain.com"


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, str]

    @property
    def management_url(self) -> str:
        return self.raw.get(MANAGEMENT_URL_KEY, "")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def parse_key_values(text: str) -> Dict[str, str]:
    """Parse flat ``KEY=value`` lines. Comments (#) and blank lines are ignored."""

    out: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        out[key] = _unquote(value.strip())
    return out


def validate_management_url(url: str | None) -> str:
    url = (url or "").strip()
    if not url:
        raise InvalidManagementUrlError("A management URL is required")
    if url.rstrip("/") == PLACEHOLDER_URL:
        raise InvalidManagementUrlError(f"Replace the placeholder management URL ({PLACEHOLDER_URL})")

    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidManagementUrlError(f"Management URL must be an http(s) URL: {url}")
    if any(c in url for c in "\"'\n\r"):
        raise InvalidManagementUrlError(f"Management URL contains quote or newline characters: {url!r}")
    return url


def load_installer_config(path: Path) -> InstallerConfig:
    p = Path(path)
    if not p.is_file():
        raise ConfigMissingError(f"Installer config not found: {p}")

    cfg = InstallerConfig(raw=parse_key_values(p.read_text(encoding="utf-8")))
    if not cfg.management_url:
        raise ConfigMissingError(f"{MANAGEMENT_URL_KEY} missing from {p}")
    return cfg


def write_installer_config(path: Path, management_url: str) -> InstallerConfig:
    url = validate_management_url(management_url)
    write_file_atomic(
        Path(path),
        "# Written by netbird-edgeos setup. Read on every boot.\n"
        f'{MANAGEMENT_URL_KEY}="{url}"\n',
        mode=0o600,
    )
    logger.info("Wrote installer config %s", path)
    return InstallerConfig(raw={MANAGEMENT_URL_KEY: url})
