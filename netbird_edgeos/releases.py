"""
Release fetcher: resolve the newest NetBird release for an architecture and
cache its archive in the persistent store.

Runs only during the human-triggered ``setup``; boot-time passes never touch
the network.
"""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path

from .artifacts import ArtifactStore
from .errors import FatalSetupError, ReleaseLookupError
from .lib.arch import Architecture

logger = logging.getLogger(__name__)

LATEST_RELEASE_API = "https://api.github.com/repos/netbirdio/netbird/releases/latest"
DOWNLOAD_BASE = "https://github.com/netbirdio/netbird/releases/download"
USER_AGENT = "netbird-edgeos"


@dataclass(frozen=True)
class Release:
    tag: str

    @property
    def version(self) -> str:
        return self.tag[1:] if self.tag.startswith("v") else self.tag

    def asset_name(self, arch: Architecture) -> str:
        return f"netbird_{self.version}_linux_{arch.value}.tar.gz"

    def asset_url(self, arch: Architecture, *, base: str = DOWNLOAD_BASE) -> str:
        return f"{base}/{self.tag}/{self.asset_name(arch)}"


def _request(url: str, *, accept: str) -> urllib.request.Request:
    return urllib.request.Request(url, headers={"Accept": accept, "User-Agent": USER_AGENT})


def latest_release(api_url: str = LATEST_RELEASE_API) -> Release:
    try:
        with urllib.request.urlopen(_request(api_url, accept="application/vnd.github+json")) as resp:
            data = json.loads(resp.read())
    except (urllib.error.URLError, OSError, ValueError) as e:
        raise ReleaseLookupError(f"Could not query {api_url}: {e}") from e

    tag = data.get("tag_name") if isinstance(data, dict) else None
    if not tag:
        raise ReleaseLookupError("Could not determine latest NetBird version (no tag_name)")
    return Release(tag=str(tag))


def download(url: str, dest: Path) -> Path:
    logger.info("Downloading %s", url)
    try:
        with urllib.request.urlopen(_request(url, accept="application/octet-stream")) as resp, open(dest, "wb") as out:
            shutil.copyfileobj(resp, out)
    except (urllib.error.URLError, OSError) as e:
        raise FatalSetupError(f"Download failed: {url}: {e}") from e
    return dest


class ReleaseFetcher:
    def __init__(self, *, api_url: str = LATEST_RELEASE_API, download_base: str = DOWNLOAD_BASE):
        self.api_url = api_url
        self.download_base = download_base

    def fetch_and_cache(self, arch: Architecture, store: ArtifactStore) -> Path:
        release = latest_release(self.api_url)
        logger.info("Latest NetBird release: %s (%s)", release.tag, arch.value)

        url = release.asset_url(arch, base=self.download_base)
        with tempfile.TemporaryDirectory(prefix="netbird-download-") as tmp:
            archive = download(url, Path(tmp) / release.asset_name(arch))
            return store.store(archive)
