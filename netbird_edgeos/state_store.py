from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import yaml

from .lib.fsutil import write_file_atomic

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_state(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    fmt = _detect_format(p)
    data: Dict[str, Any]

    if fmt in {"yaml", "yml"}:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except ValueError:
            # A hand-edited or truncated record must not block the next boot.
            logger.warning("Run record %s is unreadable, starting a fresh one", p)
            return {}

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def save_state(path: str | Path, state: Dict[str, Any]) -> None:
    p = Path(path)
    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        text = yaml.safe_dump(state, sort_keys=False)
    else:
        text = json.dumps(state, indent=2, sort_keys=True) + "\n"
    write_file_atomic(p, text)


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with defaults (without overriding existing values)."""

    state.setdefault("version", 1)
    state.setdefault("last_pass", None)
    state.setdefault("history", [])
    state.setdefault("errors", [])
    return state


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def record_pass(state: Dict[str, Any], report: Dict[str, Any], *, trigger: str) -> Dict[str, Any]:
    """Record one reconciliation pass (``ReconciliationReport.to_dict()``)."""

    entry = {"at": _now(), "trigger": trigger, **report}
    state["last_pass"] = entry
    history = state.setdefault("history", [])
    history.append({k: entry[k] for k in ("at", "trigger", "ok", "changed", "error")})
    del history[:-HISTORY_LIMIT]

    if report.get("error"):
        errors = state.setdefault("errors", [])
        errors.append({"at": entry["at"], "trigger": trigger, "error": report["error"]})
        del errors[:-HISTORY_LIMIT]
    return state
