"""
Persistent snapshot storage.

This module manages the files:

    <data_dir>/processed/agenda_events.json
    <data_dir>/processed/role_events.json
    <data_dir>/processed/role_assignments.json

Each file holds one whole collection. Saving replaces the collection,
loading returns the full snapshot; there are no incremental updates.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from dutyroster import config

logger = logging.getLogger(__name__)


def _collection_path(filename: str, base: str | Path | None = None) -> Path:
    """
    Path of one collection file. `base` overrides the processed directory (tests).
    """
    base_dir = Path(base) if base is not None else config.processed_dir()
    return base_dir / filename


def _read_json(path: Path) -> Any:
    """
    Load JSON, returning None if the file is missing or unreadable.

    Never crashes the application on a missing or corrupted file.
    """
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Ignoring unreadable snapshot file %s", path)
        return None


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _load_records(filename: str, base: str | Path | None) -> List[Dict[str, Any]]:
    data = _read_json(_collection_path(filename, base))
    if not isinstance(data, list):
        return []
    return [rec for rec in data if isinstance(rec, dict)]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def load_agenda_events(base: str | Path | None = None) -> List[Dict[str, Any]]:
    return _load_records(config.AGENDA_EVENTS_FILE, base)


def load_role_events(base: str | Path | None = None) -> List[Dict[str, Any]]:
    return _load_records(config.ROLE_EVENTS_FILE, base)


def save_agenda_events(records: Iterable[Mapping[str, Any]], base: str | Path | None = None) -> int:
    rows = [dict(r) for r in records]
    _write_json(_collection_path(config.AGENDA_EVENTS_FILE, base), rows)
    return len(rows)


def save_role_events(records: Iterable[Mapping[str, Any]], base: str | Path | None = None) -> int:
    rows = [dict(r) for r in records]
    _write_json(_collection_path(config.ROLE_EVENTS_FILE, base), rows)
    return len(rows)


def load_snapshot(base: str | Path | None = None) -> List[Dict[str, Any]]:
    """
    Agenda events followed by role events.
    """
    return load_agenda_events(base) + load_role_events(base)


# ---------------------------------------------------------------------------
# Role assignments
# ---------------------------------------------------------------------------


def _strip_role_prefix(role: str, name: str) -> str:
    # "AC Jane Doe" stored under "AC 1" -> "Jane Doe"
    for prefix in ("AC ", "CN "):
        if role.startswith(prefix) and name.startswith(prefix):
            return name[len(prefix):].strip()
    return name


def load_role_assignments(base: str | Path | None = None) -> Dict[str, List[str]]:
    """
    role -> list of full names. Empty dict if missing/invalid.
    """
    data = _read_json(_collection_path(config.ROLE_ASSIGNMENTS_FILE, base))
    if not isinstance(data, dict):
        return {}

    out: Dict[str, List[str]] = {}
    for role, names in data.items():
        role_s = str(role).strip()
        if not role_s or not isinstance(names, list):
            continue
        cleaned = [_strip_role_prefix(role_s, str(n).strip()) for n in names if isinstance(n, str) and n.strip()]
        if cleaned:
            out[role_s] = cleaned
    return out


def save_role_assignments(assignments: Mapping[str, Iterable[str]], base: str | Path | None = None) -> int:
    payload = {
        str(role).strip(): [str(n).strip() for n in names if str(n).strip()]
        for role, names in assignments.items()
        if str(role).strip()
    }
    _write_json(_collection_path(config.ROLE_ASSIGNMENTS_FILE, base), payload)
    return len(payload)
