"""
Normalizing (raw store records -> Event objects) and day partitioning.

Raw records use the document store's camelCase keys:
    weekday, startTime, endTime, eventName, eventAbbreviation,
    eventType, eventDescription, location,
    assignedRoles (list) or the legacy scalar `role`

Rules:
- Every field gets a default, nothing is left undefined
- One Event per raw record (merging happens before, in merge_role_records)
- Bad rows are skipped and logged, never raised
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from dutyroster.config import DEFAULT_EVENT_MINUTES, WEEKDAYS
from dutyroster.model import Event
from dutyroster.timecodec import decode

logger = logging.getLogger(__name__)

_WEEKDAY_LOOKUP = {d.lower(): d for d in WEEKDAYS}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value).strip()


def _roles(record: Mapping[str, Any]) -> Tuple[str, ...]:
    roles = record.get("assignedRoles")
    if isinstance(roles, (list, tuple, set)):
        out: list[str] = []
        for r in roles:
            name = "" if r is None else str(r).strip()
            if name and name not in out:
                out.append(name)
        return tuple(out)

    legacy = _text(record, "role")
    return (legacy,) if legacy else ()


def canonical_weekday(text: str) -> Optional[str]:
    return _WEEKDAY_LOOKUP.get(str(text).strip().lower())


# ---------------------------------------------------------------------------
# Event Normalizer
# ---------------------------------------------------------------------------


def normalize_record(record: Mapping[str, Any]) -> Event:
    location = _text(record, "location")
    return Event(
        weekday=_text(record, "weekday"),
        start_time=_text(record, "startTime"),
        end_time=_text(record, "endTime"),
        event_name=_text(record, "eventName"),
        event_abbreviation=_text(record, "eventAbbreviation"),
        event_type=_text(record, "eventType"),
        event_description=_text(record, "eventDescription"),
        assigned_roles=_roles(record),
        location=location or None,
    )


def normalize_records(records: Iterable[Mapping[str, Any]]) -> List[Event]:
    """
    Canonical Event list, one per raw record. Non-mapping entries are skipped.
    """
    events: List[Event] = []
    for rec in records:
        if not isinstance(rec, Mapping):
            logger.debug("Skipping non-mapping record: %r", rec)
            continue
        events.append(normalize_record(rec))
    return events


def merge_role_records(records: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Combine per-role records describing the same slot into one record.

    Records sharing (eventName, weekday, startTime, endTime) are merged;
    their roles are collected into assignedRoles in first-seen order.
    """
    merged: Dict[Tuple[str, str, str, str], Dict[str, Any]] = {}
    total = 0
    for rec in records:
        total += 1
        key = (
            _text(rec, "eventName"),
            _text(rec, "weekday"),
            _text(rec, "startTime"),
            _text(rec, "endTime"),
        )
        roles = list(_roles(rec))
        if key not in merged:
            merged[key] = {
                "eventName": key[0],
                "weekday": key[1],
                "startTime": key[2],
                "endTime": key[3],
                "eventAbbreviation": _text(rec, "eventAbbreviation"),
                "eventType": _text(rec, "eventType"),
                "eventDescription": _text(rec, "eventDescription"),
                "assignedRoles": roles,
            }
            location = _text(rec, "location")
            if location:
                merged[key]["location"] = location
            continue

        existing = merged[key]["assignedRoles"]
        for r in roles:
            if r not in existing:
                existing.append(r)

    logger.info("Combined %d records into %d unique events", total, len(merged))
    return list(merged.values())


# ---------------------------------------------------------------------------
# Day Partitioner
# ---------------------------------------------------------------------------


def partition_with_stats(events: Iterable[Event]) -> Tuple[Dict[str, List[Event]], int]:
    """
    Group events by weekday and attach start_mins/end_mins.

    Returns (buckets, skipped). Every weekday has a bucket, events keep
    their input order. Events with an unknown weekday or an undecodable
    start time are skipped. A missing/undecodable end time becomes
    start + 15 minutes.
    """
    buckets: Dict[str, List[Event]] = {day: [] for day in WEEKDAYS}
    skipped = 0

    for ev in events:
        day = canonical_weekday(ev.weekday)
        start = decode(ev.start_time)
        if day is None or start is None:
            skipped += 1
            logger.debug(
                "Skipping event %r (weekday=%r, start=%r)", ev.event_name, ev.weekday, ev.start_time
            )
            continue

        end = decode(ev.end_time)
        if end is None:
            end = start + DEFAULT_EVENT_MINUTES

        buckets[day].append(replace(ev, weekday=day, start_mins=start, end_mins=end))

    if skipped:
        logger.warning("Skipped %d event(s) with unknown weekday or unreadable start time", skipped)
    return buckets, skipped


def partition_by_day(events: Iterable[Event]) -> Dict[str, List[Event]]:
    buckets, _ = partition_with_stats(events)
    return buckets


def normalize_and_partition(records: Iterable[Mapping[str, Any]]) -> Dict[str, List[Event]]:
    """
    Full refresh pass: raw snapshot records -> weekday -> events.
    """
    return partition_by_day(normalize_records(records))


def all_partitioned(buckets: Mapping[str, List[Event]]) -> List[Event]:
    """Flatten day buckets back into one list (Sunday first)."""
    out: List[Event] = []
    for day in WEEKDAYS:
        out.extend(buckets.get(day, []))
    return out
