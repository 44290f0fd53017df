"""
Activity resolution.

For one agenda block (the anchor) decide what every visible role is doing.

Overlap rule (same as conflict detection elsewhere):
    start < other_end AND end > other_start

An event also qualifies when it starts inside [anchor.start, anchor.end)
or is already running at anchor.start. Among qualifying events the
winner per role is picked by should_replace().
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Set

from dutyroster.config import AGENDA_ROLE, DEFAULT_PRIORITY, EVENT_PRIORITIES, NO_DUTY
from dutyroster.model import Activity, ActivityResult, Event
from dutyroster.roles import pair_of, sort_roles

logger = logging.getLogger(__name__)


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def event_priority(event_type: str) -> int:
    return EVENT_PRIORITIES.get(str(event_type or "").strip().lower(), DEFAULT_PRIORITY)


def _has_minutes(ev: Event) -> bool:
    return ev.start_mins is not None and ev.end_mins is not None


def _build_activity(ev: Event, anchor: Event) -> Activity:
    return Activity(
        activity=f"{ev.event_abbreviation} - {ev.event_name}",
        event_type=ev.event_type,
        start_time=ev.start_time,
        end_time=ev.end_time,
        is_overlapping=_overlaps(ev.start_mins, ev.end_mins, anchor.start_mins, anchor.end_mins),
        starts_within=anchor.start_mins <= ev.start_mins < anchor.end_mins,
        priority=event_priority(ev.event_type),
        start_mins=ev.start_mins,
        end_mins=ev.end_mins,
        event_description=ev.event_description,
    )


def should_replace(current: Optional[ActivityResult], candidate: Activity) -> bool:
    """
    Precedence between the activity held so far and a new candidate:
    lower priority number, then overlapping, then longer, then earlier.
    """
    if current is None or isinstance(current, str):
        return True

    if candidate.priority != current.priority:
        return candidate.priority < current.priority
    if candidate.is_overlapping != current.is_overlapping:
        return candidate.is_overlapping
    if candidate.duration != current.duration:
        return candidate.duration > current.duration
    return candidate.start_mins < current.start_mins


def _qualifies(ev: Event, anchor: Event) -> bool:
    overlapping = _overlaps(ev.start_mins, ev.end_mins, anchor.start_mins, anchor.end_mins)
    starts_within = anchor.start_mins <= ev.start_mins < anchor.end_mins
    active_at_start = ev.start_mins <= anchor.start_mins < ev.end_mins
    return overlapping or starts_within or active_at_start


def _candidates(day_events: Iterable[Event]) -> list[Event]:
    """
    Non-agenda events with a positive duration.
    """
    out: list[Event] = []
    for ev in day_events:
        if ev.is_agenda or not _has_minutes(ev):
            continue
        if ev.end_mins <= ev.start_mins:
            logger.debug("Ignoring zero/negative-length event %r at %s", ev.event_name, ev.start_time)
            continue
        out.append(ev)
    return out


def resolve_activities(
    anchor: Event,
    day_events: Iterable[Event],
    visible_roles: Iterable[str],
    known_roles: Optional[Iterable[str]] = None,
) -> Dict[str, ActivityResult]:
    """
    Map each visible role (except Agenda) to its Activity during `anchor`,
    or to "No Duty".

    Paired roles: when a resolved AC/CN role's partner is not visible but
    is busy during the anchor, the partner is added to the result too.
    `known_roles` limits which partners may be added (default: any).
    """
    result: Dict[str, Optional[ActivityResult]] = {
        role: None for role in sort_roles(visible_roles) if role != AGENDA_ROLE
    }
    if not _has_minutes(anchor):
        logger.debug("Anchor %r has no decoded times; every role is free", anchor.event_name)
        return {role: NO_DUTY for role in result}

    events = _candidates(day_events)
    busy_roles: Set[str] = set()

    for ev in events:
        if not _qualifies(ev, anchor):
            continue
        candidate = _build_activity(ev, anchor)
        for role in ev.assigned_roles:
            busy_roles.add(role)
            if role in result and should_replace(result[role], candidate):
                result[role] = candidate

    allowed = set(known_roles) if known_roles is not None else None
    for role, current in list(result.items()):
        if current is None:
            continue
        partner = pair_of(role)
        if partner is None or partner in result or partner not in busy_roles:
            continue
        if allowed is not None and partner not in allowed:
            continue

        # Backfill scans strict overlaps only
        result[partner] = None
        for ev in events:
            if partner not in ev.assigned_roles:
                continue
            if not _overlaps(ev.start_mins, ev.end_mins, anchor.start_mins, anchor.end_mins):
                continue
            candidate = _build_activity(ev, anchor)
            if should_replace(result[partner], candidate):
                result[partner] = candidate
        logger.debug("Backfilled paired role %s from %s", partner, role)

    return {role: (NO_DUTY if act is None else act) for role, act in result.items()}


def agenda_anchors(day_events: Iterable[Event]) -> list[Event]:
    """Agenda blocks of a day, ordered by start time."""
    anchors = [ev for ev in day_events if ev.is_agenda and _has_minutes(ev)]
    return sorted(anchors, key=lambda ev: (ev.start_mins, ev.end_mins))
