"""
Related-event discovery.

Given one event, find other entries on the same weekday that describe the
same real-world activity. Three passes, results unioned and de-duplicated:

1. Agenda <-> duty keyword links (ACTIVITY_RULES)
2. Sub-role links inside one activity, e.g. Dance Coordinator <-> Dance DJ
   (SUB_ROLE_RULES)
3. Generic Coordinator/Lead <-> Support/Assist links on the stripped name

All name matching is case-sensitive substring matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from dutyroster.config import (
    AFTERNOON_START_MINUTES,
    CLASS_WINDOW_END_MINUTES,
    PROXIMITY_WINDOW_MINUTES,
)
from dutyroster.model import Event
from dutyroster.timecodec import decode

CLASS = "Class"

_YM_YW_AGENDA = (
    "Young Men Morning Devotional and Young Women Activity",
    "Young Women Morning Devotional and Young Men Activity",
)


@dataclass(frozen=True)
class ActivityRule:
    """
    One canonical activity as it appears on both sides of the schedule.

    agenda_match: substrings that identify the activity in an agenda title;
                  an agenda anchor matching these links to duties named
                  with any of duty_keywords.
    duty_match:   substrings that identify it in a duty title; a duty
                  anchor matching these links to agenda entries named with
                  any of agenda_match.
    duty_keywords defaults to duty_match.
    """

    agenda_match: Tuple[str, ...]
    duty_match: Tuple[str, ...]
    duty_keywords: Tuple[str, ...] = ()

    @property
    def keywords_for_agenda(self) -> Tuple[str, ...]:
        return self.duty_keywords or self.duty_match


def _same(*names: str) -> ActivityRule:
    return ActivityRule(agenda_match=names, duty_match=names)


ACTIVITY_RULES = {
    "Check-in": _same("Check-in", "Check-In", "Check In"),
    "Games Night": _same("Games Night"),
    "Pizza Night": _same("Pizza Night"),
    "Dance": _same("Dance"),
    "Class": _same(CLASS),
    "Breakfast": _same("Breakfast"),
    "Lunch": _same("Lunch"),
    "Dinner": _same("Dinner"),
    "Testimony": _same("Testimony"),
    "Devotional": _same("Devotional"),
    "Service": _same("Service"),
    "Activity": _same("Activity"),
    "Orientation": _same("Orientation"),
    "Flex Time": ActivityRule(
        agenda_match=("Flex Time", "Participant Flex Time"),
        duty_match=("Flex Time",),
    ),
    "Musical Program": _same("Musical Program"),
    "Variety Show": ActivityRule(
        agenda_match=("Variety Show", "Travel to Variety Show"),
        duty_match=("Variety Show",),
    ),
    "YM/YW": ActivityRule(
        agenda_match=_YM_YW_AGENDA,
        duty_match=("YM/YW Activity", "YM//YW Activity", "YM Activity", "YW Activity"),
        duty_keywords=("YM", "YW", "YM/YW", "YM//YW", "Young Men", "Young Women"),
    ),
}


@dataclass(frozen=True)
class SubRoleRule:
    name: str
    qualifiers: Tuple[str, ...]
    needs_proximity: bool = False


SUB_ROLE_RULES = (
    SubRoleRule(
        "Check-in",
        (
            "Coordinator", "Setup", "Set Up",
            "Check-in 1", "Check-in 2", "Check-In 1", "Check-In 2", "Check In 1", "Check In 2",
            "Participant Check-in 1", "Participant Check-in 2",
        ),
    ),
    SubRoleRule("Dance", ("Coordinator", "DJ", "Accommodations", "Support")),
    SubRoleRule("Games Night", ("Coordinator", "Accommodations", "Support")),
    SubRoleRule("Pizza Night", ("Coordinator", "Support")),
    SubRoleRule(CLASS, ("Coordinator", "Support", "Meeting"), needs_proximity=True),
)

# (lead token, helper token)
GENERIC_PAIRS = (("Coordinator", "Support"), ("Lead", "Support"), ("Lead", "Assist"))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(n in text for n in needles)


def _minutes(ev: Event) -> Tuple[Optional[int], Optional[int]]:
    return decode(ev.start_time), decode(ev.end_time)


def time_proximate(a: Event, b: Event) -> bool:
    """
    Loose "same session" test used for Class links.

    True if the intervals overlap, if both start after 1 PM and both
    touch the 1:00-3:30 PM class window, or if they start within an hour
    of each other on the same side of 1 PM. Undecodable times count as
    proximate.
    """
    a_start, a_end = _minutes(a)
    b_start, b_end = _minutes(b)
    if a_start is None or a_end is None or b_start is None or b_end is None:
        return True

    overlap = max(0, min(a_end, b_end) - max(a_start, b_start))
    if overlap > 0:
        return True

    # TODO: confirm with the schedule owners whether the afternoon class window
    # should stay a fixed 1:00-3:30 PM special case.
    if a_start >= AFTERNOON_START_MINUTES and b_start >= AFTERNOON_START_MINUTES:
        a_spans = a_start < CLASS_WINDOW_END_MINUTES and a_end > AFTERNOON_START_MINUTES
        b_spans = b_start < CLASS_WINDOW_END_MINUTES and b_end > AFTERNOON_START_MINUTES
        if a_spans and b_spans:
            return True

    if abs(a_start - b_start) <= PROXIMITY_WINDOW_MINUTES:
        return (a_start < AFTERNOON_START_MINUTES) == (b_start < AFTERNOON_START_MINUTES)

    return False


def _search(
    anchor: Event,
    all_events: Sequence[Event],
    keywords: Sequence[str],
    target_type: Optional[str],
    check: Optional[Callable[[Event], bool]] = None,
) -> List[Event]:
    """
    Same-weekday events named with any keyword, optionally of one type.
    Entries with the anchor's own name and type are never returned.
    """
    if not keywords:
        return []
    found: List[Event] = []
    for ev in all_events:
        if ev.weekday != anchor.weekday:
            continue
        if target_type is not None and ev.kind != target_type:
            continue
        if not _contains_any(ev.event_name, keywords):
            continue
        if ev.event_name == anchor.event_name and ev.event_type == anchor.event_type:
            continue
        if check is not None and not check(ev):
            continue
        found.append(ev)
    return found


def _dedupe_key(ev: Event) -> tuple:
    return (ev.event_name, ev.weekday, ev.start_time, ev.end_time, tuple(sorted(ev.assigned_roles)))


# ---------------------------------------------------------------------------
# Linking passes
# ---------------------------------------------------------------------------


def _agenda_duty_links(anchor: Event, all_events: Sequence[Event]) -> List[Event]:
    name = anchor.event_name
    keywords: List[str] = []

    def class_gate(ev: Event) -> bool:
        if CLASS in name and CLASS in ev.event_name:
            return time_proximate(anchor, ev)
        return True

    if anchor.is_agenda:
        for rule in ACTIVITY_RULES.values():
            if _contains_any(name, rule.agenda_match):
                keywords.extend(rule.keywords_for_agenda)
        return _search(anchor, all_events, keywords, None, lambda ev: not ev.is_agenda and class_gate(ev))

    for rule in ACTIVITY_RULES.values():
        if _contains_any(name, rule.duty_match):
            keywords.extend(rule.agenda_match)
    return _search(anchor, all_events, keywords, "agenda", class_gate)


def _sub_role_links(anchor: Event, all_events: Sequence[Event]) -> List[Event]:
    name = anchor.event_name
    found: List[Event] = []
    for rule in SUB_ROLE_RULES:
        if rule.name not in name:
            continue
        anchor_qualified = _contains_any(name, rule.qualifiers)

        def check(ev: Event, rule: SubRoleRule = rule, anchor_qualified: bool = anchor_qualified) -> bool:
            if not anchor_qualified and not _contains_any(ev.event_name, rule.qualifiers):
                return False
            if rule.needs_proximity:
                return time_proximate(anchor, ev)
            return True

        found.extend(_search(anchor, all_events, [rule.name], anchor.kind, check))
    return found


def _strip_tokens(name: str, lead: str, helper: str) -> str:
    return name.replace(lead, "", 1).replace(helper, "", 1).strip()


def _generic_links(anchor: Event, all_events: Sequence[Event]) -> List[Event]:
    name = anchor.event_name
    if _contains_any(name, (rule.name for rule in SUB_ROLE_RULES)):
        return []

    found: List[Event] = []
    for lead, helper in GENERIC_PAIRS:
        if lead not in name and helper not in name:
            continue
        base = _strip_tokens(name, lead, helper)

        def check(ev: Event, lead: str = lead, helper: str = helper, base: str = base) -> bool:
            return _strip_tokens(ev.event_name, lead, helper) == base

        found.extend(_search(anchor, all_events, [lead, helper], anchor.kind, check))
    return found


def find_linked_events(event: Event, all_events: Iterable[Event]) -> List[Event]:
    """
    Events related to `event`, de-duplicated, in discovery order.
    """
    pool = list(all_events)
    found = _agenda_duty_links(event, pool) + _sub_role_links(event, pool) + _generic_links(event, pool)

    own_key = _dedupe_key(event)
    seen = set()
    out: List[Event] = []
    for ev in found:
        key = _dedupe_key(ev)
        if key == own_key or key in seen:
            continue
        seen.add(key)
        out.append(ev)
    return out
