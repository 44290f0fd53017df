"""
Per-role duties summary, derived from the schedule itself.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from dutyroster.config import NO_DUTY
from dutyroster.model import Event
from dutyroster.roles import sort_roles


def duties_by_role(events: Iterable[Event]) -> Dict[str, List[str]]:
    """
    role -> distinct duty names in first-seen order.

    Agenda blocks, free time and "No Duty" slots are left out.
    """
    found: Dict[str, List[str]] = {}
    for ev in events:
        if ev.is_agenda or ev.kind == "free" or ev.event_name == NO_DUTY or not ev.event_name:
            continue
        for role in ev.assigned_roles:
            names = found.setdefault(role, [])
            if ev.event_name not in names:
                names.append(ev.event_name)
    return {role: found[role] for role in sort_roles(found)}
