"""
Role identifiers and AC/CN pairing.

Roles are opaque strings, but two families follow a naming convention:
"AC <n>" and "CN <letter>". AC n is paired with the CN role whose letter
is the nth of the alphabet (AC 1 <-> CN A, AC 3 <-> CN C).
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from dutyroster.config import AGENDA_ROLE
from dutyroster.model import AcRole, CnRole, Event, OtherRole, Role

_AC_RE = re.compile(r"^AC\s*(\d+)$", re.IGNORECASE)
_CN_RE = re.compile(r"^CN\s*([A-Z])$", re.IGNORECASE)


def parse_role(text: str) -> Role:
    raw = str(text).strip()
    m = _AC_RE.match(raw)
    if m and int(m.group(1)) >= 1:
        return AcRole(index=int(m.group(1)))
    m = _CN_RE.match(raw)
    if m:
        return CnRole(letter=m.group(1).upper())
    return OtherRole(id=raw)


def is_roster_role(text: str) -> bool:
    """True for AC/CN column headers."""
    return not isinstance(parse_role(text), OtherRole)


def canonical_role(text: str) -> str:
    """'AC3' -> 'AC 3', 'cn b' -> 'CN B', other ids are only stripped."""
    return str(parse_role(text))


def pair_of(role: str) -> Optional[str]:
    """
    Return the structurally paired role id, or None.
    """
    parsed = parse_role(role)
    if isinstance(parsed, AcRole):
        if parsed.index > 26:
            return None
        return str(CnRole(letter=chr(ord("A") + parsed.index - 1)))
    if isinstance(parsed, CnRole):
        return str(AcRole(index=ord(parsed.letter) - ord("A") + 1))
    return None


def _natural_key(role: str) -> list:
    # numeric-aware ordering: AC 2 < AC 10
    parts = re.split(r"(\d+)", role.lower())
    return [int(p) if p.isdigit() else p for p in parts]


def sort_roles(roles: Iterable[str]) -> list[str]:
    """
    Agenda first, then natural order.
    """
    unique = {r for r in roles if r}
    rest = sorted((r for r in unique if r != AGENDA_ROLE), key=_natural_key)
    return ([AGENDA_ROLE] if AGENDA_ROLE in unique else []) + rest


def roles_from_events(events: Iterable[Event]) -> list[str]:
    """
    All roles mentioned by any event, plus the synthetic Agenda role.
    """
    found: set[str] = {AGENDA_ROLE}
    for ev in events:
        found.update(ev.assigned_roles)
    return sort_roles(found)
