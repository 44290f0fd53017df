"""
Name search over role assignments.

Picking a person narrows the calendar to their role plus the agenda.
"""

from __future__ import annotations

from typing import Iterable, List, Mapping

from dutyroster.config import AGENDA_ROLE
from dutyroster.model import NameEntry


def build_name_index(assignments: Mapping[str, Iterable[str]]) -> List[NameEntry]:
    index: List[NameEntry] = []
    for role, names in assignments.items():
        for full_name in names:
            full = str(full_name).strip()
            if not full:
                continue
            display = full.split(" ")[0]
            index.append(
                NameEntry(
                    role=role,
                    display_name=display,
                    full_name=full,
                    search_text=f"{display} {full}".lower(),
                )
            )
    return index


def search_names(index: Iterable[NameEntry], query: str, limit: int = 20) -> List[NameEntry]:
    q = (query or "").strip().lower()
    if not q:
        return []
    return [entry for entry in index if q in entry.search_text][:limit]


def visible_roles_for(entry: NameEntry) -> set[str]:
    return {entry.role, AGENDA_ROLE}


def role_label(role: str, assignments: Mapping[str, Iterable[str]]) -> str:
    """
    'AC 1' -> 'AC 1 (Jane, Sam)' using first names; bare role if nobody is assigned.
    """
    names = [str(n).split(" ")[0] for n in assignments.get(role, []) if str(n).strip()]
    if not names:
        return role
    return f"{role} ({', '.join(names)})"
