"""
Central data model definitions used across the project.

This module defines the canonical structure of Event and Activity objects so that:
- normalizing, resolving, linking and rendering share the same field names
- events stay immutable after normalization (derived values use dataclasses.replace)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Event:
    """
    One schedule entry: an agenda block or a duty/meeting/break/free slot.

    start_mins/end_mins are only set once the event has been placed in a
    day bucket (see normalize.partition_by_day).
    """

    weekday: str
    start_time: str
    end_time: str
    event_name: str
    event_abbreviation: str
    event_type: str
    event_description: str
    assigned_roles: Tuple[str, ...]
    location: Optional[str] = None
    start_mins: Optional[int] = None
    end_mins: Optional[int] = None

    @property
    def kind(self) -> str:
        """Lower-cased event type."""
        return self.event_type.strip().lower()

    @property
    def is_agenda(self) -> bool:
        return self.kind == "agenda"


@dataclass(frozen=True)
class Activity:
    """
    The event chosen for one role within one agenda anchor.
    """

    activity: str
    event_type: str
    start_time: str
    end_time: str
    is_overlapping: bool
    starts_within: bool
    priority: int
    start_mins: int
    end_mins: int
    event_description: str = ""

    @property
    def duration(self) -> int:
        return self.end_mins - self.start_mins


# Either a resolved Activity or the literal "No Duty"
ActivityResult = Union[Activity, str]


@dataclass(frozen=True)
class AcRole:
    index: int

    def __str__(self) -> str:
        return f"AC {self.index}"


@dataclass(frozen=True)
class CnRole:
    letter: str

    def __str__(self) -> str:
        return f"CN {self.letter}"


@dataclass(frozen=True)
class OtherRole:
    id: str

    def __str__(self) -> str:
        return self.id


Role = Union[AcRole, CnRole, OtherRole]


@dataclass(frozen=True)
class NameEntry:
    """
    One assigned person, as offered by the name search.
    """

    role: str
    display_name: str
    full_name: str
    search_text: str
