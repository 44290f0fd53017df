"""
Terminal rendering with rich.

Everything here only formats data the core already computed.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dutyroster.config import AGENDA_ROLE, NO_DUTY
from dutyroster.model import ActivityResult, Event, NameEntry
from dutyroster.resolve import agenda_anchors, resolve_activities
from dutyroster.search import role_label

_TYPE_STYLES = {
    "break": "yellow",
    "meeting": "cyan",
    "duty": "green",
    "agenda": "blue",
    "free": "dim",
}


def activity_label(activity: ActivityResult) -> str:
    """
    Text shown for one role in one agenda block.

    Activities that do not overlap the block carry their own time:
    '(starts 9:45 AM)' if they begin inside it, '(9:00 AM - 9:30 AM)' otherwise.
    """
    if isinstance(activity, str):
        return activity
    text = activity.activity
    if not activity.is_overlapping:
        if activity.starts_within:
            text += f" (starts {activity.start_time})"
        else:
            text += f" ({activity.start_time} - {activity.end_time})"
    return text


def _style_for(activity: ActivityResult) -> str:
    if isinstance(activity, str):
        return _TYPE_STYLES["free"] if activity == NO_DUTY else _TYPE_STYLES["duty"]
    return _TYPE_STYLES.get(activity.event_type.strip().lower(), _TYPE_STYLES["duty"])


def build_day_table(
    weekday: str,
    day_events: Sequence[Event],
    visible_roles: Iterable[str],
    known_roles: Optional[Iterable[str]] = None,
    assignments: Optional[Mapping[str, Iterable[str]]] = None,
) -> Table:
    """
    One row per agenda block, one column per role.
    """
    visible = list(visible_roles)
    known = list(known_roles) if known_roles is not None else None
    anchors = agenda_anchors(day_events)

    rows: list[tuple[Event, dict[str, ActivityResult]]] = []
    columns: list[str] = []
    for anchor in anchors:
        acts = resolve_activities(anchor, day_events, visible, known)
        rows.append((anchor, acts))
        for role in acts:
            if role not in columns:
                columns.append(role)

    table = Table(title=weekday, box=box.SIMPLE, show_lines=False)
    table.add_column("Time", no_wrap=True)
    table.add_column(AGENDA_ROLE, style="bold blue")
    for role in columns:
        table.add_column(escape(role_label(role, assignments or {})))

    for anchor, acts in rows:
        cells = []
        for role in columns:
            act = acts.get(role, NO_DUTY)
            cells.append(f"[{_style_for(act)}]{escape(activity_label(act))}[/]")
        table.add_row(f"{anchor.start_time} - {anchor.end_time}", escape(anchor.event_name), *cells)
    return table


def render_day(console: Console, weekday: str, day_events: Sequence[Event], visible_roles: Iterable[str], **kwargs) -> None:
    if not agenda_anchors(day_events):
        console.print(f"No agenda events on {weekday}.")
        return
    console.print(build_day_table(weekday, day_events, visible_roles, **kwargs))


def render_linked(console: Console, anchor: Event, linked: Sequence[Event]) -> None:
    console.print(f"[bold]{escape(anchor.event_name)}[/] ({anchor.weekday} {anchor.start_time} - {anchor.end_time})")
    if not linked:
        console.print("No related events.")
        return
    table = Table(box=box.SIMPLE, title="Related events")
    table.add_column("Time", no_wrap=True)
    table.add_column("Event")
    table.add_column("Type")
    table.add_column("Roles")
    for ev in linked:
        table.add_row(
            f"{ev.start_time} - {ev.end_time}",
            escape(ev.event_name),
            ev.event_type,
            ", ".join(ev.assigned_roles),
        )
    console.print(table)


def render_names(console: Console, matches: Sequence[NameEntry]) -> None:
    if not matches:
        console.print("No results.")
        return
    table = Table(box=box.SIMPLE, title="Name search")
    table.add_column("Role", style="bold cyan")
    table.add_column("Name")
    for entry in matches:
        table.add_row(entry.role, escape(entry.full_name))
    console.print(table)


def render_summary(
    console: Console,
    duties: Mapping[str, Sequence[str]],
    assignments: Optional[Mapping[str, Iterable[str]]] = None,
) -> None:
    if not duties:
        console.print("No duties found.")
        return
    table = Table(box=box.SIMPLE, title="Role duties summary")
    table.add_column("Role", style="bold cyan", no_wrap=True)
    table.add_column("Duties")
    for role, names in duties.items():
        table.add_row(escape(role_label(role, assignments or {})), escape(", ".join(names)))
    console.print(table)
