"""
CLI (Command Line Interface).

This module provides terminal commands for staff and for testing, e.g.:

    dutyroster import-roster <grid.csv>
    dutyroster import-agenda <agenda.csv>
    dutyroster day Wednesday --role "AC 3"
    dutyroster day Wednesday --name jane
    dutyroster linked Wednesday "Dance Coordinator"
    dutyroster search <text>
    dutyroster summary
    dutyroster export "AC 3" out.ics --week-start 2025-06-22

Note:
- Data lives in the JSON snapshot files managed by storage.py
- Every command reloads the full snapshot (no incremental updates)
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

import requests
from rich.console import Console

from dutyroster import config, storage
from dutyroster.display import render_day, render_linked, render_names, render_summary
from dutyroster.export_ics import export_role_to_ics
from dutyroster.fetch import download_sheet
from dutyroster.linking import find_linked_events
from dutyroster.model import Event
from dutyroster.normalize import all_partitioned, canonical_weekday, merge_role_records, normalize_and_partition
from dutyroster.roles import canonical_role, roles_from_events
from dutyroster.roster import read_assignments_csv, read_event_csv, read_roster_csv
from dutyroster.search import build_name_index, search_names, visible_roles_for
from dutyroster.summary import duties_by_role

logger = logging.getLogger(__name__)

console = Console()


def _load_days() -> Dict[str, List[Event]]:
    """
    Load the snapshot and partition it by weekday.
    """
    return normalize_and_partition(storage.load_snapshot())


def _weekday_arg(text: str) -> Optional[str]:
    day = canonical_weekday(text or "")
    if day is None:
        console.print(f"Unknown weekday: {text!r} (use one of {', '.join(config.WEEKDAYS)})")
    return day


# ---------------------------------------------------------------------------
# Import commands
# ---------------------------------------------------------------------------


def _cmd_import_roster(args: argparse.Namespace) -> int:
    """
    Parse a duty-roster grid CSV and replace the role events.
    """
    try:
        records = read_roster_csv(args.path)
    except OSError as exc:
        console.print(f"Cannot read {args.path}: {exc}")
        return 1
    if not records:
        console.print("No roster records found (no AC/CN columns or time rows?).")
        return 1

    n = storage.save_role_events(merge_role_records(records))
    console.print(f"Imported {len(records)} roster records as {n} events.")
    return 0


def _cmd_import_duties(args: argparse.Namespace) -> int:
    """
    Import a flat duties CSV (one row per role) and replace the role events.
    """
    try:
        records = read_event_csv(args.path)
    except OSError as exc:
        console.print(f"Cannot read {args.path}: {exc}")
        return 1

    n = storage.save_role_events(merge_role_records(records))
    console.print(f"Imported {len(records)} duty rows as {n} events.")
    return 0


def _cmd_import_agenda(args: argparse.Namespace) -> int:
    try:
        records = read_event_csv(args.path)
    except OSError as exc:
        console.print(f"Cannot read {args.path}: {exc}")
        return 1

    n = storage.save_agenda_events(records)
    console.print(f"Imported {n} agenda events.")
    return 0


def _cmd_import_assignments(args: argparse.Namespace) -> int:
    try:
        assignments = read_assignments_csv(args.path)
    except OSError as exc:
        console.print(f"Cannot read {args.path}: {exc}")
        return 1

    n = storage.save_role_assignments(assignments)
    console.print(f"Imported assignments for {n} roles.")
    return 0


def _cmd_fetch(args: argparse.Namespace) -> int:
    out = config.raw_dir() / f"{args.name}.csv"
    try:
        path = download_sheet(args.url, out, refresh=args.refresh)
    except requests.RequestException as exc:
        console.print(f"Download failed: {exc}")
        return 1
    console.print(f"Sheet cached at: {path}")
    return 0


# ---------------------------------------------------------------------------
# View commands
# ---------------------------------------------------------------------------


def _cmd_day(args: argparse.Namespace) -> int:
    """
    Show what every (or every selected) role does during each agenda block.
    """
    day = _weekday_arg(args.weekday)
    if day is None:
        return 1

    days = _load_days()
    all_roles = roles_from_events(all_partitioned(days))
    assignments = storage.load_role_assignments()

    visible: set[str]
    if args.name:
        matches = search_names(build_name_index(assignments), args.name)
        if not matches:
            console.print(f"No one matches {args.name!r}.")
            return 1
        visible = visible_roles_for(matches[0])
        console.print(f"Showing {matches[0].role} - {matches[0].full_name}")
    elif args.role:
        visible = {canonical_role(r) for r in args.role} | {config.AGENDA_ROLE}
    else:
        visible = set(all_roles)

    render_day(console, day, days[day], visible, known_roles=all_roles, assignments=assignments)
    return 0


def _cmd_linked(args: argparse.Namespace) -> int:
    """
    Show events related to the first event on a weekday whose name contains the text.
    """
    day = _weekday_arg(args.weekday)
    if day is None:
        return 1

    text = (args.text or "").strip().lower()
    if not text:
        console.print("Please provide an event name.")
        return 1

    day_events = _load_days()[day]
    matches = [ev for ev in day_events if text in ev.event_name.lower()]
    if not matches:
        console.print(f"No event on {day} matches {args.text!r}.")
        return 1

    anchor = matches[0]
    render_linked(console, anchor, find_linked_events(anchor, day_events))
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    query = (args.text or "").strip()
    if not query:
        console.print("Please provide a search text.")
        return 1

    index = build_name_index(storage.load_role_assignments())
    render_names(console, search_names(index, query))
    return 0


def _cmd_summary(args: argparse.Namespace) -> int:
    events = all_partitioned(_load_days())
    render_summary(console, duties_by_role(events), storage.load_role_assignments())
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Export one role's duties for the week into an iCalendar (.ics) file.
    """
    role = canonical_role(args.role or "")
    if not role:
        console.print("Please provide a role.")
        return 1

    try:
        week_start: date = datetime.strptime(args.week_start, "%Y-%m-%d").date()
    except ValueError:
        console.print(f"Invalid --week-start {args.week_start!r} (expected YYYY-MM-DD).")
        return 1

    events = all_partitioned(_load_days())
    n = export_role_to_ics(events, role, week_start, args.out)
    if n == 0:
        console.print(f"No duties for {role} to export.")
        return 0
    console.print(f"Exported {n} events to: {args.out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="dutyroster", description="Duty roster calendar CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import-roster", help="Import a duty-roster grid CSV (replaces role events)")
    p.add_argument("path", type=str, help="Grid CSV path")

    p = sub.add_parser("import-duties", help="Import a flat duties CSV (replaces role events)")
    p.add_argument("path", type=str, help="Duties CSV path")

    p = sub.add_parser("import-agenda", help="Import a flat agenda CSV (replaces agenda events)")
    p.add_argument("path", type=str, help="Agenda CSV path")

    p = sub.add_parser("import-assignments", help="Import role,names CSV (replaces assignments)")
    p.add_argument("path", type=str, help="Assignments CSV path")

    p = sub.add_parser("fetch", help="Download a published roster sheet into the raw cache")
    p.add_argument("url", type=str, help="Published sheet URL")
    p.add_argument("--name", type=str, default="roster", help="Cache file name without extension")
    p.add_argument("--refresh", action="store_true", help="Overwrite an existing cache file")

    p = sub.add_parser("day", help="Show role activities per agenda block")
    p.add_argument("weekday", type=str, help="Weekday (e.g. Wednesday)")
    p.add_argument("--role", action="append", help="Only show this role (repeatable)")
    p.add_argument("--name", type=str, help="Only show the role of the first person matching this name")

    p = sub.add_parser("linked", help="Show events related to an event")
    p.add_argument("weekday", type=str, help="Weekday (e.g. Wednesday)")
    p.add_argument("text", type=str, help="Part of the event name")

    p = sub.add_parser("search", help="Search assigned people by name")
    p.add_argument("text", type=str, help="Search text")

    sub.add_parser("summary", help="List each role's duties")

    p = sub.add_parser("export", help="Export a role's duties to .ics")
    p.add_argument("role", type=str, help="Role (e.g. 'AC 3')")
    p.add_argument("out", type=str, help="Output file path (e.g. out.ics)")
    p.add_argument("--week-start", required=True, help="Sunday of the camp week, YYYY-MM-DD")

    return parser


COMMANDS = {
    "import-roster": _cmd_import_roster,
    "import-duties": _cmd_import_duties,
    "import-agenda": _cmd_import_agenda,
    "import-assignments": _cmd_import_assignments,
    "fetch": _cmd_fetch,
    "day": _cmd_day,
    "linked": _cmd_linked,
    "search": _cmd_search,
    "summary": _cmd_summary,
    "export": _cmd_export,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)
    raise SystemExit(handler(args))
