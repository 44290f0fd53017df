"""
Parsing (roster spreadsheets -> raw event records).

Three inputs are understood:

- The duty-roster grid: one column per role (AC 1, CN A, ...), weekday
  marker rows, and one row per 5-minute slot ("7:30", "13:05", ...).
  Each cell is what that role does during the slot; blank = No Duty.
- Flat event CSVs (agenda or duties) with a header row:
  Weekday, Start Time, End Time, Role, Event Name, Event Abbreviation,
  Event Type, Event Description[, Location]
- Role assignment CSVs: role, names (";"-separated)[, updatedAt]

Output records use the store's camelCase keys so they can be saved
directly (storage.py) or fed to normalize.py.
"""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from dutyroster.config import NO_DUTY, ROSTER_SLOT_MINUTES, WEEKDAYS
from dutyroster.roles import canonical_role, is_roster_role

logger = logging.getLogger(__name__)

_SLOT_RE = re.compile(r"^\d{1,2}:\d{2}$")

# Only the first rows of the grid carry role headers
HEADER_SCAN_ROWS = 5

FLAT_COLUMNS = {
    "Weekday": "weekday",
    "Start Time": "startTime",
    "End Time": "endTime",
    "Role": "role",
    "Event Name": "eventName",
    "Event Abbreviation": "eventAbbreviation",
    "Event Type": "eventType",
    "Event Description": "eventDescription",
    "Location": "location",
}

ABBREVIATIONS = {
    "meeting": "ME",
    "interviews": "IN",
    "time-off": "OF",
    "no duty": "ND",
    "check-in set up": "CS",
    "check-in #1": "C1",
    "check-in #2": "C2",
    "check-in coordinator": "CC",
    "bus arrival": "BA",
    "orientation": "OR",
    "orientation prep": "OP",
    "dinner support": "DS",
    "dinner coordinator": "DC",
    "breakfast support": "BS",
    "breakfast coordinator": "BC",
    "seating support": "SS",
    "hallway supervision": "HS",
    "site-office": "SO",
    "lights out": "LO",
    "devotional coordinator": "DV",
    "music performance coordinator (singers)": "MP",
    "counselor dance": "CD",
    "ac/cn meeting": "AM",
}

FREE_DESCRIPTION = "Time without duty but still actively participating in the session."


# ---------------------------------------------------------------------------
# Guessing helpers
# ---------------------------------------------------------------------------


def guess_type(name: str) -> str:
    n = name.lower()
    if "meeting" in n:
        return "meeting"
    if "time-off" in n:
        return "break"
    if "free" in n or "interview" in n:
        return "free"
    return "duty"


def guess_abbreviation(name: str) -> str:
    n = name.lower().strip()
    if n in ABBREVIATIONS:
        return ABBREVIATIONS[n]
    for key, abbr in ABBREVIATIONS.items():
        if key in n:
            return abbr

    words = name.split()
    if len(words) >= 2:
        return (words[0][0] + words[1][0]).upper()
    if len(words) == 1:
        return words[0][:2].upper()
    return "DU"


def guess_description(name: str, event_type: str) -> str:
    if event_type == "meeting":
        return "A scheduled meeting for coordination, planning, or discussion."
    if event_type == "break":
        return f"Break time: {name}."
    if event_type == "free":
        return FREE_DESCRIPTION
    if event_type == "duty":
        return f"A specific duty or task: {name}."
    return f"Event: {name}."


def format_slot_time(hhmm: str, weekday: str = "", afternoon: bool = False) -> str:
    """
    Turn a grid time ('7:30', '13:05') into 'H:MM AM|PM'.

    Hours 1-11 are ambiguous in the grid: they are PM on Sunday (arrival
    evening) or once the day has crossed noon, AM otherwise.
    """
    if not _SLOT_RE.match(hhmm):
        return hhmm
    hour, minute = (int(x) for x in hhmm.split(":"))

    if hour >= 13:
        suffix, display = "PM", hour - 12
    elif hour == 12:
        suffix, display = "PM", 12
    elif hour == 0:
        suffix, display = "AM", 12
    else:
        display = hour
        suffix = "PM" if weekday == "Sunday" or afternoon else "AM"
    return f"{display}:{minute:02d} {suffix}"


def add_minutes(hhmm: str, minutes: int) -> str:
    hour, minute = (int(x) for x in hhmm.split(":"))
    total = (hour * 60 + minute + minutes) % (24 * 60)
    return f"{total // 60}:{total % 60:02d}"


# ---------------------------------------------------------------------------
# Roster grid (CORE IMPORT)
# ---------------------------------------------------------------------------


def _cell(row: Sequence[str], idx: int) -> str:
    return row[idx].strip() if idx < len(row) and row[idx] is not None else ""


def find_role_columns(rows: Sequence[Sequence[str]]) -> Dict[int, str]:
    columns: Dict[int, str] = {}
    for row in rows[:HEADER_SCAN_ROWS]:
        for idx, cell in enumerate(row):
            if cell and is_roster_role(cell):
                columns[idx] = canonical_role(cell)
    return columns


def parse_roster_rows(rows: Sequence[Sequence[str]]) -> List[Dict[str, str]]:
    """
    Convert the grid into per-role records, merging contiguous slots.
    """
    columns = find_role_columns(rows)
    logger.info("Found %d role columns: %s", len(columns), list(columns.values()))

    # keep row positions so each role column can read its own cell
    indexed: List[tuple[int, str, str]] = []
    weekday = ""
    for row_idx, row in enumerate(rows):
        first = _cell(row, 0)
        if first in WEEKDAYS:
            weekday = first
        elif weekday and _SLOT_RE.match(first):
            indexed.append((row_idx, weekday, first))
    logger.info("Processing %d time rows", len(indexed))

    records: List[Dict[str, str]] = []
    for col_idx, role in columns.items():
        current: Optional[Dict[str, str]] = None
        day = ""
        afternoon = False

        for row_idx, weekday, slot in indexed:
            if weekday != day:
                day = weekday
                afternoon = False

            value = _cell(rows[row_idx], col_idx)
            if value:
                name = value
                event_type = guess_type(value)
                abbr = guess_abbreviation(value)
                description = guess_description(value, event_type)
            else:
                name, event_type, abbr, description = NO_DUTY, "free", "ND", FREE_DESCRIPTION

            start = format_slot_time(slot, weekday, afternoon)
            end = format_slot_time(add_minutes(slot, ROSTER_SLOT_MINUTES), weekday, start.endswith("PM"))
            if start.endswith("PM") and weekday != "Sunday":
                afternoon = True

            if (
                current is not None
                and current["eventName"] == name
                and current["eventType"] == event_type
                and current["weekday"] == weekday
            ):
                current["endTime"] = end
                continue

            if current is not None:
                records.append(current)
            current = {
                "weekday": weekday,
                "startTime": start,
                "endTime": end,
                "role": role,
                "eventName": name,
                "eventAbbreviation": abbr,
                "eventType": event_type,
                "eventDescription": description,
            }

        if current is not None:
            records.append(current)

    logger.info("Parsed %d merged roster records", len(records))
    return records


def _read_rows(path: Path) -> List[List[str]]:
    with Path(path).open(newline="", encoding="utf-8-sig") as f:
        return [row for row in csv.reader(f)]


def read_roster_csv(path: str | Path) -> List[Dict[str, str]]:
    return parse_roster_rows(_read_rows(Path(path)))


# ---------------------------------------------------------------------------
# Flat CSVs
# ---------------------------------------------------------------------------


def read_event_csv(path: str | Path) -> List[Dict[str, str]]:
    """
    Read a flat agenda/duties CSV into raw records. Unknown columns are ignored.
    """
    records: List[Dict[str, str]] = []
    with Path(path).open(newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            rec: Dict[str, str] = {}
            for header, value in row.items():
                key = FLAT_COLUMNS.get((header or "").strip())
                if key:
                    rec[key] = (value or "").strip()
            if rec.get("role"):
                rec["role"] = canonical_role(rec["role"])
            if any(rec.values()):
                records.append(rec)
    return records


def split_names(text: str) -> List[str]:
    return [n.strip() for n in (text or "").split(";") if n.strip()]


def read_assignments_csv(path: str | Path) -> Dict[str, List[str]]:
    """
    role -> names. Role ids are canonicalized ('AC1' -> 'AC 1'); repeated roles accumulate names.
    """
    out: Dict[str, List[str]] = {}
    with Path(path).open(newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            role = canonical_role(row.get("role") or "")
            if not role:
                continue
            out.setdefault(role, []).extend(split_names(row.get("names") or ""))
    return out
