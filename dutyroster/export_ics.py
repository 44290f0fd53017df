"""
iCalendar (.ics) export of one role's week.

Events only carry a weekday, so the caller supplies the Sunday that starts
the camp week and each event is dated relative to it. The file can be
imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable

from dutyroster.config import NO_DUTY, WEEKDAYS
from dutyroster.model import Event


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(day: date, minutes: int) -> str:
    """
    Convert date + minutes since midnight to ICS local datetime 'YYYYMMDDTHHMM00'.
    Minutes past midnight roll over to the next day.
    """
    dt = datetime(day.year, day.month, day.day) + timedelta(minutes=minutes)
    return dt.strftime("%Y%m%dT%H%M00")


def _uid(ev: Event, role: str, dtstart: str) -> str:
    slug = "".join(ch if ch.isalnum() else "-" for ch in f"{role}-{ev.event_name}")
    return f"{slug}-{dtstart}@dutyroster"


def export_role_to_ics(events: Iterable[Event], role: str, week_start: date, out_path: str | Path) -> int:
    """
    Export `role`'s partitioned events to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//DutyRoster//EN")
    lines.append("CALSCALE:GREGORIAN")

    count = 0
    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    for ev in events:
        if role not in ev.assigned_roles:
            continue
        if ev.start_mins is None or ev.end_mins is None or ev.end_mins <= ev.start_mins:
            continue
        if ev.kind == "free" or ev.event_name == NO_DUTY:
            continue
        if ev.weekday not in WEEKDAYS:
            continue

        day = week_start + timedelta(days=WEEKDAYS.index(ev.weekday))
        dtstart = _dt_local(day, ev.start_mins)
        dtend = _dt_local(day, ev.end_mins)

        summary = f"{ev.event_abbreviation} - {ev.event_name}" if ev.event_abbreviation else ev.event_name

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(_uid(ev, role, dtstart))}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(summary or 'Duty')}")
        if ev.location:
            lines.append(f"LOCATION:{_ics_escape(ev.location)}")
        if ev.event_description:
            lines.append(f"DESCRIPTION:{_ics_escape(ev.event_description)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
