"""
12-hour clock strings <-> minutes since midnight.

    decode("9:05 AM") == 545
    encode(545) == "9:05 AM"

decode() never raises: anything it cannot read comes back as None and
callers treat that as "not comparable".
"""

from __future__ import annotations

import re
from typing import Optional

_DISPLAY_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")

MINUTES_PER_DAY = 24 * 60


def decode(display: object) -> Optional[int]:
    """
    Parse 'H:MM AM|PM' (hour 1-12, case-insensitive meridiem).
    Returns None for malformed input.
    """
    if not isinstance(display, str):
        return None
    match = _DISPLAY_RE.match(display)
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    if not (1 <= hour <= 12 and 0 <= minute <= 59):
        return None

    period = match.group(3).upper()
    if period == "PM" and hour != 12:
        hour += 12
    if period == "AM" and hour == 12:
        hour = 0
    return hour * 60 + minute


def encode(minutes: int) -> str:
    """
    Format minutes since midnight as 'H:MM AM|PM'.

    Values outside one day wrap at 24h (1440 -> '12:00 AM', -15 -> '11:45 PM').
    """
    minutes = int(minutes) % MINUTES_PER_DAY
    h, m = divmod(minutes, 60)
    hour12 = 12 if h % 12 == 0 else h % 12
    period = "AM" if h < 12 else "PM"
    return f"{hour12}:{m:02d} {period}"
