"""
Configuration constants and data locations.
"""

from __future__ import annotations

import os
from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

PACKAGE_DIR = Path(__file__).resolve().parent

DATA_DIR_ENV = "DUTYROSTER_DATA_DIR"

AGENDA_EVENTS_FILE = "agenda_events.json"
ROLE_EVENTS_FILE = "role_events.json"
ROLE_ASSIGNMENTS_FILE = "role_assignments.json"


def data_dir() -> Path:
    """
    Return the data directory.

    Read on every call so tests (and the CLI) can redirect it through
    the DUTYROSTER_DATA_DIR environment variable.
    """
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    if override:
        return Path(override)
    return PACKAGE_DIR / "data"


def processed_dir() -> Path:
    return data_dir() / "processed"


def raw_dir() -> Path:
    return data_dir() / "raw"


# =============================================================================
# CALENDAR
# =============================================================================

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

AGENDA_ROLE = "Agenda"
NO_DUTY = "No Duty"

# Missing or unparseable end times become start + this many minutes
DEFAULT_EVENT_MINUTES = 15

# Roster grids are laid out in 5-minute slots
ROSTER_SLOT_MINUTES = 5

# =============================================================================
# ACTIVITY RESOLUTION
# =============================================================================

# Lower number wins. Unknown types (including "meeting") rank as duty.
EVENT_PRIORITIES = {"duty": 1, "break": 2, "free": 3}
DEFAULT_PRIORITY = 1

# =============================================================================
# EVENT LINKING
# =============================================================================

AFTERNOON_START_MINUTES = 780  # 1:00 PM
CLASS_WINDOW_END_MINUTES = 930  # 3:30 PM
PROXIMITY_WINDOW_MINUTES = 60
