import tempfile
import unittest
from datetime import date
from pathlib import Path

from dutyroster.export_ics import export_role_to_ics
from dutyroster.normalize import normalize_and_partition


def _events():
    days = normalize_and_partition(
        [
            {
                "weekday": "Monday",
                "startTime": "7:00 PM",
                "endTime": "9:00 PM",
                "eventName": "Dance DJ",
                "eventAbbreviation": "DD",
                "eventType": "duty",
                "eventDescription": "Music, lights",
                "location": "Gym",
                "assignedRoles": ["AC 2"],
            },
            {
                "weekday": "Monday",
                "startTime": "9:00 PM",
                "endTime": "9:30 PM",
                "eventName": "No Duty",
                "eventType": "free",
                "role": "AC 2",
            },
            {
                "weekday": "Tuesday",
                "startTime": "8:00 AM",
                "endTime": "9:00 AM",
                "eventName": "Breakfast Support",
                "eventType": "duty",
                "role": "AC 3",
            },
        ]
    )
    return [ev for day in days.values() for ev in day]


class TestExportICS(unittest.TestCase):
    def test_export_only_the_roles_duties(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            n = export_role_to_ics(_events(), "AC 2", date(2026, 6, 14), out)
            self.assertEqual(n, 1)
            text = out.read_text(encoding="utf-8")
            self.assertIn("BEGIN:VCALENDAR", text)
            self.assertIn("BEGIN:VEVENT", text)
            self.assertIn("SUMMARY:DD - Dance DJ", text)
            # 2026-06-14 is the Sunday; Monday is the next day
            self.assertIn("DTSTART:20260615T190000", text)
            self.assertIn("DTEND:20260615T210000", text)
            self.assertIn("LOCATION:Gym", text)
            self.assertIn("DESCRIPTION:Music\\, lights", text)
            self.assertNotIn("No Duty", text)
            self.assertNotIn("Breakfast", text)

    def test_role_without_events_gives_empty_calendar(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "nested" / "empty.ics"
            self.assertEqual(export_role_to_ics(_events(), "CN Z", date(2026, 6, 14), out), 0)
            self.assertIn("END:VCALENDAR", out.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
