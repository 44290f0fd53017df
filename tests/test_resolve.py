"""
Unit tests for activity resolution within an agenda block.

Precedence for one role:
    duty (1) < break (2) < free (3); unknown types count as duty
    then overlapping beats non-overlapping
    then longer beats shorter
    then earlier start wins
"""

import unittest

from dutyroster.config import NO_DUTY
from dutyroster.model import Activity
from dutyroster.normalize import normalize_and_partition, normalize_record
from dutyroster.resolve import agenda_anchors, event_priority, resolve_activities, should_replace


def _day(*records):
    rows = [dict(weekday="Wednesday", **r) for r in records]
    return normalize_and_partition(rows)["Wednesday"]


def _agenda(start="9:00 AM", end="10:00 AM", name="Check-in"):
    return {"startTime": start, "endTime": end, "eventType": "agenda", "eventName": name, "role": "Agenda"}


def _duty(start, end, name, roles, event_type="duty", abbr="DU"):
    return {
        "startTime": start,
        "endTime": end,
        "eventType": event_type,
        "eventName": name,
        "eventAbbreviation": abbr,
        "assignedRoles": list(roles),
    }


class TestPriority(unittest.TestCase):
    def test_priority_table(self) -> None:
        self.assertEqual(event_priority("duty"), 1)
        self.assertEqual(event_priority("Break"), 2)
        self.assertEqual(event_priority("FREE"), 3)
        self.assertEqual(event_priority("meeting"), 1)
        self.assertEqual(event_priority(""), 1)

    def test_should_replace_placeholder_values(self) -> None:
        cand = Activity("X - Y", "duty", "9:00 AM", "9:30 AM", True, True, 1, 540, 570)
        self.assertTrue(should_replace(None, cand))
        self.assertTrue(should_replace(NO_DUTY, cand))
        self.assertTrue(should_replace("Free", cand))


class TestResolveActivities(unittest.TestCase):
    def test_idle_role_is_no_duty(self) -> None:
        events = _day(_agenda(), _duty("11:00 AM", "12:00 PM", "Lunch Support", ["AC 1"]))
        anchor = agenda_anchors(events)[0]
        result = resolve_activities(anchor, events, {"Agenda", "AC 1", "AC 2"})
        self.assertEqual(result, {"AC 1": NO_DUTY, "AC 2": NO_DUTY})

    def test_anchor_without_times_leaves_everyone_free(self) -> None:
        events = _day(_duty("9:00 AM", "10:00 AM", "Hall Monitor", ["AC 1"]))
        anchor = normalize_record(_agenda(start="soon", end="later"))
        self.assertIsNone(anchor.start_mins)
        result = resolve_activities(anchor, events, {"Agenda", "AC 1"})
        self.assertEqual(result, {"AC 1": NO_DUTY})

    def test_touching_boundary_does_not_count(self) -> None:
        events = _day(_agenda(), _duty("8:00 AM", "9:00 AM", "Breakfast Support", ["AC 1"]))
        anchor = agenda_anchors(events)[0]
        self.assertEqual(resolve_activities(anchor, events, {"AC 1"})["AC 1"], NO_DUTY)

    def test_agenda_events_never_resolve(self) -> None:
        events = _day(_agenda(), {**_agenda(), "assignedRoles": ["AC 1"], "eventName": "Other"})
        anchor = agenda_anchors(events)[0]
        self.assertEqual(resolve_activities(anchor, events, {"AC 1"})["AC 1"], NO_DUTY)

    def test_zero_length_events_are_ignored(self) -> None:
        events = _day(_agenda(), _duty("9:30 AM", "9:30 AM", "Blink", ["AC 1"]))
        anchor = agenda_anchors(events)[0]
        self.assertEqual(resolve_activities(anchor, events, {"AC 1"})["AC 1"], NO_DUTY)

    def test_duty_beats_break_in_any_order(self) -> None:
        brk = _duty("9:00 AM", "10:00 AM", "Time-off", ["AC 1"], event_type="break")
        duty = _duty("9:15 AM", "9:30 AM", "Hall Monitor", ["AC 1"])
        for order in ((brk, duty), (duty, brk)):
            events = _day(_agenda(), *order)
            anchor = agenda_anchors(events)[0]
            act = resolve_activities(anchor, events, {"AC 1"})["AC 1"]
            self.assertEqual(act.activity, "DU - Hall Monitor")
            self.assertEqual(act.priority, 1)

    def test_longer_wins_on_tie(self) -> None:
        short = _duty("9:00 AM", "9:30 AM", "Short", ["AC 1"])
        long_ = _duty("9:00 AM", "9:45 AM", "Long", ["AC 1"])
        for order in ((short, long_), (long_, short)):
            events = _day(_agenda(), *order)
            anchor = agenda_anchors(events)[0]
            self.assertEqual(resolve_activities(anchor, events, {"AC 1"})["AC 1"].activity, "DU - Long")

    def test_earlier_wins_on_equal_duration(self) -> None:
        early = _duty("9:10 AM", "9:40 AM", "Early", ["AC 1"])
        late = _duty("9:20 AM", "9:50 AM", "Late", ["AC 1"])
        for order in ((early, late), (late, early)):
            events = _day(_agenda(), *order)
            anchor = agenda_anchors(events)[0]
            self.assertEqual(resolve_activities(anchor, events, {"AC 1"})["AC 1"].activity, "DU - Early")

    def test_check_in_coordinator_fixed_case(self) -> None:
        events = _day(
            _agenda("9:00 AM", "10:00 AM", "Check-in"),
            {
                "startTime": "9:00 AM",
                "endTime": "9:30 AM",
                "eventType": "duty",
                "eventName": "Check-in Coordinator",
                "eventAbbreviation": "CC",
                "role": "AC 1",
            },
        )
        anchor = agenda_anchors(events)[0]
        act = resolve_activities(anchor, events, {"Agenda", "AC 1"})["AC 1"]
        self.assertEqual(act.activity, "CC - Check-in Coordinator")
        # 540 < 600 and 570 > 540: full containment is an overlap
        self.assertTrue(act.is_overlapping)
        self.assertTrue(act.starts_within)
        self.assertEqual(act.priority, 1)
        self.assertEqual((act.start_time, act.end_time), ("9:00 AM", "9:30 AM"))

    def test_event_running_before_anchor_counts(self) -> None:
        events = _day(_agenda(), _duty("8:30 AM", "9:15 AM", "Setup", ["AC 2"]))
        anchor = agenda_anchors(events)[0]
        act = resolve_activities(anchor, events, {"AC 2"})["AC 2"]
        self.assertTrue(act.is_overlapping)
        self.assertFalse(act.starts_within)


class TestPairedBackfill(unittest.TestCase):
    def setUp(self) -> None:
        self.events = _day(
            _agenda(),
            _duty("9:00 AM", "10:00 AM", "Dance Coordinator", ["AC 3"]),
            _duty("9:15 AM", "9:45 AM", "Dance Support", ["CN C"]),
        )
        self.anchor = agenda_anchors(self.events)[0]

    def test_hidden_partner_is_added(self) -> None:
        result = resolve_activities(self.anchor, self.events, {"Agenda", "AC 3"})
        self.assertIn("CN C", result)
        self.assertNotEqual(result["CN C"], NO_DUTY)
        self.assertEqual(result["CN C"].activity, "DU - Dance Support")

    def test_visible_partner_is_populated(self) -> None:
        result = resolve_activities(self.anchor, self.events, {"AC 3", "CN C"})
        self.assertEqual(result["CN C"].activity, "DU - Dance Support")

    def test_partner_outside_known_roles_is_not_added(self) -> None:
        result = resolve_activities(self.anchor, self.events, {"AC 3"}, known_roles={"Agenda", "AC 3"})
        self.assertNotIn("CN C", result)

    def test_idle_partner_is_not_added(self) -> None:
        events = _day(_agenda(), _duty("9:00 AM", "10:00 AM", "Dance Coordinator", ["AC 3"]))
        anchor = agenda_anchors(events)[0]
        self.assertNotIn("CN C", resolve_activities(anchor, events, {"AC 3"}))

    def test_cn_side_backfills_ac(self) -> None:
        result = resolve_activities(self.anchor, self.events, {"CN C"})
        self.assertEqual(result["AC 3"].activity, "DU - Dance Coordinator")


if __name__ == "__main__":
    unittest.main()
