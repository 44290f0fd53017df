import unittest

from dutyroster.search import build_name_index, role_label, search_names, visible_roles_for


ASSIGNMENTS = {
    "AC 1": ["Jane Doe", "Sam Lee"],
    "CN A": ["Ann Park", ""],
}


class TestNameSearch(unittest.TestCase):
    def setUp(self) -> None:
        self.index = build_name_index(ASSIGNMENTS)

    def test_index_skips_blank_names(self) -> None:
        self.assertEqual([e.full_name for e in self.index], ["Jane Doe", "Sam Lee", "Ann Park"])
        self.assertEqual(self.index[0].display_name, "Jane")

    def test_search_is_case_insensitive_substring(self) -> None:
        hits = search_names(self.index, "  LEE ")
        self.assertEqual([h.full_name for h in hits], ["Sam Lee"])
        self.assertEqual(len(search_names(self.index, "a")), 3)

    def test_empty_query_returns_nothing(self) -> None:
        self.assertEqual(search_names(self.index, "   "), [])

    def test_limit(self) -> None:
        self.assertEqual(len(search_names(self.index, "a", limit=2)), 2)

    def test_selected_person_sees_role_and_agenda(self) -> None:
        entry = search_names(self.index, "ann")[0]
        self.assertEqual(visible_roles_for(entry), {"CN A", "Agenda"})

    def test_role_label(self) -> None:
        self.assertEqual(role_label("AC 1", ASSIGNMENTS), "AC 1 (Jane, Sam)")
        self.assertEqual(role_label("AC 9", ASSIGNMENTS), "AC 9")


if __name__ == "__main__":
    unittest.main()
