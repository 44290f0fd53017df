"""
Tests for downloading published roster sheets.

The network is never touched: requests.get is patched.
"""

import csv
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dutyroster.fetch import download_sheet, parse_sheet_html


HTML = """
<html><body>
<table>
  <tr><th>1</th><td></td><td>AC 1</td><td>CN A</td></tr>
  <tr><th>2</th><td>Wednesday</td><td></td><td></td></tr>
  <tr><th>3</th><td></td><td></td><td></td></tr>
  <tr><th>4</th><td>9:00</td><td>Lunch <b>Support</b></td><td></td></tr>
</table>
</body></html>
"""


class TestParseSheetHtml(unittest.TestCase):
    def test_rows_skip_header_cells_and_empty_rows(self) -> None:
        rows = parse_sheet_html(HTML)
        self.assertEqual(
            rows,
            [
                ["", "AC 1", "CN A"],
                ["Wednesday", "", ""],
                ["9:00", "Lunch Support", ""],
            ],
        )

    def test_no_table(self) -> None:
        self.assertEqual(parse_sheet_html("<p>nothing</p>"), [])


class TestDownloadSheet(unittest.TestCase):
    def test_download_writes_csv_and_respects_cache(self) -> None:
        resp = mock.Mock(text=HTML)
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "raw" / "roster.csv"
            with mock.patch("dutyroster.fetch.requests.get", return_value=resp) as get:
                download_sheet("https://example.org/sheet", out)
                download_sheet("https://example.org/sheet", out)
                self.assertEqual(get.call_count, 1)
                resp.raise_for_status.assert_called_once()

                with out.open(newline="", encoding="utf-8") as f:
                    rows = list(csv.reader(f))
                self.assertEqual(rows[0], ["", "AC 1", "CN A"])

                download_sheet("https://example.org/sheet", out, refresh=True)
                self.assertEqual(get.call_count, 2)


if __name__ == "__main__":
    unittest.main()
