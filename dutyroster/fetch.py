from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import List

import requests
from bs4 import BeautifulSoup

from dutyroster import config

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def parse_sheet_html(html: str) -> List[List[str]]:
    """
    Extract the first table of a published spreadsheet page as rows of cell text.

    Google's "publish to web" output puts a row-number <th> in front of every
    row; only <td> cells are kept. Fully empty rows are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        return []

    rows: List[List[str]] = []
    for tr in table.find_all("tr"):
        cells = [td.get_text(" ", strip=True) for td in tr.find_all("td")]
        if any(cells):
            rows.append(cells)
    return rows


def fetch_sheet_rows(url: str, timeout: float = 30) -> List[List[str]]:
    """
    Download a published sheet and return its rows.
    """
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return parse_sheet_html(resp.text)


def download_sheet(url: str, out_path: str | Path, refresh: bool = False) -> Path:
    """
    Cache a published sheet as CSV. Existing files are kept unless refresh=True.
    """
    out = Path(out_path)
    if out.exists() and not refresh:
        logger.info("SKIP  %s (cached)", out.name)
        return out

    logger.info("FETCH %s", url)
    rows = fetch_sheet_rows(url)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", newline="", encoding="utf-8") as f:
        csv.writer(f).writerows(rows)
    logger.info("Saved %d rows to %s", len(rows), out)
    return out


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dutyroster.fetch", description="Download a published roster sheet (cache CSV)")
    p.add_argument("url", type=str, help="Published sheet URL (HTML)")
    p.add_argument("--name", type=str, default="roster", help="Cache file name without extension")
    p.add_argument("--refresh", action="store_true", help="Re-fetch and overwrite an existing cache file")
    return p


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = build_parser().parse_args(argv)
    download_sheet(args.url, config.raw_dir() / f"{args.name}.csv", refresh=args.refresh)


if __name__ == "__main__":
    main()
