"""
Draft Big Board Scraper Module

Fetches prospect rankings from two kinds of pages and parses them into one
board schema:
- "table" boards publish an HTML <table> (some interleave empty spacer rows)
- "text" boards publish one "<rank>. <name>, <pos>, <notes>" block per prospect

Unparseable rows are never dropped silently: each board comes back with a
ParseReport listing the failures. A page that cannot be fetched raises
FetchError for that board only.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import polars as pl
import requests
from bs4 import BeautifulSoup

from .logger import get_logger
from .constants import (
    REQUEST_HEADERS, REQUEST_TIMEOUT, BOARD_COLUMN_ALIASES, PARSE_FAILURE_SAMPLES,
    TABLE_BOARD_NAME, TABLE_BOARD_URL, TEXT_BOARD_NAME, TEXT_BOARD_URL, TEXT_BOARD_SELECTOR,
)
from .errors import FetchError, ParseError, ParseReport

logger = get_logger(__name__)

BOARD_SCHEMA = {
    "source": pl.Utf8,
    "overall_rank": pl.Int64,
    "player_name": pl.Utf8,
    "position": pl.Utf8,
    "position_rank": pl.Int64,
    "school": pl.Utf8,
    "height_inches": pl.Int64,
    "weight": pl.Int64,
    "details": pl.Utf8,
}

RANK_TOKEN = re.compile(r"^\s*(\d+)\s*\.\s*(.*)$", re.S)
HEIGHT_PATTERN = re.compile(r"\b([4-7])\s*(?:'|’|-|ft\.?)\s*(\d{1,2})\b")
WEIGHT_PATTERN = re.compile(r"\b(\d{3})\s*(?:lbs?\b|pounds\b)", re.I)
INTEGER = re.compile(r"^\d+$")


@dataclass
class BoardSource:
    """One ranking page and the strategy used to parse it."""
    name: str
    url: str
    strategy: str
    selector: Optional[str] = None


@dataclass
class BoardResult:
    """Parsed board for one source, or the fetch error that stopped it."""
    source: BoardSource
    entries: Optional[pl.DataFrame] = None
    report: Optional[ParseReport] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.entries is not None


def default_sources() -> List[BoardSource]:
    """The table board and the text board configured in constants / .env"""
    return [
        BoardSource(name=TABLE_BOARD_NAME, url=TABLE_BOARD_URL, strategy="table"),
        BoardSource(name=TEXT_BOARD_NAME, url=TEXT_BOARD_URL, strategy="text", selector=TEXT_BOARD_SELECTOR),
    ]


class HttpFetcher:
    """Fetches pages over HTTP. Anything with a fetch(url) -> str method can stand in for it."""

    def __init__(self, headers: Optional[Dict[str, str]] = None, timeout: float = REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(headers or REQUEST_HEADERS)

    def fetch(self, url: str) -> str:
        logger.info(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, f"Request failed: {e}") from e

        if not response.ok:
            raise FetchError(url, f"HTTP {response.status_code}", status_code=response.status_code)

        return response.text


# ============================================================================
# FIELD PARSING
# ============================================================================

def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def parse_height(text: Optional[str]) -> Optional[int]:
    """Height in inches from strings like 6'1", 6-1 or 6 ft 1"""
    if not text:
        return None
    match = HEIGHT_PATTERN.search(text)
    if not match:
        return None
    feet, inches = int(match.group(1)), int(match.group(2))
    if inches >= 12:
        return None
    return feet * 12 + inches


def parse_weight(text: Optional[str]) -> Optional[int]:
    """Weight in pounds from '210 lbs' style notes"""
    if not text:
        return None
    match = WEIGHT_PATTERN.search(text)
    return int(match.group(1)) if match else None


def to_int(text: Optional[str]) -> Optional[int]:
    """Numeric coercion: non-numeric text becomes None rather than an error."""
    if text is None:
        return None
    cleaned = text.strip().rstrip(".")
    return int(cleaned) if INTEGER.match(cleaned) else None


def parse_rank(text: Optional[str], raw: str) -> int:
    rank = to_int(text)
    if rank is None or rank <= 0:
        raise ParseError(raw, "rank is not a positive integer")
    return rank


def normalize_column_name(header: str) -> str:
    """'Pos #' -> 'pos_rank', 'Overall Rank' -> 'overall_rank'"""
    text = header.replace("#", " rank ").lower()
    return re.sub(r"[^a-z0-9]+", "_", text).strip("_")


def _empty_board() -> pl.DataFrame:
    return pl.DataFrame(schema=BOARD_SCHEMA)


def _to_board(records: List[dict], source_name: str) -> pl.DataFrame:
    if not records:
        return _empty_board()

    rows = [{**{col: None for col in BOARD_SCHEMA}, **record, "source": source_name} for record in records]
    board = pl.DataFrame(rows, schema=BOARD_SCHEMA).sort("overall_rank")

    duplicated = board.filter(pl.col("overall_rank").is_duplicated())
    if duplicated.height > 0:
        logger.warning(f"{source_name}: {duplicated.height} rows share an overall rank")

    return board


# ============================================================================
# STRUCTURED TABLE STRATEGY
# ============================================================================

def parse_table_board(html: str, source_name: str) -> Tuple[pl.DataFrame, ParseReport]:
    """
    Parse the first <table> on a page into a board.

    Rows are kept only when their rank cell is a positive integer; rows with
    every cell empty count as spacer rows, anything else that fails becomes a
    ParseError in the report.
    """
    report = ParseReport(source=source_name)
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        report.record(ParseError(source_name, "page has no <table> element"))
        return _empty_board(), report

    rows = table.find_all("tr")
    if not rows:
        report.record(ParseError(source_name, "table has no rows"))
        return _empty_board(), report

    header_cells = [collapse_whitespace(cell.get_text(" ")) for cell in rows[0].find_all(["th", "td"])]
    columns = [BOARD_COLUMN_ALIASES.get(normalize_column_name(h), normalize_column_name(h)) for h in header_cells]

    if "overall_rank" not in columns and columns:
        logger.warning(f"{source_name}: no rank header in {header_cells}, using the first column as rank")
        columns[0] = "overall_rank"
    if "player_name" not in columns:
        report.record(ParseError(" | ".join(header_cells), "table has no player column"))
        return _empty_board(), report

    records = []
    for row in rows[1:]:
        cells = [collapse_whitespace(cell.get_text(" ")) for cell in row.find_all(["td", "th"])]
        if not any(cells):
            report.skipped_blank += 1
            continue

        raw = " | ".join(cells)
        values = dict(zip(columns, cells))
        try:
            rank = parse_rank(values.get("overall_rank"), raw)
            name = values.get("player_name")
            if not name:
                raise ParseError(raw, "player name is empty")
        except ParseError as e:
            report.record(e)
            continue

        records.append({
            "overall_rank": rank,
            "player_name": name,
            "position": values.get("position") or None,
            "position_rank": to_int(values.get("position_rank")),
            "school": values.get("school") or None,
            "height_inches": parse_height(values.get("height")),
            "weight": to_int(values.get("weight")),
        })

    report.parsed = len(records)
    return _to_board(records, source_name), report


# ============================================================================
# FREE-TEXT STRATEGY
# ============================================================================

def parse_text_entry(text: str) -> dict:
    """
    Parse one free-text ranking entry.

    "12. Jane Doe, WR, 6'1\" 210 lbs" ->
    {overall_rank: 12, player_name: "Jane Doe", position: "WR", details: "6'1\" 210 lbs", ...}

    Raises:
        ParseError: no leading "<number>." token, a rank of zero,
            an empty name or no position segment
    """
    entry = collapse_whitespace(text)
    match = RANK_TOKEN.match(entry)
    if not match:
        raise ParseError(entry, "no leading rank token")

    rank = parse_rank(match.group(1), entry)

    segments = [segment.strip() for segment in match.group(2).split(",", 2)]
    name = segments[0]
    if not name:
        raise ParseError(entry, "player name is empty")
    if len(segments) < 2 or not segments[1]:
        raise ParseError(entry, "no position after player name")

    details = segments[2] if len(segments) > 2 and segments[2] else None
    return {
        "overall_rank": rank,
        "player_name": name,
        "position": segments[1],
        "details": details,
        "height_inches": parse_height(details),
        "weight": parse_weight(details),
    }


def parse_text_board(html: str, selector: str, source_name: str) -> Tuple[pl.DataFrame, ParseReport]:
    """Parse every element matching a CSS selector as one free-text entry."""
    report = ParseReport(source=source_name)
    soup = BeautifulSoup(html, "html.parser")
    elements = soup.select(selector)
    if not elements:
        report.record(ParseError(selector, "selector matched no elements"))
        return _empty_board(), report

    records = []
    for element in elements:
        text = collapse_whitespace(element.get_text(" "))
        if not text:
            report.skipped_blank += 1
            continue
        try:
            records.append(parse_text_entry(text))
        except ParseError as e:
            report.record(e)

    report.parsed = len(records)
    return _to_board(records, source_name), report


# ============================================================================
# PIPELINE
# ============================================================================

def log_parse_report(report: ParseReport) -> None:
    logger.info(f"{report.source}: parsed {report.parsed} entries, skipped {report.skipped_blank} blank rows")
    if report.failure_count:
        logger.warning(f"{report.source}: {report.failure_count} entries failed to parse")
        for sample in report.samples(PARSE_FAILURE_SAMPLES):
            logger.warning(f"  {sample}")


def scrape_board(source: BoardSource, fetcher=None) -> BoardResult:
    """
    Fetch and parse a single board.

    Raises:
        FetchError: the page could not be retrieved
    """
    fetcher = fetcher or HttpFetcher()
    html = fetcher.fetch(source.url)

    if source.strategy == "table":
        entries, report = parse_table_board(html, source.name)
    elif source.strategy == "text":
        if not source.selector:
            raise ValueError(f"Text board {source.name} needs a CSS selector")
        entries, report = parse_text_board(html, source.selector, source.name)
    else:
        raise ValueError(f"Unknown board strategy: {source.strategy}")

    log_parse_report(report)
    return BoardResult(source=source, entries=entries, report=report)


def scrape_boards(sources: Optional[List[BoardSource]] = None, fetcher=None) -> List[BoardResult]:
    """Scrape every source; a fetch failure is recorded on that source's result only."""
    fetcher = fetcher or HttpFetcher()
    results = []
    for source in sources or default_sources():
        try:
            results.append(scrape_board(source, fetcher))
        except FetchError as e:
            logger.error(f"{source.name}: {e}")
            results.append(BoardResult(source=source, error=e))
    return results
