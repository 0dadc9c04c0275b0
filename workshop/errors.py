"""
Error types and accumulated reports for the scraping and reconciliation steps.

FetchError aborts a single source, ParseError is collected per row into a
ParseReport, and JoinMismatch records entries a join could not pair up.
"""

from dataclasses import dataclass, field
from typing import List, Optional


class WorkshopError(Exception):
    """Base class for workshop failures."""


class FetchError(WorkshopError):
    """A page or data provider could not be fetched."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message} ({url})")


class ParseError(WorkshopError):
    """A single ranking entry could not be parsed."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {raw!r}")


@dataclass
class ParseReport:
    """Outcome of parsing one ranking source."""

    source: str
    parsed: int = 0
    skipped_blank: int = 0
    failures: List[ParseError] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def record(self, error: ParseError) -> None:
        self.failures.append(error)

    def samples(self, n: int = 3) -> List[str]:
        """First n failures as 'reason: raw' strings."""
        return [str(error) for error in self.failures[:n]]


@dataclass
class JoinMismatch:
    """Names on either side of a board join that found no partner."""

    left_source: str
    right_source: str
    unmatched_left: List[str] = field(default_factory=list)
    unmatched_right: List[str] = field(default_factory=list)

    @property
    def unmatched_left_count(self) -> int:
        return len(self.unmatched_left)

    @property
    def unmatched_right_count(self) -> int:
        return len(self.unmatched_right)

    @property
    def is_clean(self) -> bool:
        return not self.unmatched_left and not self.unmatched_right
