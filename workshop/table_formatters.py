"""
Table Formatters Module

Markdown tables for console output:
- Team efficiency by season
- EPA stability regressions
- Draft board comparison
- Scrape and join reports
"""

from typing import List, Optional
import polars as pl
from prettytable import PrettyTable, TableStyle
from .constants import DEFAULT_TOP_N, PARSE_FAILURE_SAMPLES
from .errors import JoinMismatch
from .reconciler import Reconciliation

METRIC_LABELS = {
    "epa_per_pass": "EPA/Pass",
    "epa_per_rush": "EPA/Rush",
}


def _fmt(value, digits: int = 3) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, float):
        return f"{value:.{digits}f}"
    return str(value)


def _markdown_table(field_names: List[str], title: Optional[str] = None) -> PrettyTable:
    table = PrettyTable()
    if title:
        table.title = title
    table.field_names = field_names
    table.align = "l"
    table.set_style(TableStyle.MARKDOWN)
    return table


def format_team_metrics(metrics: pl.DataFrame, season: Optional[int] = None) -> str:
    """Per-team efficiency table, best passing offense first."""
    rows = metrics if season is None else metrics.filter(pl.col("season") == season)
    rows = rows.sort(["role", "epa_per_pass"], descending=[True, True], nulls_last=True)

    table = _markdown_table(["Season", "Team", "Role", "Plays", "Passes", "Rushes", "Pass Rate", "EPA/Pass", "EPA/Rush"])
    for row in rows.iter_rows(named=True):
        table.add_row([
            row["season"], row["team"].upper(), row["role"], row["plays"], row["passes"], row["rushes"],
            _fmt(row["pass_rate"]), _fmt(row["epa_per_pass"]), _fmt(row["epa_per_rush"]),
        ])
    return table.get_string()


def format_stability_table(stability: pl.DataFrame) -> str:
    """Year-over-year regressions, most predictive first."""
    table = _markdown_table(["Role", "Target", "Prior-Season Predictor", "N", "Slope", "R²", "p-value"])
    for row in stability.iter_rows(named=True):
        table.add_row([
            row["role"],
            METRIC_LABELS.get(row["target"], row["target"]),
            METRIC_LABELS.get(row["predictor"], row["predictor"]),
            row["n"],
            _fmt(row["slope"]),
            _fmt(row["r_squared"]),
            f"{row['p_value']:.2g}",
        ])
    return table.get_string()


def format_reconciliation(reconciliation: Reconciliation, top_n: int = DEFAULT_TOP_N) -> str:
    """Largest rank disagreements between two boards."""
    mismatch = reconciliation.mismatch
    table = _markdown_table(["Player", "Pos", mismatch.left_source, mismatch.right_source, "Diff"])
    for row in reconciliation.table.head(top_n).iter_rows(named=True):
        table.add_row([
            row["player_name"], row["position"] or "", row["left_rank"],
            _fmt(row["right_rank"]), _fmt(row["rank_diff"]),
        ])
    return table.get_string()


def format_join_mismatch(mismatch: JoinMismatch, sample: int = 5) -> str:
    table = _markdown_table(["Only On", "Count", "Examples"])
    table.add_row([mismatch.left_source, mismatch.unmatched_left_count, ", ".join(mismatch.unmatched_left[:sample])])
    table.add_row([mismatch.right_source, mismatch.unmatched_right_count, ", ".join(mismatch.unmatched_right[:sample])])
    return table.get_string()


def format_scrape_report(results) -> str:
    """One line per board: fetch status, parsed entries and parse failures."""
    table = _markdown_table(["Source", "Status", "Parsed", "Blank Rows", "Failures", "Sample Failure"])
    for result in results:
        if result.error is not None:
            table.add_row([result.source.name, f"fetch failed: {result.error}", 0, 0, 0, ""])
            continue
        report = result.report
        samples = report.samples(PARSE_FAILURE_SAMPLES)
        table.add_row([
            result.source.name, "ok", report.parsed, report.skipped_blank,
            report.failure_count, samples[0] if samples else "",
        ])
    return table.get_string()
