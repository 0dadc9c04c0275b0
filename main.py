"""
main.py

Runs the workshop analyses in order and prints Markdown tables:
1. Team EPA by season and its year-over-year stability
2. Comparison of two scraped draft big boards
3. (optional) Shot extraction for one college basketball team
"""

import argparse
import sys
from pathlib import Path

from workshop.logger import get_logger
from workshop.constants import DEFAULT_TOP_N, OUTPUT_DIR
from workshop.errors import FetchError
from workshop.pipeline import run_epa_study, run_board_comparison, run_basketball
from workshop.table_formatters import (
    format_team_metrics, format_stability_table, format_reconciliation,
    format_join_mismatch, format_scrape_report,
)

logger = get_logger(__name__)


def epa_section(args) -> bool:
    try:
        metrics, lagged, stability = run_epa_study(args.start_year, args.end_year)
    except FetchError as e:
        logger.error(f"EPA study aborted: {e}")
        return False

    latest = metrics["season"].max()
    print(f"\n## Team efficiency ({latest})\n")
    print(format_team_metrics(metrics, season=latest))
    print("\n## Year-over-year stability\n")
    print(format_stability_table(stability))

    if args.plots:
        from workshop.plots import plot_epa_stability
        for metric in ("epa_per_pass", "epa_per_rush"):
            plot_epa_stability(lagged, metric=metric, path=Path(args.output_dir) / f"{metric}_stability.png")
    return True


def boards_section(args) -> bool:
    results, reconciliation = run_board_comparison()
    print("\n## Draft board scrape\n")
    print(format_scrape_report(results))

    if reconciliation is None:
        return False

    print(f"\n## Biggest board disagreements (top {args.top})\n")
    print(format_reconciliation(reconciliation, top_n=args.top))
    print("\n## Unmatched prospects\n")
    print(format_join_mismatch(reconciliation.mismatch))

    if args.plots:
        from workshop.plots import plot_rank_differences
        plot_rank_differences(reconciliation, top_n=args.top, path=Path(args.output_dir) / "board_differences.png")
    return True


def basketball_section(args) -> bool:
    try:
        shots = run_basketball(args.basketball_team, args.basketball_season)
    except FetchError as e:
        logger.error(f"Basketball load aborted: {e}")
        return False

    made = shots["made"].sum()
    print(f"\n## {args.basketball_team} shots ({args.basketball_season})\n")
    print(f"{shots.height} field goal attempts, {made} made")

    if args.plots:
        from workshop.plots import plot_shot_chart
        slug = args.basketball_team.lower().replace(" ", "_")
        plot_shot_chart(shots, title=f"{args.basketball_team} {args.basketball_season}",
                        path=Path(args.output_dir) / f"{slug}_{args.basketball_season}_shots.png")
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Football efficiency and draft board workshop analyses")
    parser.add_argument("--start-year", type=int, help="First season of the EPA study (default: START_YEAR)")
    parser.add_argument("--end-year", type=int, help="Last season of the EPA study (default: END_YEAR)")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_N, help="Rows shown in the board comparison")
    parser.add_argument("--skip-epa", action="store_true", help="Skip the EPA stability study")
    parser.add_argument("--skip-boards", action="store_true", help="Skip the draft board comparison")
    parser.add_argument("--basketball-team", help="College basketball team to pull shots for")
    parser.add_argument("--basketball-season", type=int, help="Season for --basketball-team")
    parser.add_argument("--plots", action="store_true", help="Save charts to --output-dir")
    parser.add_argument("--output-dir", default=OUTPUT_DIR, help="Where charts are written")
    args = parser.parse_args(argv)

    if args.basketball_team and args.basketball_season is None:
        parser.error("--basketball-season is required with --basketball-team")

    ok = True
    if not args.skip_epa:
        ok = epa_section(args) and ok
    if not args.skip_boards:
        ok = boards_section(args) and ok
    if args.basketball_team:
        ok = basketball_section(args) and ok

    if not ok:
        logger.warning("Finished with at least one failed section")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
