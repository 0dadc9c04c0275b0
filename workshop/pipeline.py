"""
End-to-end runs behind main.py: EPA stability study, draft board comparison,
and basketball shot extraction. Each step runs once, in order.
"""

from typing import List, Optional, Tuple

import polars as pl

from .logger import get_logger
from .constants import START_YEAR, END_YEAR
from .play_by_play import PlayByPlayLoader
from .efficiency_metrics import aggregate_team_epa
from .stability import add_prior_season, fit_stability
from .draft_boards import BoardResult, BoardSource, scrape_boards
from .reconciler import Reconciliation, reconcile_boards
from .basketball import BasketballLoader, extract_shots, team_game_ids

logger = get_logger(__name__)


def run_epa_study(start_year: Optional[int] = None, end_year: Optional[int] = None,
                  loader: Optional[PlayByPlayLoader] = None) -> Tuple[pl.DataFrame, pl.DataFrame, pl.DataFrame]:
    """
    Aggregate team EPA for a season range and measure its year-over-year stability.

    Returns:
        (metrics, lagged metrics, stability regressions)
    """
    start_year = start_year if start_year is not None else START_YEAR
    end_year = end_year if end_year is not None else END_YEAR
    if end_year < start_year:
        raise ValueError(f"end year {end_year} is before start year {start_year}")

    loader = loader or PlayByPlayLoader()
    logger.info(f"Starting EPA stability study for {start_year}-{end_year}")

    pbp = loader.load_seasons(range(start_year, end_year + 1))
    metrics = aggregate_team_epa(pbp)
    lagged = add_prior_season(metrics)
    stability = fit_stability(lagged)
    return metrics, lagged, stability


def run_board_comparison(sources: Optional[List[BoardSource]] = None,
                         fetcher=None) -> Tuple[List[BoardResult], Optional[Reconciliation]]:
    """
    Scrape the boards and reconcile the first two that came back.

    Returns:
        (per-board results, reconciliation or None when fewer than two boards were scraped)
    """
    results = scrape_boards(sources, fetcher)
    usable = [result for result in results if result.ok]
    if len(usable) < 2:
        logger.error(f"Only {len(usable)} of {len(results)} boards scraped; skipping comparison")
        return results, None

    reconciliation = reconcile_boards(usable[0].entries, usable[1].entries)
    return results, reconciliation


def run_basketball(team: str, season: int, loader: Optional[BasketballLoader] = None) -> pl.DataFrame:
    """Shots taken in every game the team played in a season."""
    loader = loader or BasketballLoader()
    schedule = loader.load_schedule(season)
    game_ids = team_game_ids(schedule, team)
    if not game_ids:
        logger.warning(f"No {season} games found for {team}")

    pbp = loader.load_pbp(season)
    shots = extract_shots(pbp, game_ids=game_ids)
    logger.info(f"Extracted {shots.height} shots for {team} games in {season}")
    return shots
