"""
Team efficiency metrics built from play-by-play.

Each (season, team, role) row carries play counts split into passes and rushes
and the mean EPA of each play type. Offense rows group on the possession team,
defense rows on the defending team.
"""

import polars as pl
from .logger import get_logger
from .constants import ROLES
from .play_by_play import filter_eligible_plays

logger = get_logger(__name__)

METRIC_COLUMNS = ["season", "team", "role", "plays", "passes", "rushes", "pass_rate", "epa_per_pass", "epa_per_rush"]

ROLE_TEAM_COLUMN = {
    "Offense": "posteam",
    "Defense": "defteam",
}


def _aggregate_role(plays: pl.DataFrame, role: str) -> pl.DataFrame:
    team_col = ROLE_TEAM_COLUMN[role]
    is_pass = pl.col("play_type") == "pass"
    is_run = pl.col("play_type") == "run"

    return (
        plays.group_by(["season", team_col])
        .agg([
            pl.len().cast(pl.Int64).alias("plays"),
            is_pass.sum().cast(pl.Int64).alias("passes"),
            is_run.sum().cast(pl.Int64).alias("rushes"),
            # mean over an empty selection is null, so a team without passes has no EPA/pass
            pl.col("epa").filter(is_pass).mean().cast(pl.Float64).alias("epa_per_pass"),
            pl.col("epa").filter(is_run).mean().cast(pl.Float64).alias("epa_per_rush"),
        ])
        .rename({team_col: "team"})
        .with_columns([
            pl.lit(role).alias("role"),
            (pl.col("passes") / pl.col("plays")).alias("pass_rate"),
        ])
        .select(METRIC_COLUMNS)
    )


def aggregate_team_epa(pbp: pl.DataFrame) -> pl.DataFrame:
    """
    Reduce play-by-play rows to per-team-season efficiency for offense and defense.

    Args:
        pbp: Play-by-play with season, posteam, defteam, down, play_type, penalty, epa

    Returns:
        DataFrame with METRIC_COLUMNS, sorted by season, team, role.
        epa_per_pass / epa_per_rush are null when the group has no plays of that type.
    """
    plays = filter_eligible_plays(pbp)
    logger.info(f"Aggregating {plays.height} eligible plays out of {pbp.height}")

    metrics = pl.concat([_aggregate_role(plays, role) for role in ROLES], how="vertical")
    metrics = metrics.sort(["season", "team", "role"])

    missing = metrics.filter(pl.col("epa_per_pass").is_null() | pl.col("epa_per_rush").is_null())
    if missing.height > 0:
        logger.warning(f"{missing.height} team-seasons have no passes or no rushes; their EPA mean is null")

    return metrics
