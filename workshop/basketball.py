"""
Men's college basketball schedule and play-by-play, via sportsdataverse.

Only used to draw shot charts; the frames are passed through with light
filtering and no further modelling.
"""

import polars as pl
from typing import Iterable, List, Optional
from .logger import get_logger
from .errors import FetchError

logger = get_logger(__name__)

SCHEDULE_TEAM_COLUMNS = [
    "home_display_name", "away_display_name",
    "home_location", "away_location",
    "home_name", "away_name",
]

SHOT_COLUMNS = ["game_id", "team_id", "text", "coordinate_x", "coordinate_y", "score_value", "made"]

# ESPN stores free throws and untracked shots with sentinel coordinates far off the floor
MAX_COORDINATE = 100


def _as_polars(frame) -> pl.DataFrame:
    if isinstance(frame, pl.DataFrame):
        return frame
    return pl.from_pandas(frame)


class BasketballLoader:
    def __init__(self, source=None):
        """
        Args:
            source: Object exposing load_mbb_schedule / load_mbb_pbp
                (defaults to the sportsdataverse.mbb module)
        """
        self._source = source

    @property
    def source(self):
        if self._source is None:
            import sportsdataverse.mbb as mbb
            self._source = mbb
        return self._source

    def load_schedule(self, season: int) -> pl.DataFrame:
        logger.info(f"Loading men's basketball schedule for {season}...")
        try:
            schedule = self.source.load_mbb_schedule(seasons=[season], return_as_pandas=False)
        except Exception as e:
            raise FetchError(f"sportsdataverse:mbb_schedule:{season}", f"Schedule download failed: {e}") from e
        schedule = _as_polars(schedule)
        logger.info(f"Loaded {schedule.height} games for {season}")
        return schedule

    def load_pbp(self, season: int) -> pl.DataFrame:
        logger.info(f"Loading men's basketball play-by-play for {season}...")
        try:
            pbp = self.source.load_mbb_pbp(seasons=[season], return_as_pandas=False)
        except Exception as e:
            raise FetchError(f"sportsdataverse:mbb_pbp:{season}", f"Play-by-play download failed: {e}") from e
        pbp = _as_polars(pbp)
        logger.info(f"Loaded {pbp.height} plays for {season}")
        return pbp


def team_game_ids(schedule: pl.DataFrame, team: str) -> List[int]:
    """Game ids where the team appears as home or away (case-insensitive substring match)."""
    columns = [col for col in SCHEDULE_TEAM_COLUMNS if col in schedule.columns]
    if not columns:
        logger.warning("Schedule has no team name columns")
        return []

    id_column = "game_id" if "game_id" in schedule.columns else "id"
    needle = team.lower()
    matches = schedule.filter(
        pl.any_horizontal([pl.col(col).cast(pl.Utf8).str.to_lowercase().str.contains(needle, literal=True) for col in columns])
    )
    game_ids = sorted(matches[id_column].cast(pl.Int64).unique().to_list())
    logger.info(f"Found {len(game_ids)} games for {team}")
    return game_ids


def extract_shots(pbp: pl.DataFrame, game_ids: Optional[Iterable[int]] = None,
                  team_id: Optional[int] = None) -> pl.DataFrame:
    """
    Field-goal attempts with court coordinates and a boolean made flag.

    Free throws and plays with sentinel coordinates are left out.
    """
    shots = pbp.filter(
        pl.col("shooting_play").fill_null(False).cast(pl.Boolean)
        & pl.col("coordinate_x").is_not_null()
        & pl.col("coordinate_y").is_not_null()
        & (pl.col("coordinate_x").abs() <= MAX_COORDINATE)
        & (pl.col("coordinate_y").abs() <= MAX_COORDINATE)
        & ~pl.col("text").fill_null("").str.contains("Free Throw", literal=True)
    )

    if game_ids is not None:
        shots = shots.filter(pl.col("game_id").cast(pl.Int64).is_in(list(game_ids)))
    if team_id is not None:
        shots = shots.filter(pl.col("team_id").cast(pl.Int64) == team_id)

    shots = shots.with_columns(pl.col("scoring_play").fill_null(False).cast(pl.Boolean).alias("made"))
    if "score_value" not in shots.columns:
        shots = shots.with_columns(pl.lit(None, dtype=pl.Int64).alias("score_value"))

    return shots.select(SHOT_COLUMNS)
