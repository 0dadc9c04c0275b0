"""
Handles loading and filtering of football play-by-play data.
Seasons are read from a local parquet cache when present and from nflreadpy otherwise.
"""

import polars as pl
from pathlib import Path
from typing import Dict, Iterable, Optional
from .logger import get_logger
from .constants import CACHE_DIR, PBP_COLUMNS, ELIGIBLE_PLAY_TYPES
from .errors import FetchError

logger = get_logger(__name__)


class PlayByPlayLoader:
    def __init__(self, cache_dir: Optional[Path] = None, use_cache: bool = True):
        """Initialize the loader. Set use_cache=False to always hit nflreadpy."""
        self.pbp_cache: Dict[int, pl.DataFrame] = {}
        self.cache_dir = Path(cache_dir) if cache_dir is not None else Path(CACHE_DIR) / "pbp"
        self.use_cache = use_cache

    def cache_path(self, year: int) -> Path:
        return self.cache_dir / f"pbp_{year}.parquet"

    def load_season(self, year: int) -> pl.DataFrame:
        """
        Load regular-season play-by-play for a single year.
        Tries memory, then the parquet cache, then nflreadpy (writing the cache afterwards).
        """
        if year in self.pbp_cache:
            return self.pbp_cache[year]

        cache_path = self.cache_path(year)
        if self.use_cache and cache_path.exists():
            logger.info(f"Loading play-by-play data for {year} from cache...")
            pbp_data = pl.read_parquet(cache_path)
            self.pbp_cache[year] = pbp_data
            logger.info(f"Loaded {pbp_data.height} plays for {year} from cache")
            return pbp_data

        pbp_data = self._fetch_season(year)

        if self.use_cache:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            pbp_data.write_parquet(cache_path)
            logger.info(f"Cached {year} play-by-play to {cache_path}")

        self.pbp_cache[year] = pbp_data
        return pbp_data

    def _fetch_season(self, year: int) -> pl.DataFrame:
        import nflreadpy as nfl

        logger.info(f"Loading play-by-play data for {year} from nflreadpy...")
        try:
            pbp_data = nfl.load_pbp(seasons=year)
        except Exception as e:
            raise FetchError(f"nflreadpy:pbp:{year}", f"Play-by-play download failed: {e}") from e

        if "season_type" in pbp_data.columns:
            pbp_data = pbp_data.filter(pl.col("season_type") == "REG")

        keep = [col for col in PBP_COLUMNS if col in pbp_data.columns]
        pbp_data = pbp_data.select(keep)
        logger.info(f"Loaded {pbp_data.height} plays for {year}")
        return pbp_data

    def load_seasons(self, years: Iterable[int]) -> pl.DataFrame:
        """Load and stack several seasons into one frame."""
        frames = []
        for year in years:
            season = self.load_season(year)
            frames.append(season.select([col for col in PBP_COLUMNS if col in season.columns]))

        if not frames:
            return pl.DataFrame(schema={col: pl.Utf8 for col in PBP_COLUMNS})

        return pl.concat(frames, how="diagonal_relaxed")


def filter_eligible_plays(pbp: pl.DataFrame) -> pl.DataFrame:
    """
    Keep plays usable for team efficiency: both teams and EPA known,
    a real down, no penalty on the play, and a pass or run play type.
    """
    return pbp.filter(
        pl.col("posteam").is_not_null()
        & pl.col("defteam").is_not_null()
        & pl.col("epa").is_not_null()
        & pl.col("down").is_not_null()
        & (pl.col("penalty") == 0)
        & pl.col("play_type").is_in(list(ELIGIBLE_PLAY_TYPES))
    )
