"""
Compares two draft boards player by player.

Every left-board prospect yields one row with both ranks and their absolute
difference; prospects that found no partner on either side are listed in a
JoinMismatch instead of disappearing.
"""

import re
import unicodedata
from dataclasses import dataclass

import polars as pl

from .logger import get_logger
from .constants import NAME_SUFFIXES
from .errors import JoinMismatch

logger = get_logger(__name__)

RECONCILED_SCHEMA = {
    "player_name": pl.Utf8,
    "position": pl.Utf8,
    "left_rank": pl.Int64,
    "right_rank": pl.Int64,
    "rank_diff": pl.Int64,
}


@dataclass
class Reconciliation:
    table: pl.DataFrame
    mismatch: JoinMismatch

    @property
    def matched(self) -> int:
        return self.table.filter(pl.col("right_rank").is_not_null()).height


def normalize_player_name(name: str) -> str:
    """
    Join key for player names: accents folded, lowercase, punctuation removed,
    generational suffixes dropped. "Marvin Harrison Jr." -> "marvin harrison"
    """
    if name is None:
        return ""
    folded = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    tokens = re.sub(r"[^a-z0-9\s]", "", folded.lower().replace("-", " ")).split()
    while len(tokens) > 1 and tokens[-1] in NAME_SUFFIXES:
        tokens.pop()
    return " ".join(tokens)


def _with_key(board: pl.DataFrame, normalize_names: bool) -> pl.DataFrame:
    if normalize_names:
        key = pl.col("player_name").map_elements(normalize_player_name, return_dtype=pl.Utf8)
    else:
        key = pl.col("player_name")
    return board.with_columns(key.alias("join_key"))


def _source_name(board: pl.DataFrame, default: str) -> str:
    if "source" in board.columns and board.height > 0:
        return board["source"][0]
    return default


def reconcile_boards(left: pl.DataFrame, right: pl.DataFrame, normalize_names: bool = True) -> Reconciliation:
    """
    Left join two boards on player name and rank their disagreements.

    Args:
        left: Board whose prospects all appear in the output
        right: Board looked up for each left prospect
        normalize_names: Match on normalize_player_name; False matches exact strings

    Returns:
        Reconciliation with a table sorted by rank_diff descending (unmatched rows last)
        and a JoinMismatch naming the unmatched prospects on each side
    """
    left_name = _source_name(left, "left")
    right_name = _source_name(right, "right")

    left_keyed = _with_key(left, normalize_names)
    right_keyed = _with_key(right, normalize_names)

    # scrape artifacts can list a prospect twice; keep their best rank
    right_unique = right_keyed.sort("overall_rank").unique(subset=["join_key"], keep="first", maintain_order=True)
    if right_unique.height < right_keyed.height:
        logger.warning(f"{right_name}: {right_keyed.height - right_unique.height} duplicate names collapsed")
    right_best = right_unique.select([pl.col("join_key"), pl.col("overall_rank").alias("right_rank")])

    joined = left_keyed.join(right_best, on="join_key", how="left")

    table = (
        joined.select([
            pl.col("player_name"),
            pl.col("position") if "position" in joined.columns else pl.lit(None, dtype=pl.Utf8).alias("position"),
            pl.col("overall_rank").cast(pl.Int64).alias("left_rank"),
            pl.col("right_rank").cast(pl.Int64),
        ])
        .with_columns((pl.col("left_rank") - pl.col("right_rank")).abs().alias("rank_diff"))
        .sort(["rank_diff", "left_rank"], descending=[True, False], nulls_last=True)
        .select(list(RECONCILED_SCHEMA))
    )

    left_keys = set(left_keyed["join_key"].to_list())
    right_keys = set(right_best["join_key"].to_list())
    mismatch = JoinMismatch(
        left_source=left_name,
        right_source=right_name,
        unmatched_left=[
            row["player_name"] for row in left_keyed.sort("overall_rank").iter_rows(named=True)
            if row["join_key"] not in right_keys
        ],
        unmatched_right=[
            row["player_name"] for row in right_unique.iter_rows(named=True)
            if row["join_key"] not in left_keys
        ],
    )

    reconciliation = Reconciliation(table=table, mismatch=mismatch)
    logger.info(
        f"Reconciled {left_name} vs {right_name}: {reconciliation.matched} matched, "
        f"{mismatch.unmatched_left_count} only on {left_name}, {mismatch.unmatched_right_count} only on {right_name}"
    )
    return reconciliation
