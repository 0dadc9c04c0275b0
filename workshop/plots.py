"""
Charts for the workshop: EPA stability scatter, board disagreement bars,
and basketball shot charts. Every function returns the matplotlib Figure and
saves it when a path is given.
"""

from pathlib import Path
from typing import Optional, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import polars as pl

from .logger import get_logger
from .constants import DEFAULT_TOP_N
from .reconciler import Reconciliation
from .stability import prior_column
from .table_formatters import METRIC_LABELS

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _save(fig, path: Optional[PathLike]) -> None:
    if path is None:
        return
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)
    logger.info(f"Saved chart to {path}")


def plot_epa_stability(lagged: pl.DataFrame, metric: str = "epa_per_pass", role: str = "Offense",
                       path: Optional[PathLike] = None):
    """Current vs prior season scatter with a least-squares trend line."""
    pairs = (
        lagged.filter(pl.col("role") == role)
        .select([pl.col(prior_column(metric)).alias("x"), pl.col(metric).alias("y")])
        .drop_nulls()
    )
    label = METRIC_LABELS.get(metric, metric)

    fig, ax = plt.subplots(figsize=(8, 6))
    ax.scatter(pairs["x"].to_numpy(), pairs["y"].to_numpy(), alpha=0.6, color="steelblue")

    if pairs.height >= 2 and pairs["x"].n_unique() > 1:
        x = pairs["x"].to_numpy()
        slope, intercept = np.polyfit(x, pairs["y"].to_numpy(), 1)
        grid = np.linspace(x.min(), x.max(), 50)
        ax.plot(grid, slope * grid + intercept, color="darkred", linewidth=2)

    ax.set_xlabel(f"Prior season {label}")
    ax.set_ylabel(f"Current season {label}")
    ax.set_title(f"{role} {label} year over year")
    fig.tight_layout()
    _save(fig, path)
    return fig


def plot_rank_differences(reconciliation: Reconciliation, top_n: int = DEFAULT_TOP_N,
                          path: Optional[PathLike] = None):
    """Horizontal bars for the prospects the two boards disagree on most."""
    rows = reconciliation.table.filter(pl.col("rank_diff").is_not_null()).head(top_n)
    mismatch = reconciliation.mismatch

    fig, ax = plt.subplots(figsize=(10, max(4, 0.3 * rows.height + 1)))
    ax.barh(rows["player_name"].to_list()[::-1], rows["rank_diff"].to_list()[::-1], color="slategray")
    ax.set_xlabel("Absolute rank difference")
    ax.set_title(f"{mismatch.left_source} vs {mismatch.right_source}")
    fig.tight_layout()
    _save(fig, path)
    return fig


def plot_shot_chart(shots: pl.DataFrame, title: str = "Shot chart", path: Optional[PathLike] = None):
    """Made shots in green, misses in red, on ESPN court coordinates."""
    fig, ax = plt.subplots(figsize=(10, 6))
    for made, color, label in ((True, "seagreen", "Made"), (False, "firebrick", "Missed")):
        subset = shots.filter(pl.col("made") == made)
        ax.scatter(subset["coordinate_x"].to_numpy(), subset["coordinate_y"].to_numpy(),
                   s=18, alpha=0.6, color=color, label=label)

    ax.set_aspect("equal")
    ax.legend(loc="upper right")
    ax.set_title(title)
    fig.tight_layout()
    _save(fig, path)
    return fig
