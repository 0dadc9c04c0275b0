"""
Year-over-year stability of team efficiency.

Each team-season row is paired with the same team and role's values from the
immediately preceding season, then every (target, predictor) combination of
EPA metrics is fit with ordinary least squares. R-squared of current season on
prior season is the stability measure.
"""

import numpy as np
import polars as pl
from scipy import stats
from typing import Sequence
from .logger import get_logger
from .constants import EPA_METRICS, MIN_REGRESSION_SAMPLES

logger = get_logger(__name__)

STABILITY_SCHEMA = {
    "role": pl.Utf8,
    "target": pl.Utf8,
    "predictor": pl.Utf8,
    "n": pl.Int64,
    "slope": pl.Float64,
    "intercept": pl.Float64,
    "r_squared": pl.Float64,
    "p_value": pl.Float64,
}


def prior_column(metric: str) -> str:
    return f"prior_{metric}"


def add_prior_season(metrics: pl.DataFrame, metric_names: Sequence[str] = EPA_METRICS) -> pl.DataFrame:
    """
    Attach last season's values for the same team and role.

    The prior season is matched on season - 1, so a team's first season and any
    season following a gap get null prior values.
    """
    prior = (
        metrics.select(["team", "role", "season", *metric_names])
        .with_columns((pl.col("season") + 1).alias("season"))
        .rename({metric: prior_column(metric) for metric in metric_names})
    )

    lagged = metrics.join(prior, on=["team", "role", "season"], how="left")
    return lagged.sort(["team", "role", "season"])


def fit_stability(lagged: pl.DataFrame, metric_names: Sequence[str] = EPA_METRICS) -> pl.DataFrame:
    """
    Regress current-season metrics on prior-season metrics per role.

    Args:
        lagged: Output of add_prior_season
        metric_names: Metrics used both as targets and as predictors

    Returns:
        One row per (role, target, predictor) with n, slope, intercept,
        r_squared and p_value, sorted by r_squared descending
    """
    results = []
    roles = sorted(lagged["role"].unique().to_list()) if lagged.height else []

    for role in roles:
        role_rows = lagged.filter(pl.col("role") == role)
        for target in metric_names:
            for predictor in metric_names:
                pairs = (
                    role_rows.select([
                        pl.col(prior_column(predictor)).cast(pl.Float64).alias("x"),
                        pl.col(target).cast(pl.Float64).alias("y"),
                    ])
                    .drop_nulls()
                    .filter(pl.col("x").is_finite() & pl.col("y").is_finite())
                )

                if pairs.height < MIN_REGRESSION_SAMPLES:
                    logger.warning(
                        f"Skipping {role} {target} ~ prior {predictor}: "
                        f"{pairs.height} complete pairs (need {MIN_REGRESSION_SAMPLES})"
                    )
                    continue

                x = pairs["x"].to_numpy()
                y = pairs["y"].to_numpy()
                if np.ptp(x) == 0:
                    logger.warning(f"Skipping {role} {target} ~ prior {predictor}: predictor is constant")
                    continue

                fit = stats.linregress(x, y)
                results.append({
                    "role": role,
                    "target": target,
                    "predictor": predictor,
                    "n": pairs.height,
                    "slope": float(fit.slope),
                    "intercept": float(fit.intercept),
                    "r_squared": float(fit.rvalue) ** 2,
                    "p_value": float(fit.pvalue),
                })

    logger.info(f"Fit {len(results)} stability regressions")
    if not results:
        return pl.DataFrame(schema=STABILITY_SCHEMA)

    return pl.DataFrame(results, schema=STABILITY_SCHEMA).sort(
        ["r_squared", "role", "target", "predictor"], descending=[True, False, False, False]
    )
