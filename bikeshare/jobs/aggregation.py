"""
Trip Aggregation
================

Grouped summaries of cleaned trips.

Summaries are ordered by their grouping columns, so the result never
depends on input row order. Weekday and month keys are grouped and sorted
together with their numeric ordinal (day_of_week_num, month_num), giving
calendar order instead of alphabetical order.

Statistics skip nulls. A group with no non-null ride_length reports null
(NaN once converted to pandas) for mean/median/std/min/max.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

import pandas as pd
from pyspark.sql import DataFrame
from pyspark.sql import functions as F
from pyspark.sql.window import Window

from bikeshare.models.calendar import ORDINAL_COLUMNS
from bikeshare.models.schemas import Metric

logger = logging.getLogger(__name__)


GROUPING_KEYS = [
    "day_of_week",
    "month",
    "rideable_type",
    "member_casual",
    "hour_of_day",
]

RIDE_LENGTH_STATISTICS = [
    "mean_ride_length",
    "median_ride_length",
    "std_ride_length",
    "min_ride_length",
    "max_ride_length",
]


def _validate_keys(keys: Sequence[str]) -> List[str]:
    keys = list(keys)
    if not keys:
        raise ValueError("At least one grouping key is required")

    unknown = [key for key in keys if key not in GROUPING_KEYS]
    if unknown:
        raise ValueError(
            f"Unknown grouping key(s): {unknown}. "
            f"Must be among: {GROUPING_KEYS}"
        )

    if len(set(keys)) != len(keys):
        raise ValueError(f"Duplicate grouping keys: {keys}")

    return keys


def grouping_columns(keys: Sequence[str]) -> List[str]:
    """
    Expand grouping keys into the columns actually grouped and sorted on.

    Args:
        keys: Grouping keys, e.g. ["member_casual", "day_of_week"]

    Returns:
        Columns with ordinals placed before their labels, e.g.
        ["member_casual", "day_of_week_num", "day_of_week"]
    """
    columns = []
    for key in _validate_keys(keys):
        if key in ORDINAL_COLUMNS:
            columns.append(ORDINAL_COLUMNS[key])
        columns.append(key)
    return columns


def summarize_trips(
    df: DataFrame,
    keys: Sequence[str],
    metric: Metric = Metric.RIDE_LENGTH,
) -> DataFrame:
    """
    Produce one summary row per distinct combination of grouping keys.

    Args:
        df: Cleaned trips DataFrame
        keys: Grouping keys (subset of GROUPING_KEYS)
        metric: Metric.RIDE_LENGTH for count/mean/median/std/min/max,
            Metric.COUNT for ride counts only

    Returns:
        Summary DataFrame ordered by its grouping columns
    """
    metric = Metric(metric)
    columns = grouping_columns(keys)

    aggregations = [F.count(F.lit(1)).alias("ride_count")]
    if metric == Metric.RIDE_LENGTH:
        length = F.col("ride_length")
        aggregations += [
            F.avg(length).alias("mean_ride_length"),
            F.median(length).alias("median_ride_length"),
            F.stddev_samp(length).alias("std_ride_length"),
            F.min(length).alias("min_ride_length"),
            F.max(length).alias("max_ride_length"),
        ]

    logger.info(f"Summarizing {metric.value} by {list(keys)}")

    return (
        df
        .groupBy(*columns)
        .agg(*aggregations)
        .orderBy(*columns)
    )


def summary_to_pandas(summary_df: DataFrame) -> pd.DataFrame:
    """
    Collect a summary to pandas.

    Undefined statistics come back as NaN rather than None, and
    ride_count as a plain integer column.
    """
    pdf = summary_df.toPandas()

    stats = [column for column in RIDE_LENGTH_STATISTICS if column in pdf.columns]
    if stats:
        pdf[stats] = pdf[stats].astype("float64")
    if "ride_count" in pdf.columns:
        pdf["ride_count"] = pdf["ride_count"].astype("int64")

    return pdf


def describe_ride_length(df: DataFrame) -> Dict[str, Any]:
    """
    Overall descriptive statistics of cleaned trips.

    Args:
        df: Cleaned trips DataFrame

    Returns:
        Dictionary with count, mean, median, std, min, max of ride_length
        and the most common day_of_week (lowest weekday wins ties)
    """
    length = F.col("ride_length")

    row = df.agg(
        F.count(F.lit(1)).alias("count"),
        F.avg(length).alias("mean"),
        F.median(length).alias("median"),
        F.stddev_samp(length).alias("std"),
        F.min(length).alias("min"),
        F.max(length).alias("max"),
    ).first()

    description = {"count": int(row["count"])}
    for stat in ["mean", "median", "std", "min", "max"]:
        value = row[stat]
        description[stat] = float("nan") if value is None else float(value)

    ranked = (
        df
        .groupBy("day_of_week_num", "day_of_week")
        .count()
        .withColumn(
            "rank",
            F.row_number().over(
                Window.orderBy(F.col("count").desc(), F.col("day_of_week_num"))
            ),
        )
        .filter(F.col("rank") == 1)
        .first()
    )
    description["mode_day_of_week"] = ranked["day_of_week"] if ranked else None

    logger.info(
        f"Ride length: n={description['count']:,}, "
        f"mean={description['mean']:.2f} min, max={description['max']:.2f} min"
    )

    return description
