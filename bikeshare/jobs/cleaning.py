"""
Trip Cleaning
=============

Turns loaded TripRecords into CleanedTripRecords.

Rules, applied uniformly to every row:
    - Rows with a null or blank start/end station name are removed
    - ride_length = ended_at - started_at, in minutes (plain subtraction)
    - Rows with ride_length < 0 (or undefined) are removed
    - member_casual / rideable_type are trimmed and lower-cased
    - hour, weekday and month fields are derived from started_at
"""

from __future__ import annotations

import logging
from typing import Dict

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F

from bikeshare.models.calendar import derive_time_fields

logger = logging.getLogger(__name__)

STATION_COLUMNS = ["start_station_name", "end_station_name"]
CATEGORICAL_COLUMNS = ["rideable_type", "member_casual"]


def _is_present(column: str) -> Column:
    return F.col(column).isNotNull() & (F.trim(F.col(column)) != "")


def _stations_present() -> Column:
    condition = F.lit(True)
    for column in STATION_COLUMNS:
        condition = condition & _is_present(column)
    return condition


def _ride_length_minutes() -> Column:
    return (
        F.unix_timestamp("ended_at") - F.unix_timestamp("started_at")
    ) / 60.0


def filter_missing_stations(df: DataFrame) -> DataFrame:
    """Remove trips without both a start and an end station name."""
    return df.filter(_stations_present())


def add_ride_length(df: DataFrame) -> DataFrame:
    """Add ride_length (minutes between started_at and ended_at)."""
    return df.withColumn("ride_length", _ride_length_minutes())


def filter_negative_rides(df: DataFrame) -> DataFrame:
    """Keep trips whose ride_length is defined and non-negative."""
    return df.filter(F.col("ride_length") >= 0)


def normalize_categories(df: DataFrame) -> DataFrame:
    for column in CATEGORICAL_COLUMNS:
        df = df.withColumn(column, F.lower(F.trim(F.col(column))))
    return df


def clean_trips(df: DataFrame) -> DataFrame:
    """
    Apply the cleaning rules to loaded trips.

    Args:
        df: DataFrame in TripRecord schema

    Returns:
        DataFrame in CleanedTripRecord schema
    """
    cleaned = filter_missing_stations(df)
    cleaned = add_ride_length(cleaned)
    cleaned = filter_negative_rides(cleaned)
    cleaned = normalize_categories(cleaned)
    return derive_time_fields(cleaned, "started_at")


def rejection_breakdown(df: DataFrame) -> Dict[str, int]:
    """
    Count the rows clean_trips would drop, by reason.

    Rows missing a station are counted once under missing_station even if
    their duration is also invalid.

    Args:
        df: DataFrame in TripRecord schema

    Returns:
        Dictionary with missing_station and invalid_ride_length counts
    """
    stations_ok = _stations_present()
    length = _ride_length_minutes()

    row = df.agg(
        F.sum(F.when(~stations_ok, 1).otherwise(0)).alias("missing_station"),
        F.sum(
            F.when(stations_ok & ~F.coalesce(length >= 0, F.lit(False)), 1).otherwise(0)
        ).alias("invalid_ride_length"),
    ).first()

    breakdown = {
        "missing_station": int(row["missing_station"] or 0),
        "invalid_ride_length": int(row["invalid_ride_length"] or 0),
    }

    logger.info(
        f"Rejections: {breakdown['missing_station']:,} missing station, "
        f"{breakdown['invalid_ride_length']:,} invalid ride length"
    )

    return breakdown
