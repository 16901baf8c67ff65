"""
Calendar Reference Data
=======================

Fixed weekday and month labelling for trip start times.

Labels never depend on the JVM or OS locale:
    - day_of_week_num: 1=Sunday, 2=Monday, ..., 7=Saturday
      (same numbering as Spark's dayofweek)
    - month_num: 1=Jan, ..., 12=Dec

The pure-Python helpers implement the same mapping as derive_time_fields
so single timestamps can be labelled outside Spark.
"""

from __future__ import annotations

from datetime import datetime

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F


# ============================================
# REFERENCE DATA
# ============================================

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

# Label column -> numeric column it is ordered by
ORDINAL_COLUMNS = {
    "day_of_week": "day_of_week_num",
    "month": "month_num",
}

TIME_FIELD_COLUMNS = [
    "hour_of_day",
    "day_of_week_num",
    "day_of_week",
    "month_num",
    "month",
]


# ============================================
# PYTHON HELPERS
# ============================================

def day_of_week_number(ts: datetime) -> int:
    """Sunday=1 .. Saturday=7 for a timestamp."""
    # isoweekday: Monday=1 .. Sunday=7
    return ts.isoweekday() % 7 + 1


def day_of_week_label(ts: datetime) -> str:
    return DAY_NAMES[day_of_week_number(ts) - 1]


def month_label(ts: datetime) -> str:
    return MONTH_NAMES[ts.month - 1]


# ============================================
# SPARK DERIVATION
# ============================================

def _label_for(ordinal: Column, labels: tuple) -> Column:
    """Look up a 1-based ordinal in a fixed label tuple."""
    return F.element_at(F.array(*[F.lit(label) for label in labels]), ordinal)


def derive_time_fields(
    df: DataFrame,
    column: str = "started_at",
) -> DataFrame:
    """
    Add hour, weekday and month fields derived from a timestamp column.

    Args:
        df: DataFrame with a TimestampType column
        column: Timestamp column to derive from

    Returns:
        DataFrame with hour_of_day, day_of_week_num, day_of_week,
        month_num and month columns
    """
    ts = F.col(column)

    return (
        df
        .withColumn("hour_of_day", F.hour(ts).cast("int"))
        .withColumn("day_of_week_num", F.dayofweek(ts).cast("int"))
        .withColumn("day_of_week", _label_for(F.col("day_of_week_num"), DAY_NAMES))
        .withColumn("month_num", F.month(ts).cast("int"))
        .withColumn("month", _label_for(F.col("month_num"), MONTH_NAMES))
    )
