"""
PySpark Schema Definitions
==========================

Defines StructType schemas for bike-share trip data.

Schemas:
    - TRIP_RECORD_SCHEMA: Raw trip row restricted to the analysed columns
    - CLEANED_TRIP_SCHEMA: Trip row with ride_length and time fields
    - RIDE_LENGTH_SUMMARY_FIELDS / COUNT_SUMMARY_FIELDS: Aggregate columns
    - Metric: The two summary kinds (ride_length statistics, counts)
"""

from enum import Enum

from pyspark.sql.types import (
    DoubleType,
    IntegerType,
    LongType,
    StringType,
    StructField,
    StructType,
    TimestampType,
)


# ============================================
# RAW DATA SCHEMAS
# ============================================

TRIP_RECORD_SCHEMA = StructType([
    StructField("ride_id", StringType(), True),
    StructField("rideable_type", StringType(), True),

    # Timestamps (local wall clock, no zone in source)
    StructField("started_at", TimestampType(), True),
    StructField("ended_at", TimestampType(), True),

    # Stations - often blank for dockless e-bike trips
    StructField("start_station_name", StringType(), True),
    StructField("end_station_name", StringType(), True),

    StructField("member_casual", StringType(), True),
])


# Lineage column added on load
SOURCE_FILE_FIELD = StructField("_source_file", StringType(), False)


# ============================================
# CLEANED DATA SCHEMA
# ============================================

CLEANED_TRIP_SCHEMA = StructType(
    TRIP_RECORD_SCHEMA.fields
    + [
        SOURCE_FILE_FIELD,
        StructField("ride_length", DoubleType(), True),  # minutes
        StructField("hour_of_day", IntegerType(), True),
        StructField("day_of_week_num", IntegerType(), True),  # 1=Sunday, 7=Saturday
        StructField("day_of_week", StringType(), True),
        StructField("month_num", IntegerType(), True),
        StructField("month", StringType(), True),
    ]
)


# ============================================
# SUMMARY SCHEMAS
# ============================================

class Metric(str, Enum):
    """What a summary reduces."""
    RIDE_LENGTH = "ride_length"
    COUNT = "count"


COUNT_SUMMARY_FIELDS = [
    StructField("ride_count", LongType(), False),
]

RIDE_LENGTH_SUMMARY_FIELDS = COUNT_SUMMARY_FIELDS + [
    StructField("mean_ride_length", DoubleType(), True),
    StructField("median_ride_length", DoubleType(), True),
    StructField("std_ride_length", DoubleType(), True),
    StructField("min_ride_length", DoubleType(), True),
    StructField("max_ride_length", DoubleType(), True),
]


# ============================================
# SCHEMA UTILITIES
# ============================================

def get_schema_field_names(schema: StructType) -> list[str]:
    """
    Get list of field names from a schema.

    Args:
        schema: PySpark StructType schema

    Returns:
        List of field names
    """
    return [field.name for field in schema.fields]


def get_timestamp_field_names(schema: StructType) -> list[str]:
    """Names of the TimestampType fields of a schema."""
    return [
        field.name
        for field in schema.fields
        if isinstance(field.dataType, TimestampType)
    ]
