"""
Data Models
===========

Trip schemas and calendar reference data.

Modules:
    - schemas: PySpark StructType definitions for raw, cleaned and summary data
    - calendar: Fixed weekday/month labels and time-field derivation
"""

from bikeshare.models.schemas import (
    TRIP_RECORD_SCHEMA,
    CLEANED_TRIP_SCHEMA,
    COUNT_SUMMARY_FIELDS,
    RIDE_LENGTH_SUMMARY_FIELDS,
    Metric,
    get_schema_field_names,
    get_timestamp_field_names,
)
from bikeshare.models.calendar import (
    DAY_NAMES,
    MONTH_NAMES,
    ORDINAL_COLUMNS,
    day_of_week_number,
    day_of_week_label,
    month_label,
    derive_time_fields,
)

__all__ = [
    # Schemas
    "TRIP_RECORD_SCHEMA",
    "CLEANED_TRIP_SCHEMA",
    "COUNT_SUMMARY_FIELDS",
    "RIDE_LENGTH_SUMMARY_FIELDS",
    "Metric",
    "get_schema_field_names",
    "get_timestamp_field_names",
    # Calendar
    "DAY_NAMES",
    "MONTH_NAMES",
    "ORDINAL_COLUMNS",
    "day_of_week_number",
    "day_of_week_label",
    "month_label",
    "derive_time_fields",
]
