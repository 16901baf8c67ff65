"""
PySpark Jobs
============

Steps of the trip analysis pipeline.

Jobs:
    - ingestion: Loads trip CSV files into the TripRecord schema
    - cleaning: Station / duration filters and derived fields
    - aggregation: Grouped summaries and descriptive statistics
    - trip_analysis: Runs load, clean, aggregate and render in sequence
"""

from bikeshare.jobs.ingestion import (
    TripDataLoadError,
    discover_trip_files,
    header_columns,
    read_raw_trips,
    load_trips,
)
from bikeshare.jobs.cleaning import (
    filter_missing_stations,
    add_ride_length,
    filter_negative_rides,
    clean_trips,
    rejection_breakdown,
)
from bikeshare.jobs.aggregation import (
    GROUPING_KEYS,
    grouping_columns,
    summarize_trips,
    summary_to_pandas,
    describe_ride_length,
)
from bikeshare.jobs.trip_analysis import run_trip_analysis

__all__ = [
    # Ingestion
    "TripDataLoadError",
    "discover_trip_files",
    "header_columns",
    "read_raw_trips",
    "load_trips",
    # Cleaning
    "filter_missing_stations",
    "add_ride_length",
    "filter_negative_rides",
    "clean_trips",
    "rejection_breakdown",
    # Aggregation
    "GROUPING_KEYS",
    "grouping_columns",
    "summarize_trips",
    "summary_to_pandas",
    "describe_ride_length",
    # Orchestration
    "run_trip_analysis",
]
