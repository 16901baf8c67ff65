"""
Trip Ingestion Job
==================

Loads raw trip CSV exports from a directory into one DataFrame.

Load characteristics:
    - Every file matching the pattern is read, in sorted order
    - Only the TripRecord columns are kept (extra columns are dropped)
    - Timestamps are parsed on load; an unparsable value aborts the run
    - A _source_file column records where each row came from
    - Any unreadable file, or a row with too few or too many fields,
      aborts the run with the file named

Usage:
    python -m bikeshare.jobs.ingestion --input-dir ./data/raw
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import reduce
from pathlib import Path
from typing import List, Optional, Tuple

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql import functions as F
from pyspark.sql.types import TimestampType

from bikeshare.models.schemas import (
    TRIP_RECORD_SCHEMA,
    get_schema_field_names,
    get_timestamp_field_names,
)

logger = logging.getLogger(__name__)

CSV_COLUMN_PRUNING = "spark.sql.csv.parser.columnPruning.enabled"


class TripDataLoadError(Exception):
    """A trip file could not be loaded into the expected schema."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        self.file_path = file_path
        if file_path:
            message = f"{file_path}: {message}"
        super().__init__(message)


def discover_trip_files(
    input_path: str,
    pattern: str = "*.csv",
) -> List[str]:
    """
    List trip files in a directory.

    Args:
        input_path: Directory containing trip exports
        pattern: Glob pattern for trip files

    Returns:
        Sorted list of file paths

    Raises:
        TripDataLoadError: If the directory is missing or holds no matching files
    """
    directory = Path(input_path)

    if not directory.is_dir():
        raise TripDataLoadError(f"Input directory not found: {directory}")

    files = sorted(str(path) for path in directory.glob(pattern) if path.is_file())

    if not files:
        raise TripDataLoadError(
            f"No files matching '{pattern}' in {directory}"
        )

    logger.info(f"Found {len(files)} trip file(s) in {directory}")
    return files


@contextmanager
def full_row_parsing(spark: SparkSession):
    """
    Parse every field of each CSV row while the block runs.

    With column pruning on, Spark tokenises only the selected columns, so
    FAILFAST never sees a row with too few or too many fields.
    """
    previous = spark.conf.get(CSV_COLUMN_PRUNING, None)
    spark.conf.set(CSV_COLUMN_PRUNING, "false")
    try:
        yield
    finally:
        if previous is None:
            spark.conf.unset(CSV_COLUMN_PRUNING)
        else:
            spark.conf.set(CSV_COLUMN_PRUNING, previous)


def header_columns(raw_df: DataFrame) -> List[str]:
    """Column names as Spark resolved them, without a UTF-8 BOM or padding."""
    return [name.lstrip("\ufeff").strip() for name in raw_df.columns]


def _parse_timestamp(column: str, timestamp_format: Optional[str]):
    if timestamp_format:
        return F.try_to_timestamp(F.col(column), F.lit(timestamp_format))
    return F.try_to_timestamp(F.col(column))


def read_raw_trips(
    spark: SparkSession,
    file_path: str,
    timestamp_format: Optional[str] = None,
) -> DataFrame:
    """
    Read one trip CSV file into the TripRecord schema.

    Args:
        spark: SparkSession
        file_path: Path to CSV file
        timestamp_format: Optional Spark datetime pattern for timestamps

    Returns:
        DataFrame with TripRecord columns plus _source_file

    Raises:
        TripDataLoadError: If the file is missing columns, has malformed
            rows or holds timestamps that do not parse
    """
    logger.info(f"Reading raw trips from: {file_path}")

    path = Path(file_path)
    if not path.is_file():
        raise TripDataLoadError("File not found", file_path)
    if path.stat().st_size == 0:
        raise TripDataLoadError("File is empty or has no header row", file_path)

    with full_row_parsing(spark):
        return _read_checked(spark, file_path, timestamp_format)


def _read_checked(
    spark: SparkSession,
    file_path: str,
    timestamp_format: Optional[str],
) -> DataFrame:
    # All columns are read as strings; typing happens after selection
    try:
        raw_df = (
            spark.read
            .option("header", "true")
            .option("mode", "FAILFAST")
            .option("ignoreLeadingWhiteSpace", "true")
            .option("ignoreTrailingWhiteSpace", "true")
            .csv(file_path)
        )
    except Exception as e:
        logger.error(f"Failed to read {file_path}: {e}")
        raise TripDataLoadError(f"Cannot read file: {e}", file_path) from e

    header = header_columns(raw_df)
    if not header:
        raise TripDataLoadError("File is empty or has no header row", file_path)

    required = get_schema_field_names(TRIP_RECORD_SCHEMA)
    missing = [name for name in required if name not in header]
    if missing:
        raise TripDataLoadError(f"Missing required columns: {missing}", file_path)

    raw_df = raw_df.toDF(*header)

    typed_columns = []
    for field in TRIP_RECORD_SCHEMA.fields:
        if isinstance(field.dataType, TimestampType):
            typed_columns.append(
                _parse_timestamp(field.name, timestamp_format).alias(field.name)
            )
        else:
            typed_columns.append(F.col(field.name).cast(field.dataType).alias(field.name))

    timestamp_columns = get_timestamp_field_names(TRIP_RECORD_SCHEMA)
    unparsed = reduce(
        lambda acc, name: acc | (
            (F.trim(F.col(name)) != "") & _parse_timestamp(name, timestamp_format).isNull()
        ),
        timestamp_columns,
        F.lit(False),
    )

    try:
        bad_timestamps = raw_df.filter(unparsed).count()
        df = (
            raw_df
            .select(*typed_columns)
            .withColumn("_source_file", F.lit(Path(file_path).name))
        )
        row_count = df.count()
    except Exception as e:
        logger.error(f"Failed to read {file_path}: {e}")
        raise TripDataLoadError(f"Cannot parse trip rows: {e}", file_path) from e

    if bad_timestamps:
        raise TripDataLoadError(
            f"{bad_timestamps:,} row(s) with unparsable {timestamp_columns} values",
            file_path,
        )

    logger.info(f"Read {row_count:,} rows from {file_path}")

    return df


def load_trips(
    spark: SparkSession,
    input_path: str,
    pattern: str = "*.csv",
    timestamp_format: Optional[str] = None,
) -> Tuple[DataFrame, List[str]]:
    """
    Load and concatenate every trip file in a directory.

    Args:
        spark: SparkSession
        input_path: Directory containing trip exports
        pattern: Glob pattern for trip files
        timestamp_format: Optional Spark datetime pattern for timestamps

    Returns:
        Tuple of (combined DataFrame, list of files loaded)
    """
    files = discover_trip_files(input_path, pattern)

    frames = [
        read_raw_trips(spark, file_path, timestamp_format=timestamp_format)
        for file_path in files
    ]

    trips_df = reduce(DataFrame.unionByName, frames)

    logger.info(f"Loaded {len(files)} file(s) from {input_path}")

    return trips_df, files


# Entry point for direct execution
if __name__ == "__main__":
    import argparse

    from bikeshare.utils.config import PipelineConfig
    from bikeshare.utils.spark_session import SparkSessionManager

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    parser = argparse.ArgumentParser(description="Trip Ingestion Job")
    parser.add_argument(
        "--input-dir",
        default=None,
        help="Directory with trip CSV files (defaults to configured input path)"
    )
    args = parser.parse_args()

    config = PipelineConfig.load()

    with SparkSessionManager(config, app_name="TripIngestion") as spark:
        trips, loaded = load_trips(
            spark,
            args.input_dir or config.storage.input_path,
            pattern=config.storage.file_pattern,
            timestamp_format=config.timestamp_format,
        )
        print(f"\nLoaded {trips.count():,} trips from {len(loaded)} file(s)")
