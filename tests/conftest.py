"""
Pytest Configuration and Fixtures
==================================

Shared fixtures and configuration for all tests.
"""

import os
import sys

import pandas as pd
import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

TRIP_COLUMNS = [
    "ride_id",
    "rideable_type",
    "started_at",
    "ended_at",
    "start_station_name",
    "start_station_id",
    "end_station_name",
    "end_station_id",
    "start_lat",
    "start_lng",
    "end_lat",
    "end_lng",
    "member_casual",
]


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    os.environ["PIPELINE_ENV"] = "local"
    os.environ["DATA_PATH"] = "/tmp/test_data"
    os.environ["SPARK_MASTER"] = "local[2]"

    yield


def make_trip(
    ride_id,
    started_at,
    ended_at,
    start_station="Streeter Dr & Grand Ave",
    end_station="Clark St & Elm St",
    member_casual="member",
    rideable_type="classic_bike",
):
    """Build one raw trip row as it appears in a Divvy export."""
    return {
        "ride_id": ride_id,
        "rideable_type": rideable_type,
        "started_at": started_at,
        "ended_at": ended_at,
        "start_station_name": start_station,
        "start_station_id": "13022",
        "end_station_name": end_station,
        "end_station_id": "TA1307000039",
        "start_lat": "41.892278",
        "start_lng": "-87.612043",
        "end_lat": "41.902973",
        "end_lng": "-87.63128",
        "member_casual": member_casual,
    }


def write_trip_csv(path, rows, columns=None, encoding="utf-8"):
    """Write trip rows to a CSV file with a header (utf-8-sig adds a BOM)."""
    columns = columns or TRIP_COLUMNS
    pd.DataFrame(rows, columns=columns).to_csv(path, index=False, encoding=encoding)
    return str(path)


def append_csv_line(path, line):
    """Append one raw line, bypassing the CSV writer."""
    with open(path, "a") as handle:
        handle.write(line + "\n")


@pytest.fixture
def sample_trip_rows():
    """Raw trips covering each cleaning rule."""
    return [
        # Kept: 15 minutes, Sunday 2023-01-01
        make_trip("A1", "2023-01-01 10:00:00", "2023-01-01 10:15:00"),
        # Dropped: ends before it starts
        make_trip("A2", "2023-01-01 09:00:00", "2023-01-01 08:55:00"),
        # Dropped: no start station
        make_trip("A3", "2023-01-02 08:00:00", "2023-01-02 08:20:00", start_station=""),
        # Dropped: no end station
        make_trip("A4", "2023-01-02 08:00:00", "2023-01-02 08:20:00", end_station=""),
        # Kept: casual, electric, Monday, 30 minutes
        make_trip(
            "A5", "2023-01-02 17:30:00", "2023-01-02 18:00:00",
            member_casual="casual", rideable_type="electric_bike",
        ),
        # Kept: zero-length ride
        make_trip("A6", "2023-02-04 12:00:00", "2023-02-04 12:00:00", member_casual="casual"),
    ]


@pytest.fixture
def trip_dir(tmp_path, sample_trip_rows):
    """Directory with two monthly trip files."""
    directory = tmp_path / "raw"
    directory.mkdir()

    write_trip_csv(directory / "202301-divvy-tripdata.csv", sample_trip_rows[:5])
    write_trip_csv(directory / "202302-divvy-tripdata.csv", sample_trip_rows[5:])

    return directory
