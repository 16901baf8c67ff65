"""Unit tests for data schemas."""

import pytest
from pyspark.sql.types import (
    DoubleType,
    IntegerType,
    StringType,
    TimestampType,
)


class TestTripRecordSchema:
    """Tests for the raw trip schema."""

    def test_schema_has_trip_fields(self):
        """Verify schema contains exactly the analysed trip fields."""
        from bikeshare.models.schemas import TRIP_RECORD_SCHEMA, get_schema_field_names

        assert get_schema_field_names(TRIP_RECORD_SCHEMA) == [
            "ride_id",
            "rideable_type",
            "started_at",
            "ended_at",
            "start_station_name",
            "end_station_name",
            "member_casual",
        ]

    def test_schema_field_types(self):
        """Verify timestamps are TimestampType and the rest strings."""
        from bikeshare.models.schemas import TRIP_RECORD_SCHEMA

        field_types = {field.name: field.dataType for field in TRIP_RECORD_SCHEMA.fields}

        assert isinstance(field_types["started_at"], TimestampType)
        assert isinstance(field_types["ended_at"], TimestampType)
        assert isinstance(field_types["member_casual"], StringType)
        assert isinstance(field_types["start_station_name"], StringType)

    def test_timestamp_field_names(self):
        from bikeshare.models.schemas import TRIP_RECORD_SCHEMA, get_timestamp_field_names

        assert get_timestamp_field_names(TRIP_RECORD_SCHEMA) == ["started_at", "ended_at"]


class TestCleanedTripSchema:
    """Tests for the cleaned trip schema."""

    def test_extends_trip_record(self):
        """Verify cleaned schema keeps every raw field."""
        from bikeshare.models.schemas import (
            CLEANED_TRIP_SCHEMA,
            TRIP_RECORD_SCHEMA,
            get_schema_field_names,
        )

        cleaned = get_schema_field_names(CLEANED_TRIP_SCHEMA)
        for name in get_schema_field_names(TRIP_RECORD_SCHEMA):
            assert name in cleaned

    def test_derived_field_types(self):
        """Verify derived fields and their types."""
        from bikeshare.models.schemas import CLEANED_TRIP_SCHEMA

        field_types = {field.name: field.dataType for field in CLEANED_TRIP_SCHEMA.fields}

        assert isinstance(field_types["ride_length"], DoubleType)
        assert isinstance(field_types["hour_of_day"], IntegerType)
        assert isinstance(field_types["day_of_week_num"], IntegerType)
        assert isinstance(field_types["day_of_week"], StringType)
        assert isinstance(field_types["month"], StringType)


class TestSummarySchemas:
    """Tests for summary fields."""

    def test_count_summary(self):
        from bikeshare.models.schemas import COUNT_SUMMARY_FIELDS

        assert [f.name for f in COUNT_SUMMARY_FIELDS] == ["ride_count"]

    def test_ride_length_summary(self):
        from bikeshare.models.schemas import RIDE_LENGTH_SUMMARY_FIELDS

        names = [f.name for f in RIDE_LENGTH_SUMMARY_FIELDS]
        assert names[0] == "ride_count"
        for stat in ["mean", "median", "std", "min", "max"]:
            assert f"{stat}_ride_length" in names

    def test_metric_values(self):
        from bikeshare.models.schemas import Metric

        assert Metric("ride_length") is Metric.RIDE_LENGTH
        assert Metric("count") is Metric.COUNT
        with pytest.raises(ValueError):
            Metric("revenue")
