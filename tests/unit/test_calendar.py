"""Unit tests for calendar labelling."""

from datetime import datetime

import pytest


class TestDayOfWeek:
    """Sunday=1 .. Saturday=7, English labels."""

    @pytest.mark.parametrize(
        "ts, number, label",
        [
            (datetime(2023, 1, 1, 10, 0), 1, "Sunday"),
            (datetime(2023, 1, 2, 0, 0), 2, "Monday"),
            (datetime(2023, 1, 4, 23, 59), 4, "Wednesday"),
            (datetime(2023, 1, 7, 12, 0), 7, "Saturday"),
        ],
    )
    def test_known_dates(self, ts, number, label):
        from bikeshare.models.calendar import day_of_week_label, day_of_week_number

        assert day_of_week_number(ts) == number
        assert day_of_week_label(ts) == label

    def test_every_weekday_labelled_once(self):
        """A full week maps onto all seven labels in order."""
        from bikeshare.models.calendar import DAY_NAMES, day_of_week_label

        week = [datetime(2023, 1, day) for day in range(1, 8)]
        assert tuple(day_of_week_label(ts) for ts in week) == DAY_NAMES


class TestMonth:
    def test_month_labels(self):
        from bikeshare.models.calendar import MONTH_NAMES, month_label

        labels = [month_label(datetime(2023, month, 15)) for month in range(1, 13)]
        assert tuple(labels) == MONTH_NAMES
        assert labels[0] == "Jan"
        assert labels[-1] == "Dec"


class TestOrdinals:
    def test_label_columns_have_ordinals(self):
        from bikeshare.models.calendar import ORDINAL_COLUMNS, TIME_FIELD_COLUMNS

        assert ORDINAL_COLUMNS == {"day_of_week": "day_of_week_num", "month": "month_num"}
        for label, ordinal in ORDINAL_COLUMNS.items():
            assert label in TIME_FIELD_COLUMNS
            assert ordinal in TIME_FIELD_COLUMNS
