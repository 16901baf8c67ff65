"""Unit tests for chart rendering (pandas summaries, no SparkSession)."""

import pandas as pd
import pytest


class TestChartCatalogue:
    def test_chart_names_are_unique(self):
        from bikeshare.viz.charts import CHARTS

        names = [spec.name for spec in CHARTS]
        assert len(names) == len(set(names))

    def test_required_charts_present(self):
        from bikeshare.viz.charts import CHARTS

        names = {spec.name for spec in CHARTS}
        for name in [
            "avg_ride_length_by_weekday",
            "ride_count_by_weekday",
            "ride_count_by_user_type",
            "ride_count_by_month",
            "ride_count_by_bike_type",
        ]:
            assert name in names

    def test_chart_keys_are_valid(self):
        from bikeshare.jobs.aggregation import GROUPING_KEYS
        from bikeshare.viz.charts import CHARTS

        for spec in CHARTS:
            assert spec.x in spec.keys
            assert set(spec.keys) <= set(GROUPING_KEYS)

    def test_get_chart_spec(self):
        from bikeshare.viz.charts import get_chart_spec

        assert get_chart_spec("ride_count_by_month").x == "month"
        with pytest.raises(KeyError):
            get_chart_spec("ride_count_by_planet")


class TestCategoryOrder:
    def test_weekdays_in_calendar_order(self):
        from bikeshare.viz.charts import category_order

        pdf = pd.DataFrame({"day_of_week": ["Saturday", "Monday", "Sunday"]})
        assert category_order(pdf, "day_of_week") == ["Sunday", "Monday", "Saturday"]

    def test_months_in_calendar_order(self):
        from bikeshare.viz.charts import category_order

        pdf = pd.DataFrame({"month": ["Dec", "Feb", "Jan"]})
        assert category_order(pdf, "month") == ["Jan", "Feb", "Dec"]

    def test_member_before_casual(self):
        from bikeshare.viz.charts import category_order

        pdf = pd.DataFrame({"member_casual": ["casual", "member"]})
        assert category_order(pdf, "member_casual") == ["member", "casual"]

    def test_other_columns_sorted(self):
        from bikeshare.viz.charts import category_order

        pdf = pd.DataFrame({"rideable_type": ["electric_bike", "classic_bike", None]})
        assert category_order(pdf, "rideable_type") == ["classic_bike", "electric_bike"]


class TestRenderChart:
    def test_writes_png(self, tmp_path):
        from bikeshare.viz.charts import get_chart_spec, render_chart

        summary = pd.DataFrame({
            "member_casual": ["member", "member", "casual"],
            "day_of_week_num": [1, 2, 1],
            "day_of_week": ["Sunday", "Monday", "Sunday"],
            "ride_count": [3, 1, 2],
            "mean_ride_length": [12.5, 8.0, float("nan")],
        })

        path = render_chart(
            summary, get_chart_spec("avg_ride_length_by_weekday"), str(tmp_path)
        )

        assert path == tmp_path / "avg_ride_length_by_weekday.png"
        assert path.exists()
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_without_hue(self, tmp_path):
        from bikeshare.viz.charts import get_chart_spec, render_chart

        summary = pd.DataFrame({
            "member_casual": ["member", "casual"],
            "ride_count": [10, 4],
        })

        path = render_chart(summary, get_chart_spec("ride_count_by_user_type"), str(tmp_path))

        assert path.exists()

    def test_empty_summary_skipped(self, tmp_path):
        from bikeshare.viz.charts import get_chart_spec, render_chart

        spec = get_chart_spec("ride_count_by_month")
        empty = pd.DataFrame(columns=["member_casual", "month_num", "month", "ride_count"])

        assert render_chart(empty, spec, str(tmp_path)) is None
        assert not (tmp_path / spec.filename).exists()
