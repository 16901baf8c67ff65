"""
Trip Charts
===========

Bar charts of grouped trip summaries, one PNG per analysis.

Each ChartSpec names the summary it needs (grouping keys + metric) and how
to draw it. File names are fixed, so a rerun overwrites the same images.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402

from bikeshare.models.schemas import Metric  # noqa: E402
from bikeshare.models.calendar import DAY_NAMES, MONTH_NAMES  # noqa: E402

logger = logging.getLogger(__name__)

USER_TYPE_ORDER = ["member", "casual"]


@dataclass(frozen=True)
class ChartSpec:
    """How to summarise and draw one chart."""
    name: str
    keys: Tuple[str, ...]
    metric: Metric
    x: str
    value: str
    title: str
    ylabel: str
    hue: Optional[str] = "member_casual"

    @property
    def filename(self) -> str:
        return f"{self.name}.png"


CHARTS = (
    ChartSpec(
        name="avg_ride_length_by_weekday",
        keys=("member_casual", "day_of_week"),
        metric=Metric.RIDE_LENGTH,
        x="day_of_week",
        value="mean_ride_length",
        title="Average Ride Length by Weekday",
        ylabel="Average ride length (minutes)",
    ),
    ChartSpec(
        name="ride_count_by_weekday",
        keys=("member_casual", "day_of_week"),
        metric=Metric.COUNT,
        x="day_of_week",
        value="ride_count",
        title="Total Rides by Weekday",
        ylabel="Number of rides",
    ),
    ChartSpec(
        name="ride_count_by_user_type",
        keys=("member_casual",),
        metric=Metric.COUNT,
        x="member_casual",
        value="ride_count",
        title="Total Rides by User Type",
        ylabel="Number of rides",
        hue=None,
    ),
    ChartSpec(
        name="ride_count_by_month",
        keys=("member_casual", "month"),
        metric=Metric.COUNT,
        x="month",
        value="ride_count",
        title="Total Rides by Month",
        ylabel="Number of rides",
    ),
    ChartSpec(
        name="ride_count_by_bike_type",
        keys=("member_casual", "rideable_type"),
        metric=Metric.COUNT,
        x="rideable_type",
        value="ride_count",
        title="Total Rides by Bike Type",
        ylabel="Number of rides",
    ),
    ChartSpec(
        name="avg_ride_length_by_month",
        keys=("member_casual", "month"),
        metric=Metric.RIDE_LENGTH,
        x="month",
        value="mean_ride_length",
        title="Average Ride Length by Month",
        ylabel="Average ride length (minutes)",
    ),
    ChartSpec(
        name="ride_count_by_hour",
        keys=("member_casual", "hour_of_day"),
        metric=Metric.COUNT,
        x="hour_of_day",
        value="ride_count",
        title="Total Rides by Hour of Day",
        ylabel="Number of rides",
    ),
)

AXIS_LABELS = {
    "day_of_week": "Day of week",
    "month": "Month",
    "member_casual": "User type",
    "rideable_type": "Bike type",
    "hour_of_day": "Hour of day",
}


def get_chart_spec(name: str) -> ChartSpec:
    for spec in CHARTS:
        if spec.name == name:
            return spec
    raise KeyError(f"Unknown chart: {name}")


def category_order(pdf: pd.DataFrame, column: str) -> List:
    """
    Axis order for a column: calendar order for weekdays and months,
    member before casual, sorted otherwise. Only values present are kept.
    """
    present = set(pdf[column].dropna())

    if column == "day_of_week":
        fixed = DAY_NAMES
    elif column == "month":
        fixed = MONTH_NAMES
    elif column == "member_casual":
        fixed = USER_TYPE_ORDER
    else:
        return sorted(present)

    ordered = [value for value in fixed if value in present]
    return ordered + sorted(present - set(ordered))


def render_chart(
    summary_pdf: pd.DataFrame,
    spec: ChartSpec,
    output_dir: str,
    dpi: int = 100,
    figsize: Tuple[float, float] = (10, 6),
) -> Optional[Path]:
    """
    Draw one summary as a bar chart and write it to disk.

    Args:
        summary_pdf: Summary produced for spec.keys / spec.metric
        spec: Chart specification
        output_dir: Directory for the PNG file
        dpi: Image resolution
        figsize: Figure size in inches

    Returns:
        Path of the written image, or None if the summary was empty
    """
    if summary_pdf.empty:
        logger.warning(f"Skipping chart '{spec.name}': no rows to plot")
        return None

    output_path = Path(output_dir) / spec.filename
    output_path.parent.mkdir(parents=True, exist_ok=True)

    hue_order = category_order(summary_pdf, spec.hue) if spec.hue else None

    fig, ax = plt.subplots(figsize=figsize)
    try:
        sns.barplot(
            data=summary_pdf,
            x=spec.x,
            y=spec.value,
            hue=spec.hue,
            order=category_order(summary_pdf, spec.x),
            hue_order=hue_order,
            errorbar=None,
            ax=ax,
        )
        ax.set_title(spec.title)
        ax.set_xlabel(AXIS_LABELS.get(spec.x, spec.x))
        ax.set_ylabel(spec.ylabel)
        if spec.hue:
            ax.legend(title=AXIS_LABELS.get(spec.hue, spec.hue))

        fig.tight_layout()
        fig.savefig(output_path, dpi=dpi)
    finally:
        plt.close(fig)

    logger.info(f"Chart written: {output_path}")
    return output_path
