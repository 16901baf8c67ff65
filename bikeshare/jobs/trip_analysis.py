"""
Trip Analysis Job
=================

Runs the whole trip pipeline as one batch.

This job:
    1. Loads every trip file from the input directory
    2. Cleans trips (station filter, ride_length, negative filter)
    3. Checks cleaned data quality
    4. Builds the grouped summaries behind each chart
    5. Renders one PNG per chart into the output directory

Usage:
    python -m bikeshare.jobs.trip_analysis --input-dir ./data/raw --output-dir ./data/charts
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pyspark.sql import SparkSession

from bikeshare.jobs.aggregation import (
    describe_ride_length,
    summarize_trips,
    summary_to_pandas,
)
from bikeshare.jobs.cleaning import STATION_COLUMNS, clean_trips, rejection_breakdown
from bikeshare.jobs.ingestion import load_trips
from bikeshare.monitoring import DataQualityMonitor, PipelineMonitor
from bikeshare.utils.config import PipelineConfig
from bikeshare.viz.charts import CHARTS, render_chart

logger = logging.getLogger(__name__)


def run_trip_analysis(
    config: PipelineConfig,
    spark: SparkSession,
    input_path: Optional[str] = None,
    output_path: Optional[str] = None,
    render: bool = True,
) -> Dict[str, Any]:
    """
    Run the trip analysis pipeline.

    Args:
        config: Pipeline configuration
        spark: SparkSession
        input_path: Directory of trip files (defaults to config.storage.input_path)
        output_path: Chart directory (defaults to config.storage.output_path)
        render: If False, compute summaries without writing charts

    Returns:
        Dictionary with job statistics, summaries and chart paths
    """
    input_path = input_path or config.storage.input_path
    output_path = output_path or config.storage.output_path

    logger.info("=" * 60)
    logger.info("TRIP ANALYSIS JOB")
    logger.info("=" * 60)
    logger.info(f"Environment: {config.environment.value}")
    logger.info(f"Input path: {input_path}")
    logger.info(f"Output path: {output_path}")

    monitor = PipelineMonitor("trip_analysis", json_logging=config.json_logging)

    stats: Dict[str, Any] = {
        "files_loaded": [],
        "trips_read": 0,
        "trips_cleaned": 0,
        "rejected": {},
        "ride_length": {},
        "summaries": {},
        "charts_written": [],
    }

    raw_df = cleaned_df = None
    try:
        with monitor.track_stage("load") as stage:
            raw_df, files = load_trips(
                spark,
                input_path,
                pattern=config.storage.file_pattern,
                timestamp_format=config.timestamp_format,
            )
            raw_df = raw_df.cache()
            stats["files_loaded"] = files
            stats["trips_read"] = raw_df.count()
            stage.rows_out = stats["trips_read"]

        with monitor.track_stage(
            "clean",
            warning_rate=config.clean_drop_warning,
            critical_rate=config.clean_drop_critical,
        ) as stage:
            stats["rejected"] = rejection_breakdown(raw_df)
            cleaned_df = clean_trips(raw_df).cache()
            stats["trips_cleaned"] = cleaned_df.count()

            stage.rows_in = stats["trips_read"]
            stage.rows_out = stats["trips_cleaned"]

        stats["data_quality"] = (
            DataQualityMonitor(cleaned_df, "cleaned_trips", json_logging=config.json_logging)
            .check_nulls(STATION_COLUMNS + ["started_at", "ended_at"])
            .check_range("ride_length", min_val=0)
            .check_uniqueness("ride_id")
            .get_report()
        )

        with monitor.track_stage("aggregate") as stage:
            stats["ride_length"] = describe_ride_length(cleaned_df)
            for spec in CHARTS:
                summary = summarize_trips(cleaned_df, spec.keys, spec.metric)
                stats["summaries"][spec.name] = summary_to_pandas(summary)
            stage.rows_out = len(stats["summaries"])

        if render:
            with monitor.track_stage("render") as stage:
                stage.rows_in = len(CHARTS)
                for spec in CHARTS:
                    path = render_chart(
                        stats["summaries"][spec.name],
                        spec,
                        output_path,
                        dpi=config.charts.dpi,
                        figsize=config.charts.figsize,
                    )
                    if path is not None:
                        stats["charts_written"].append(str(path))
                stage.rows_out = len(stats["charts_written"])
    finally:
        for cached in (cleaned_df, raw_df):
            if cached is not None:
                cached.unpersist()

    monitor.record_metric("files_loaded", len(stats["files_loaded"]))
    monitor.record_metric("trips_cleaned", stats["trips_cleaned"])
    monitor.record_metric("mean_ride_length_minutes", stats["ride_length"]["mean"])

    stats["monitor"] = monitor.finish()

    logger.info("=" * 60)
    logger.info("TRIP ANALYSIS COMPLETE")
    logger.info(f"Files loaded: {len(stats['files_loaded'])}")
    logger.info(f"Trips read: {stats['trips_read']:,}")
    logger.info(f"Trips after cleaning: {stats['trips_cleaned']:,}")
    logger.info(f"Charts written: {len(stats['charts_written'])}")
    logger.info("=" * 60)

    return stats


# Entry point for direct execution
if __name__ == "__main__":
    import argparse

    from bikeshare.utils.spark_session import SparkSessionManager

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    parser = argparse.ArgumentParser(description="Trip Analysis Job")
    parser.add_argument("--input-dir", default=None, help="Directory with trip CSV files")
    parser.add_argument("--output-dir", default=None, help="Directory for chart images")
    parser.add_argument("--no-charts", action="store_true", help="Skip chart rendering")
    args = parser.parse_args()

    config = PipelineConfig.load()

    with SparkSessionManager(config, app_name="TripAnalysis") as spark:
        stats = run_trip_analysis(
            config=config,
            spark=spark,
            input_path=args.input_dir,
            output_path=args.output_dir,
            render=not args.no_charts,
        )
        print(f"\nJob completed: {stats['trips_cleaned']:,} trips, "
              f"{len(stats['charts_written'])} charts")
