"""
Bike-Share Trip Analysis CLI
============================

Command-line interface for running the trip pipeline.

Usage:
    # Full run: load, clean, summarise, render charts
    bikeshare run --input-dir ./data/raw --output-dir ./data/charts

    # Print one summary table
    bikeshare summarize --by member_casual --by day_of_week --metric ride_length

    # Show configuration
    bikeshare info
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from bikeshare.jobs.aggregation import GROUPING_KEYS
from bikeshare.models.schemas import Metric
from bikeshare.utils.config import PipelineConfig
from bikeshare.utils.spark_session import create_spark_session, stop_spark_session


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    help="Logging level"
)
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """Bike-Share Trip Analysis - Data Processing CLI."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


@cli.command()
@click.option(
    "--input-dir",
    "-i",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory with trip CSV files (default: configured input path)"
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for chart images (default: configured output path)"
)
@click.option(
    "--no-charts",
    is_flag=True,
    help="Compute summaries without rendering charts"
)
@click.pass_context
def run(
    ctx: click.Context,
    input_dir: Optional[str],
    output_dir: Optional[str],
    no_charts: bool,
) -> None:
    """
    Run the full trip analysis.

    Loads every trip file, cleans the trips, computes summaries and
    writes one chart per analysis.

    Example:
        bikeshare run --input-dir ./data/raw
    """
    from bikeshare.jobs.trip_analysis import run_trip_analysis

    logger = logging.getLogger(__name__)
    logger.info("Starting Trip Analysis")

    config = PipelineConfig.load()
    spark = create_spark_session(config, app_name="TripAnalysis")

    try:
        stats = run_trip_analysis(
            config=config,
            spark=spark,
            input_path=input_dir,
            output_path=output_dir,
            render=not no_charts,
        )

        ride_length = stats["ride_length"]

        click.echo("\n" + "=" * 50)
        click.echo(click.style("✅ Trip Analysis Complete", fg="green", bold=True))
        click.echo("=" * 50)
        click.echo(f"\n📥 Load:")
        click.echo(f"   - Files loaded: {len(stats['files_loaded'])}")
        click.echo(f"   - Trips read: {stats['trips_read']:,}")
        click.echo(f"\n🧹 Clean:")
        click.echo(f"   - Missing station: {stats['rejected']['missing_station']:,}")
        click.echo(f"   - Invalid ride length: {stats['rejected']['invalid_ride_length']:,}")
        click.echo(f"   - Trips after cleaning: {stats['trips_cleaned']:,}")
        click.echo(f"\n📊 Ride length (minutes):")
        click.echo(f"   - Mean: {ride_length['mean']:.2f}")
        click.echo(f"   - Median: {ride_length['median']:.2f}")
        click.echo(f"   - Max: {ride_length['max']:.2f}")
        click.echo(f"   - Busiest weekday: {ride_length['mode_day_of_week']}")
        if stats["charts_written"]:
            click.echo(f"\n🖼️ Charts:")
            for path in stats["charts_written"]:
                click.echo(f"   - {path}")
        click.echo("\n" + "=" * 50 + "\n")

    except Exception as e:
        click.echo(click.style(f"❌ Error: {e}", fg="red", bold=True))
        raise
    finally:
        stop_spark_session(spark)


@cli.command()
@click.option(
    "--by",
    "keys",
    multiple=True,
    required=True,
    type=click.Choice(GROUPING_KEYS),
    help="Grouping key. Can specify multiple."
)
@click.option(
    "--metric",
    type=click.Choice([m.value for m in Metric]),
    default=Metric.RIDE_LENGTH.value,
    help="Ride length statistics or ride counts"
)
@click.option(
    "--input-dir",
    "-i",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory with trip CSV files (default: configured input path)"
)
@click.pass_context
def summarize(
    ctx: click.Context,
    keys: tuple,
    metric: str,
    input_dir: Optional[str],
) -> None:
    """
    Print one grouped summary of cleaned trips.

    Example:
        bikeshare summarize --by member_casual --by month --metric count
    """
    from bikeshare.jobs.aggregation import summarize_trips, summary_to_pandas
    from bikeshare.jobs.cleaning import clean_trips
    from bikeshare.jobs.ingestion import load_trips

    config = PipelineConfig.load()
    spark = create_spark_session(config, app_name="TripSummary")

    try:
        trips, _ = load_trips(
            spark,
            input_dir or config.storage.input_path,
            pattern=config.storage.file_pattern,
            timestamp_format=config.timestamp_format,
        )
        summary = summary_to_pandas(
            summarize_trips(clean_trips(trips), list(keys), Metric(metric))
        )

        click.echo("\n" + summary.to_string(index=False) + "\n")

    except Exception as e:
        click.echo(click.style(f"❌ Error: {e}", fg="red", bold=True))
        raise
    finally:
        stop_spark_session(spark)


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show pipeline configuration info."""
    config = PipelineConfig.load()

    click.echo("\n" + "=" * 50)
    click.echo(click.style("Bike-Share Trip Analysis Configuration", fg="blue", bold=True))
    click.echo("=" * 50)
    click.echo(f"\n🌍 Environment: {config.environment.value}")
    click.echo(f"\n📂 Storage:")
    click.echo(f"   - Input:   {config.storage.input_path}")
    click.echo(f"   - Pattern: {config.storage.file_pattern}")
    click.echo(f"   - Output:  {config.storage.output_path}")
    click.echo(f"\n⚡ Spark:")
    click.echo(f"   - Master: {config.spark.master}")
    click.echo(f"   - Driver Memory: {config.spark.driver_memory}")
    click.echo(f"   - Executor Memory: {config.spark.executor_memory}")
    click.echo(f"\n🖼️ Charts:")
    click.echo(f"   - DPI: {config.charts.dpi}")
    click.echo("\n" + "=" * 50 + "\n")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
