"""
Spark Session Factory
=====================

Builds the SparkSession used by every job.

The session time zone always comes from SparkConfig (UTC by default), so
hour/weekday/month derivation does not depend on the host's zone.

Usage:
    from bikeshare.utils.config import PipelineConfig
    from bikeshare.utils.spark_session import SparkSessionManager

    config = PipelineConfig.load()
    with SparkSessionManager(config) as spark:
        trips, files = load_trips(spark, config.storage.input_path)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional

from pyspark.sql import SparkSession

if TYPE_CHECKING:
    from bikeshare.utils.config import PipelineConfig

logger = logging.getLogger(__name__)

# Levels SparkContext.setLogLevel accepts
SPARK_LOG_LEVELS = {"ALL", "DEBUG", "ERROR", "FATAL", "INFO", "OFF", "TRACE", "WARN"}

# Small in-process runs: no UI, no Hive catalog, modest parallelism
LOCAL_CONFIGS = {
    "spark.default.parallelism": "4",
    "spark.sql.catalogImplementation": "in-memory",
    "spark.ui.enabled": "false",
}


def session_configs(config: PipelineConfig) -> Dict[str, str]:
    """
    All Spark settings applied to the session builder, in order.

    Args:
        config: Pipeline configuration object

    Returns:
        Mapping of Spark config keys to values
    """
    spark_config = config.spark

    settings = {
        "spark.driver.memory": spark_config.driver_memory,
        "spark.executor.memory": spark_config.executor_memory,
    }
    settings.update(spark_config.extra_configs)
    if config.is_local:
        settings.update(LOCAL_CONFIGS)

    return settings


def create_spark_session(
    config: PipelineConfig,
    app_name: Optional[str] = None,
) -> SparkSession:
    """
    Create (or reuse) a SparkSession for the configured environment.

    Args:
        config: Pipeline configuration object
        app_name: Optional override for application name

    Returns:
        Configured SparkSession
    """
    name = app_name or config.spark.app_name

    logger.info(
        f"Creating SparkSession '{name}' on {config.spark.master} "
        f"({config.environment.value})"
    )

    builder = SparkSession.builder.appName(name).master(config.spark.master)
    for key, value in session_configs(config).items():
        builder = builder.config(key, value)

    spark = builder.getOrCreate()

    level = config.log_level.upper()
    if level == "WARNING":
        level = "WARN"
    spark.sparkContext.setLogLevel(level if level in SPARK_LOG_LEVELS else "WARN")

    logger.info(f"Spark {spark.version} ready")

    return spark


def stop_spark_session(spark: Optional[SparkSession]) -> None:
    if spark is not None:
        logger.info("Stopping SparkSession")
        spark.stop()


class SparkSessionManager:
    """Context manager that stops the session on exit, errors included."""

    def __init__(self, config: PipelineConfig, app_name: Optional[str] = None):
        self.config = config
        self.app_name = app_name
        self.spark: Optional[SparkSession] = None

    def __enter__(self) -> SparkSession:
        self.spark = create_spark_session(self.config, self.app_name)
        return self.spark

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        stop_spark_session(self.spark)
        self.spark = None
        return False
