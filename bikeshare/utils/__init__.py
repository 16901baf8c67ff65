"""
Utilities
=========

This module contains configuration management and the SparkSession factory.

Modules:
    - config: Environment-driven configuration
    - spark_session: SparkSession factory
"""

from bikeshare.utils.config import (
    PipelineConfig,
    Environment,
    StorageConfig,
    SparkConfig,
    ChartConfig,
)
from bikeshare.utils.spark_session import (
    create_spark_session,
    session_configs,
    stop_spark_session,
    SparkSessionManager,
)

__all__ = [
    # Config
    "PipelineConfig",
    "Environment",
    "StorageConfig",
    "SparkConfig",
    "ChartConfig",
    # Spark
    "create_spark_session",
    "session_configs",
    "stop_spark_session",
    "SparkSessionManager",
]
