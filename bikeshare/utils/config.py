"""
Configuration Management
========================

Environment-driven configuration for the bike-share trip analysis pipeline.
Supports a local Spark session (default) and a standalone Spark cluster.

Usage:
    from bikeshare.utils.config import PipelineConfig

    config = PipelineConfig.load()
    print(config.environment)  # "local" or "cluster"
    print(config.storage.input_path)  # "./data/raw"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


class Environment(str, Enum):
    """Pipeline execution environment."""
    LOCAL = "local"
    CLUSTER = "cluster"


def _rate_from_env(name: str, default: float) -> float:
    """Read a share between 0 and 1 from the environment."""
    value = os.getenv(name, str(default))
    try:
        rate = float(value)
    except ValueError:
        raise ValueError(f"Invalid {name}: '{value}'. Must be a number.")
    if not 0.0 <= rate <= 1.0:
        raise ValueError(f"Invalid {name}: {rate}. Must be between 0 and 1.")
    return rate


@dataclass
class StorageConfig:
    """
    Locations of trip CSV exports and rendered charts.

    input_path holds the raw monthly trip files; output_path receives
    one PNG per chart.
    """
    input_path: str
    output_path: str
    file_pattern: str = "*.csv"

    @classmethod
    def from_base_path(cls, base_path: str = "./data") -> StorageConfig:
        """Create configuration rooted at a single data directory."""
        return cls(
            input_path=os.getenv("INPUT_PATH", f"{base_path}/raw"),
            output_path=os.getenv("OUTPUT_PATH", f"{base_path}/charts"),
            file_pattern=os.getenv("TRIP_FILE_PATTERN", "*.csv"),
        )


@dataclass
class SparkConfig:
    """Apache Spark configuration."""
    master: str
    app_name: str
    driver_memory: str
    executor_memory: str

    # Applied on top of the memory settings; always pins the session time zone
    extra_configs: dict = field(default_factory=dict)

    @classmethod
    def _build(cls, master: str, app_name: str, executor_memory: str, **extra: str) -> SparkConfig:
        return cls(
            master=master,
            app_name=app_name,
            driver_memory=os.getenv("SPARK_DRIVER_MEMORY", "2g"),
            executor_memory=os.getenv("SPARK_EXECUTOR_MEMORY", executor_memory),
            extra_configs={
                "spark.sql.session.timeZone": "UTC",
                "spark.sql.adaptive.enabled": "true",
                **extra,
            },
        )

    @classmethod
    def for_local(cls, app_name: str = "BikeShareTripAnalysis") -> SparkConfig:
        """In-process Spark; a handful of shuffle partitions is plenty for monthly exports."""
        return cls._build(
            os.getenv("SPARK_MASTER", "local[*]"),
            app_name,
            "1g",
            **{"spark.sql.shuffle.partitions": "8"},
        )

    @classmethod
    def for_cluster(cls, master: str, app_name: str = "BikeShareTripAnalysis") -> SparkConfig:
        """Standalone cluster at the given master URL."""
        return cls._build(
            master,
            app_name,
            "4g",
            **{"spark.sql.adaptive.coalescePartitions.enabled": "true"},
        )


@dataclass
class ChartConfig:
    """Chart rendering options."""
    dpi: int = 100
    width: float = 10.0
    height: float = 6.0

    @classmethod
    def from_env(cls) -> ChartConfig:
        """Create configuration from environment variables."""
        dpi_str = os.getenv("CHART_DPI", "100")
        try:
            dpi = int(dpi_str)
        except ValueError:
            raise ValueError(f"Invalid CHART_DPI: '{dpi_str}'. Must be an integer.")

        return cls(dpi=dpi)

    @property
    def figsize(self) -> tuple:
        return (self.width, self.height)


@dataclass
class PipelineConfig:
    """
    Main configuration class for the trip analysis pipeline.

    Aggregates all configuration components and provides
    factory methods for the supported environments.

    Usage:
        # Load from environment
        config = PipelineConfig.load()

        # Access components
        print(config.storage.input_path)
        print(config.spark.master)
    """
    environment: Environment
    storage: StorageConfig
    spark: SparkConfig
    charts: ChartConfig = field(default_factory=ChartConfig)

    # Explicit Spark datetime pattern for started_at/ended_at.
    # None means Spark's default timestamp parsing.
    timestamp_format: Optional[str] = None

    # Share of loaded trips the clean stage may drop before alerting.
    # Monthly exports routinely lose ~20% to missing station names.
    clean_drop_warning: float = 0.35
    clean_drop_critical: float = 0.60

    # Logging configuration
    log_level: str = "INFO"
    json_logging: bool = False

    @classmethod
    def load(cls) -> PipelineConfig:
        """
        Load configuration from environment variables.

        The PIPELINE_ENV variable determines which environment
        configuration to load ("local" or "cluster").
        """
        env_str = os.getenv("PIPELINE_ENV", "local").lower()

        try:
            environment = Environment(env_str)
        except ValueError:
            raise ValueError(
                f"Invalid PIPELINE_ENV: '{env_str}'. "
                f"Must be one of: {[e.value for e in Environment]}"
            )

        if environment == Environment.LOCAL:
            spark = SparkConfig.for_local()
        else:
            master = os.getenv("SPARK_MASTER")
            if not master:
                raise ValueError("SPARK_MASTER environment variable is required for cluster environment")
            spark = SparkConfig.for_cluster(master)

        clean_drop_warning = _rate_from_env("CLEAN_DROP_WARNING", 0.35)
        clean_drop_critical = _rate_from_env("CLEAN_DROP_CRITICAL", 0.60)
        if clean_drop_warning > clean_drop_critical:
            raise ValueError(
                f"CLEAN_DROP_WARNING ({clean_drop_warning}) must not exceed "
                f"CLEAN_DROP_CRITICAL ({clean_drop_critical})"
            )

        return cls(
            environment=environment,
            storage=StorageConfig.from_base_path(os.getenv("DATA_PATH", "./data")),
            spark=spark,
            charts=ChartConfig.from_env(),
            timestamp_format=os.getenv("TRIP_TIMESTAMP_FORMAT") or None,
            clean_drop_warning=clean_drop_warning,
            clean_drop_critical=clean_drop_critical,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logging=os.getenv("JSON_LOGGING", "false").lower() in ("1", "true", "yes"),
        )

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.environment == Environment.LOCAL
