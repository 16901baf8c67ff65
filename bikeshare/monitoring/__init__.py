"""
Pipeline Monitoring
===================

Structured logging, stage tracking and data quality checks for the trip
analysis pipeline.

Features:
    - JSON or human-readable log output
    - Per-stage timings and row counts; dropped rows are rows_in - rows_out
    - Alerts when a stage drops an unusual share of its input
    - Null, range and uniqueness checks on Spark DataFrames, one pass each

Usage:
    from bikeshare.monitoring import PipelineMonitor

    monitor = PipelineMonitor("trip_analysis")

    with monitor.track_stage("clean") as stage:
        stage.rows_in = raw.count()
        cleaned = clean_trips(raw)
        stage.rows_out = cleaned.count()

    summary = monitor.finish()
"""

import json
import logging
import sys
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pyspark.sql import DataFrame
from pyspark.sql import functions as F


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Structured Logging
# =============================================================================

class JSONFormatter(logging.Formatter):
    """One JSON object per log line; fields passed as extra_fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "extra_fields", {}))

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def get_logger(
    name: str,
    level: int = logging.INFO,
    json_format: bool = True
) -> logging.Logger:
    """
    Get a logger writing to stdout.

    The handler is attached once; later calls with the same name reuse it.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter() if json_format
            else logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False

    return logger


# =============================================================================
# Stage Tracking
# =============================================================================

@dataclass
class StageMetrics:
    """Timing and row counts of one pipeline stage."""
    name: str
    started: datetime = field(default_factory=_utcnow)
    finished: Optional[datetime] = None
    rows_in: int = 0
    rows_out: int = 0
    error: Optional[str] = None

    @property
    def rows_dropped(self) -> int:
        return max(self.rows_in - self.rows_out, 0)

    @property
    def drop_rate(self) -> float:
        return self.rows_dropped / self.rows_in if self.rows_in else 0.0

    @property
    def seconds(self) -> float:
        end = self.finished or _utcnow()
        return (end - self.started).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.name,
            "seconds": round(self.seconds, 3),
            "rows_in": self.rows_in,
            "rows_out": self.rows_out,
            "rows_dropped": self.rows_dropped,
            "drop_rate": round(self.drop_rate, 4),
            "error": self.error,
        }


@dataclass
class Alert:
    level: str  # "warning" or "critical"
    stage: str
    message: str


class PipelineMonitor:
    """
    Tracks pipeline stages, gauges and alerts for one run.

    Usage:
        monitor = PipelineMonitor("trip_analysis")

        with monitor.track_stage("load") as stage:
            trips, files = load_trips(spark, input_path)
            stage.rows_out = trips.count()

        monitor.record_metric("files_loaded", len(files))
        summary = monitor.finish()
    """

    # Share of a stage's input rows dropped before an alert fires
    DROP_RATE_WARNING = 0.05
    DROP_RATE_CRITICAL = 0.20

    def __init__(
        self,
        pipeline_name: str,
        run_id: Optional[str] = None,
        json_logging: bool = True
    ):
        self.pipeline_name = pipeline_name
        self.started = _utcnow()
        self.run_id = run_id or self.started.strftime("%Y%m%dT%H%M%S")

        self.stages: List[StageMetrics] = []
        self.gauges: Dict[str, float] = {}
        self.alerts: List[Alert] = []

        self.logger = get_logger(f"pipeline.{pipeline_name}", json_format=json_logging)
        self._log(logging.INFO, f"Run {self.run_id} of '{pipeline_name}' started", "run_start")

    def _log(self, level: int, message: str, event: str, **fields: Any) -> None:
        self.logger.log(
            level,
            message,
            extra={"extra_fields": {"event": event, "run_id": self.run_id, **fields}},
        )

    def _alert(self, level: str, stage: str, message: str) -> None:
        self.alerts.append(Alert(level=level, stage=stage, message=message))
        self._log(
            logging.CRITICAL if level == "critical" else logging.WARNING,
            f"[{stage}] {message}",
            "alert",
            stage=stage,
            alert_level=level,
        )

    @contextmanager
    def track_stage(
        self,
        stage_name: str,
        warning_rate: Optional[float] = None,
        critical_rate: Optional[float] = None,
    ):
        """
        Time a stage and record its row counts.

        Exceptions raised inside the block are logged, recorded as a
        critical alert and re-raised.

        Args:
            stage_name: Name of the stage
            warning_rate: Drop rate that raises a warning for this stage
                (defaults to DROP_RATE_WARNING)
            critical_rate: Drop rate that raises a critical alert for this
                stage (defaults to DROP_RATE_CRITICAL)
        """
        if warning_rate is None:
            warning_rate = self.DROP_RATE_WARNING
        if critical_rate is None:
            critical_rate = self.DROP_RATE_CRITICAL

        stage = StageMetrics(name=stage_name)
        self.stages.append(stage)

        try:
            yield stage
        except Exception as e:
            stage.error = f"{type(e).__name__}: {e}"
            self._alert("critical", stage_name, f"failed with {stage.error}")
            raise
        finally:
            stage.finished = _utcnow()

        if stage.drop_rate >= critical_rate:
            self._alert("critical", stage_name, f"dropped {stage.drop_rate:.1%} of rows")
        elif stage.drop_rate >= warning_rate:
            self._alert("warning", stage_name, f"dropped {stage.drop_rate:.1%} of rows")

        if stage.rows_in and not stage.rows_out:
            self._alert("warning", stage_name, "produced no rows")

        self._log(
            logging.INFO,
            f"Stage '{stage_name}' done in {stage.seconds:.2f}s "
            f"({stage.rows_in:,} in, {stage.rows_out:,} out)",
            "stage_complete",
            **stage.to_dict(),
        )

    def record_metric(self, name: str, value: float) -> None:
        """Set a named gauge; the last value recorded wins."""
        self.gauges[name] = value

    def finish(self) -> Dict[str, Any]:
        """Close the run and return its summary."""
        failed = [stage.name for stage in self.stages if stage.error]

        summary = {
            "pipeline": self.pipeline_name,
            "run_id": self.run_id,
            "started": self.started.isoformat(),
            "seconds": round((_utcnow() - self.started).total_seconds(), 2),
            "success": not failed,
            "failed_stages": failed,
            "rows_dropped": sum(stage.rows_dropped for stage in self.stages),
            "stages": [stage.to_dict() for stage in self.stages],
            "metrics": dict(self.gauges),
            "alerts": [asdict(alert) for alert in self.alerts],
        }

        self._log(
            logging.INFO if not failed else logging.ERROR,
            f"Run {self.run_id} finished in {summary['seconds']:.2f}s",
            "run_complete",
            summary=summary,
        )

        return summary


# =============================================================================
# Data Quality Checks
# =============================================================================

@dataclass
class QualityCheck:
    check: str
    column: str
    failures: int
    detail: Dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.failures == 0


class DataQualityMonitor:
    """
    Runs data quality checks against a Spark DataFrame.

    Each check is a single aggregation over the DataFrame; checks chain:

        report = (
            DataQualityMonitor(cleaned, "cleaned_trips")
            .check_nulls(["start_station_name", "end_station_name"])
            .check_range("ride_length", min_val=0)
            .check_uniqueness("ride_id")
            .get_report()
        )
    """

    def __init__(self, df: DataFrame, dataset_name: str, json_logging: bool = True):
        self.df = df
        self.dataset_name = dataset_name
        self.total_rows = df.count()
        self.checks: List[QualityCheck] = []
        self.logger = get_logger(f"quality.{dataset_name}", json_format=json_logging)

    def _add(self, check: QualityCheck) -> "DataQualityMonitor":
        self.checks.append(check)
        if not check.passed:
            self.logger.warning(
                f"{self.dataset_name}: {check.check} failed on '{check.column}' "
                f"({check.failures:,} of {self.total_rows:,} rows)"
            )
        return self

    def check_nulls(self, columns: List[str]) -> "DataQualityMonitor":
        """Every listed column must be free of nulls."""
        row = self.df.agg(*[
            F.sum(F.col(column).isNull().cast("int")).alias(column)
            for column in columns
        ]).first()

        for column in columns:
            self._add(QualityCheck("not_null", column, int(row[column] or 0)))

        return self

    def check_range(
        self,
        column: str,
        min_val: Optional[float] = None,
        max_val: Optional[float] = None
    ) -> "DataQualityMonitor":
        """Non-null values must lie within [min_val, max_val]."""
        value = F.col(column)
        outside = F.lit(False)
        if min_val is not None:
            outside = outside | (value < min_val)
        if max_val is not None:
            outside = outside | (value > max_val)

        failures = self.df.agg(F.sum(F.when(outside, 1).otherwise(0))).first()[0]

        return self._add(QualityCheck(
            "in_range", column, int(failures or 0), {"min": min_val, "max": max_val}
        ))

    def check_uniqueness(self, column: str) -> "DataQualityMonitor":
        """No value of the column may repeat."""
        distinct = self.df.agg(F.countDistinct(column)).first()[0]
        return self._add(QualityCheck("unique", column, self.total_rows - distinct))

    def get_report(self) -> Dict[str, Any]:
        return {
            "dataset": self.dataset_name,
            "total_rows": self.total_rows,
            "all_passed": all(check.passed for check in self.checks),
            "failed": [f"{c.check}:{c.column}" for c in self.checks if not c.passed],
            "checks": [
                {**asdict(check), "passed": check.passed} for check in self.checks
            ],
        }
