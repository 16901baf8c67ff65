"""
Bike-Share Trip Analysis
========================

A PySpark pipeline that loads bike-share trip exports, cleans them,
summarises ride length and ride counts, and renders exploratory charts.

Modules:
    - jobs: Load, clean, aggregate and orchestrate
    - models: Trip schemas and calendar reference data
    - viz: Chart catalogue and rendering
    - monitoring: Stage metrics and data quality checks
    - utils: Configuration and SparkSession factory
"""

__version__ = "0.1.0"

from bikeshare.utils.config import PipelineConfig, Environment

__all__ = [
    "__version__",
    "PipelineConfig",
    "Environment",
]
