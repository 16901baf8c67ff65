"""
Integration Tests
=================

Tests that run the pipeline end to end on a local SparkSession.

Prerequisites:
    - Java runtime available for PySpark

Run with: pytest tests/integration/ -v
"""
