"""
Tests Package
=============

This package contains all tests for the bike-share trip analysis pipeline.

Test Categories:
    - unit: Fast tests, no SparkSession needed
    - integration: Tests that run a local SparkSession on small CSV fixtures
"""
