#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Run only pure unit tests (no database engine)
    python -m pytest tests/ -v -m "not db"

    # Run only repository tests
    python -m pytest tests/ -v -m "db"

Repository tests run against an in-memory SQLite engine, so no external
database is required. Set TEST_DATABASE_URL to run them against PostgreSQL
instead.
"""

import os

TEST_DB_URL = os.environ.get("TEST_DATABASE_URL", "sqlite://")
