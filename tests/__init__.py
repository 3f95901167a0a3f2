#!/usr/bin/env python3
"""
Test suite for the readiness engine.

    # Run all tests
    python -m pytest tests/ -v

    # Skip tests that touch the database
    python -m pytest tests/ -v -m "not db"

Database tests run against in-memory SQLite, so no external services are needed.
"""
