#!/usr/bin/env python3
"""
Test suite for the HazCom compliance service.

All tests run without external services: the database is in-memory SQLite
and the SDS lookup client is mocked.

    # Run all tests
    python -m pytest tests/ -v

    # Run only the web layer tests
    python -m pytest tests/unit/web -v
"""
