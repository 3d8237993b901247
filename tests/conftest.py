"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For test suite notes, see tests/__init__.py
"""

from datetime import datetime, timezone

import pytest

from core.cache.sds_cache import SdsCacheService
from core.sds.models import SafetyDocumentRecord
from database.database import build_engine, build_session_factory
from database.models import Base


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def sds_cache(session_factory):
    return SdsCacheService(session_factory)


@pytest.fixture
def make_record():
    """Factory for SafetyDocumentRecord with sensible defaults."""
    def _make(product_name="Acetone", **overrides):
        values = {
            "manufacturer": "Sunnyside",
            "sds_url": "https://example.com/sds/acetone.pdf",
            "sds_source": "Manufacturer website",
            "manufacturer_portal_url": "https://example.com/sds",
            "confidence": 0.9,
            "lookup_date": datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
        }
        values.update(overrides)
        return SafetyDocumentRecord(product_name=product_name, **values)
    return _make
