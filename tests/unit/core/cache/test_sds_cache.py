"""
Tests for SdsCacheService.

Covers the exact -> case-insensitive -> substring lookup tiers, newest-row
selection, manufacturer preference and fail-soft behaviour against an
in-memory SQLite database.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from core.cache.sds_cache import SdsCacheService, build_search_term
from database.uow import sds_uow


def _at(day):
    return datetime(2025, 1, day, tzinfo=timezone.utc)


def _failing_session_factory():
    factory = MagicMock()
    factory.side_effect = OperationalError("SELECT 1", {}, Exception("database is locked"))
    return factory


class TestSearchTerm:

    def test_keeps_first_three_tokens(self):
        assert build_search_term("Simple Green All-Purpose Cleaner Concentrate") == "Simple Green All-Purpose"

    def test_strips_like_wildcards(self):
        assert build_search_term("100% Pure_Acetone") == "100 PureAcetone"

    def test_only_wildcards_gives_empty_term(self):
        assert build_search_term(" %_% ") == ""


class TestLookupTiers:

    def test_exact_match(self, sds_cache, make_record):
        sds_cache.store(make_record("Acetone"))

        record = sds_cache.find("Acetone", "Sunnyside")

        assert record is not None
        assert record.product_name == "Acetone"
        assert record.sds_url == "https://example.com/sds/acetone.pdf"
        assert record.manufacturer_portal_url == "https://example.com/sds"

    def test_case_insensitive_match(self, sds_cache, make_record):
        sds_cache.store(make_record("Acetone"))

        record = sds_cache.find("ACETONE")

        assert record is not None
        assert record.product_name == "Acetone"

    def test_substring_match(self, sds_cache, make_record):
        sds_cache.store(make_record(
            "Simple Green All-Purpose Cleaner",
            sds_url="https://example.com/sds/simple-green.pdf"
        ))

        record = sds_cache.find("simple green all-purpose concentrate 1 gal")

        assert record is not None
        assert record.sds_url == "https://example.com/sds/simple-green.pdf"

    def test_substring_prefers_manufacturer(self, sds_cache, make_record):
        sds_cache.store(make_record(
            "WD-40 Multi-Use Product", manufacturer="WD-40 Company",
            sds_url="https://example.com/wd40.pdf", lookup_date=_at(1)
        ))
        sds_cache.store(make_record(
            "WD-40 Specialist Degreaser", manufacturer="Other Co",
            sds_url="https://example.com/other.pdf", lookup_date=_at(2)
        ))

        preferred = sds_cache.find("WD-40", "wd-40 company")
        fallback = sds_cache.find("WD-40", "Unknown Maker")

        assert preferred.sds_url == "https://example.com/wd40.pdf"
        assert fallback.sds_url == "https://example.com/other.pdf"

    def test_newest_row_wins(self, sds_cache, make_record):
        sds_cache.store(make_record("Acetone", sds_url="https://old.example.com/a.pdf", lookup_date=_at(1)))
        sds_cache.store(make_record("Acetone", sds_url="https://new.example.com/a.pdf", lookup_date=_at(10)))

        assert sds_cache.find("Acetone").sds_url == "https://new.example.com/a.pdf"

    def test_miss(self, sds_cache, make_record):
        sds_cache.store(make_record("Acetone"))

        assert sds_cache.find("Muriatic Acid") is None

    def test_empty_search_term_skips_substring_tier(self, sds_cache, make_record):
        sds_cache.store(make_record("50% Solution"))

        assert sds_cache.find("%%") is None

    def test_lookup_date_is_timezone_aware(self, sds_cache, make_record):
        sds_cache.store(make_record("Acetone"))

        record = sds_cache.find("Acetone")

        assert record.lookup_date.tzinfo is not None
        assert record.lookup_date == _at(15).replace(hour=12)

    def test_out_of_range_confidence_is_clamped(self, session_factory, sds_cache):
        with sds_uow(session_factory) as repos:
            repos.records.insert(
                product_name="Bleach", manufacturer="Clorox",
                sds_url="https://example.com/bleach.pdf", sds_source=None,
                manufacturer_sds_portal=None, confidence=1.7,
            )

        assert sds_cache.find("Bleach").confidence == 1.0


class TestStoreAndExists:

    def test_store_appends_with_industry_tags(self, session_factory, sds_cache, make_record):
        assert sds_cache.store(make_record("Acetone")) is True
        assert sds_cache.store(make_record("Acetone"), industry_tags=["auto-body"]) is True

        with sds_uow(session_factory) as repos:
            assert repos.records.count() == 2
            row = repos.records.find_exact("Acetone")
            assert row.industry_tags == ["auto-body"]

    def test_exists_is_exact(self, sds_cache, make_record):
        sds_cache.store(make_record("Acetone"))

        assert sds_cache.exists("Acetone") is True
        assert sds_cache.exists("acetone") is False


class TestFailSoft:

    def test_find_returns_none_on_store_error(self, caplog):
        cache = SdsCacheService(_failing_session_factory())

        assert cache.find("Acetone", "Sunnyside") is None
        assert "treating as miss" in caplog.text

    def test_store_returns_false_on_store_error(self, make_record):
        cache = SdsCacheService(_failing_session_factory())

        assert cache.store(make_record("Acetone")) is False

    def test_exists_returns_false_on_store_error(self):
        cache = SdsCacheService(_failing_session_factory())

        assert cache.exists("Acetone") is False
