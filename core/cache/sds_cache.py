"""SDS Cache Service - tiered lookups over the shared SDS database."""
import logging
import re
from datetime import timezone
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.exceptions import CacheError, CacheWriteError
from core.sds.models import GhsClassification, SafetyDocumentRecord
from database.models import SdsDatabaseRecord
from database.uow import sds_uow

logger = logging.getLogger(__name__)

# Tokens of the product name used by the substring tier
SEARCH_TOKEN_COUNT = 3

_WILDCARDS = re.compile(r"[%_]")


def build_search_term(product_name: str) -> str:
    """First few whitespace-separated tokens with LIKE wildcards removed."""
    tokens = _WILDCARDS.sub("", product_name).split()
    return " ".join(tokens[:SEARCH_TOKEN_COUNT])


def _clamp_confidence(value) -> float:
    try:
        confidence = float(value if value is not None else 0.0)
    except (TypeError, ValueError):
        return 0.0
    return min(max(confidence, 0.0), 1.0)


def row_to_record(row: SdsDatabaseRecord) -> SafetyDocumentRecord:
    """Convert a cache row into an immutable SafetyDocumentRecord."""
    lookup_date = row.lookup_date
    if lookup_date is not None and lookup_date.tzinfo is None:
        lookup_date = lookup_date.replace(tzinfo=timezone.utc)

    kwargs = {}
    if lookup_date is not None:
        kwargs['lookup_date'] = lookup_date

    return SafetyDocumentRecord(
        product_name=row.product_name,
        manufacturer=row.manufacturer,
        sds_url=row.sds_url,
        sds_source=row.sds_source,
        manufacturer_portal_url=row.manufacturer_sds_portal,
        confidence=_clamp_confidence(row.confidence),
        **kwargs
    )


def _manufacturer_matches(row: SdsDatabaseRecord, manufacturer: str) -> bool:
    return bool(row.manufacturer) and manufacturer.lower() in row.manufacturer.lower()


class SdsCacheService:
    """
    Cache of previously resolved SDS references.

    Reads fail soft: store errors are logged and reported as a miss, so the
    cache is never a hard dependency of resolution.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def find(
        self,
        product_name: str,
        manufacturer: Optional[str] = None
    ) -> Optional[SafetyDocumentRecord]:
        """
        Look up a product, trying exact, case-insensitive, then substring matches.

        Args:
            product_name: Product name as entered by the user
            manufacturer: Optional manufacturer used to pick among substring matches

        Returns:
            The first matching record, or None on a miss or store error.
        """
        try:
            record = self._find_tiered(product_name, manufacturer)
        except CacheError as e:
            logger.warning(f"SDS cache lookup failed for '{product_name}', treating as miss: {e}")
            return None

        if record is None:
            logger.debug(f"Cache miss for '{product_name}'")
        else:
            logger.debug(f"Cache hit for '{product_name}' -> {record.sds_url}")
        return record

    def _find_tiered(
        self,
        product_name: str,
        manufacturer: Optional[str]
    ) -> Optional[SafetyDocumentRecord]:
        try:
            with sds_uow(self.session_factory) as repos:
                row = repos.records.find_exact(product_name)
                if row is not None:
                    return row_to_record(row)

                row = repos.records.find_case_insensitive(product_name)
                if row is not None:
                    return row_to_record(row)

                search_term = build_search_term(product_name)
                if not search_term:
                    return None

                candidates = repos.records.find_containing(search_term)
                if not candidates:
                    return None

                if manufacturer:
                    for candidate in candidates:
                        if _manufacturer_matches(candidate, manufacturer):
                            return row_to_record(candidate)
                return row_to_record(candidates[0])
        except SQLAlchemyError as e:
            raise CacheError(f"SDS cache query failed: {e}") from e

    def exists(self, product_name: str) -> bool:
        """Exact-name presence check; store errors count as absent."""
        try:
            with sds_uow(self.session_factory) as repos:
                return repos.records.exists(product_name)
        except SQLAlchemyError as e:
            logger.warning(f"SDS cache existence check failed for '{product_name}': {e}")
            return False

    def _insert(
        self,
        record: SafetyDocumentRecord,
        industry_tags: Optional[Sequence[str]] = None,
        ghs: Optional[GhsClassification] = None
    ) -> None:
        ghs = ghs or GhsClassification()
        try:
            with sds_uow(self.session_factory) as repos:
                repos.records.insert(
                    product_name=record.product_name,
                    manufacturer=record.manufacturer,
                    sds_url=record.sds_url,
                    sds_source=record.sds_source,
                    manufacturer_sds_portal=record.manufacturer_portal_url,
                    confidence=record.confidence,
                    lookup_date=record.lookup_date,
                    signal_word=ghs.signal_word,
                    pictogram_codes=ghs.pictogram_codes,
                    hazard_statements=ghs.hazard_statements,
                    cas_numbers=ghs.cas_numbers,
                    un_number=ghs.un_number,
                    ghs_categories=ghs.ghs_categories,
                    industry_tags=industry_tags,
                )
        except SQLAlchemyError as e:
            raise CacheWriteError(f"SDS cache insert failed for '{record.product_name}': {e}") from e

    def store(
        self,
        record: SafetyDocumentRecord,
        industry_tags: Optional[Sequence[str]] = None,
        ghs: Optional[GhsClassification] = None
    ) -> bool:
        """Append a resolved record to the cache. Returns False if the write failed.

        GHS data is only known when the record came from the seeding lookup;
        the resolver's write-back stores the document reference alone.
        """
        try:
            self._insert(record, industry_tags, ghs)
        except CacheWriteError as e:
            logger.error(str(e))
            return False

        logger.info(f"Cached SDS for '{record.product_name}'")
        return True
