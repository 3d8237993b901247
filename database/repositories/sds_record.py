import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select, func

from database.models import SdsDatabaseRecord
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

# Candidates considered by the substring tier
PARTIAL_MATCH_LIMIT = 5


def _newest_first(stmt):
    return stmt.order_by(SdsDatabaseRecord.lookup_date.desc(), SdsDatabaseRecord.id.desc())


class SdsRecordRepository(BaseRepository):
    """Queries over the shared SDS cache table."""

    def find_exact(self, product_name: str) -> Optional[SdsDatabaseRecord]:
        stmt = _newest_first(
            select(SdsDatabaseRecord).where(SdsDatabaseRecord.product_name == product_name)
        ).limit(1)
        return self._first(stmt)

    def find_case_insensitive(self, product_name: str) -> Optional[SdsDatabaseRecord]:
        stmt = _newest_first(
            select(SdsDatabaseRecord).where(
                func.lower(SdsDatabaseRecord.product_name) == product_name.lower()
            )
        ).limit(1)
        return self._first(stmt)

    def find_containing(
        self,
        search_term: str,
        limit: int = PARTIAL_MATCH_LIMIT
    ) -> List[SdsDatabaseRecord]:
        """Rows whose product name contains ``search_term`` (case-insensitive).

        The caller must strip LIKE wildcards from the term.
        """
        stmt = _newest_first(
            select(SdsDatabaseRecord).where(
                SdsDatabaseRecord.product_name.ilike(f"%{search_term}%")
            )
        ).limit(limit)
        return self._all(stmt)

    def exists(self, product_name: str) -> bool:
        stmt = select(SdsDatabaseRecord.id).where(
            SdsDatabaseRecord.product_name == product_name
        ).limit(1)
        return self.db.execute(stmt).first() is not None

    def insert(
        self,
        product_name: str,
        manufacturer: Optional[str],
        sds_url: Optional[str],
        sds_source: Optional[str],
        manufacturer_sds_portal: Optional[str],
        confidence: float,
        lookup_date: Optional[datetime] = None,
        signal_word: Optional[str] = None,
        pictogram_codes: Optional[Sequence[str]] = None,
        hazard_statements: Optional[Sequence[str]] = None,
        cas_numbers: Optional[Sequence[str]] = None,
        un_number: Optional[str] = None,
        ghs_categories: Optional[Sequence[str]] = None,
        industry_tags: Optional[Sequence[str]] = None,
    ) -> SdsDatabaseRecord:
        """Append a row. No uniqueness is enforced on product identity."""
        row = SdsDatabaseRecord(
            product_name=product_name,
            manufacturer=manufacturer,
            sds_url=sds_url,
            sds_source=sds_source,
            manufacturer_sds_portal=manufacturer_sds_portal,
            confidence=confidence,
            lookup_date=lookup_date or datetime.now(timezone.utc),
            signal_word=signal_word,
            pictogram_codes=list(pictogram_codes or []),
            hazard_statements=list(hazard_statements or []),
            cas_numbers=list(cas_numbers or []),
            un_number=un_number,
            ghs_categories=list(ghs_categories or []),
            industry_tags=list(industry_tags or []),
        )
        self.db.add(row)
        self.db.flush()
        return row

    def count(self) -> int:
        return self.db.execute(select(func.count(SdsDatabaseRecord.id))).scalar_one()
