import logging
from datetime import datetime
from typing import List

from sqlalchemy import select, delete

from database.models import SdsUpload
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class SdsUploadRepository(BaseRepository):
    """Index of uploaded SDS files, one active row per sds_id."""

    def replace(
        self,
        sds_id: str,
        file_name: str,
        original_name: str,
        uploaded_at: datetime,
        uploaded_by: str,
        file_size: int
    ) -> SdsUpload:
        """Insert an upload row, removing any prior row for the same sds_id."""
        result = self.db.execute(delete(SdsUpload).where(SdsUpload.sds_id == sds_id))
        if result.rowcount:
            logger.info(f"Replacing existing upload index entry for SDS {sds_id}")

        row = SdsUpload(
            sds_id=sds_id,
            file_name=file_name,
            original_name=original_name,
            uploaded_at=uploaded_at,
            uploaded_by=uploaded_by,
            file_size=file_size,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def list_all(self) -> List[SdsUpload]:
        stmt = select(SdsUpload).order_by(SdsUpload.uploaded_at, SdsUpload.id)
        return self._all(stmt)
