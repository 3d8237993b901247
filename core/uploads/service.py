#!/usr/bin/env python3
"""
SDS Upload Service - store manually uploaded SDS PDFs and index them.
"""

import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from core.config_loader import UploadConfig
from core.exceptions import UploadValidationError
from database.models import SdsUpload
from database.uow import sds_uow

logger = logging.getLogger(__name__)

_SAFE_SDS_ID = re.compile(r"^[A-Za-z0-9_-]+$")

DEFAULT_UPLOADER = "Unknown"


@dataclass
class SdsUploadRecord:
    """Index entry for one uploaded SDS file."""
    sds_id: str
    file_name: str
    original_name: str
    uploaded_at: datetime
    uploaded_by: str
    file_size: int

    @classmethod
    def from_row(cls, row: SdsUpload) -> "SdsUploadRecord":
        uploaded_at = row.uploaded_at
        if uploaded_at is not None and uploaded_at.tzinfo is None:
            uploaded_at = uploaded_at.replace(tzinfo=timezone.utc)
        return cls(
            sds_id=row.sds_id,
            file_name=row.file_name,
            original_name=row.original_name,
            uploaded_at=uploaded_at,
            uploaded_by=row.uploaded_by,
            file_size=row.file_size,
        )


class SdsUploadService:
    """
    Validates, stores and indexes SDS uploads.

    Files land in the configured directory as ``sds-{sds_id}-{epoch_ms}.pdf``.
    The index keeps one row per sds_id; a new upload replaces the old row.
    """

    def __init__(self, session_factory: sessionmaker, config: Optional[UploadConfig] = None):
        self.session_factory = session_factory
        self.config = config or UploadConfig()
        self.directory = Path(self.config.directory)

    def validate(
        self,
        sds_id: Optional[str],
        filename: Optional[str],
        content_type: Optional[str],
        size: int
    ) -> None:
        """Reject an upload before anything touches the filesystem."""
        if not sds_id or not filename:
            raise UploadValidationError("Missing required fields: file and sdsId")

        if not _SAFE_SDS_ID.match(sds_id):
            raise UploadValidationError("sdsId may only contain letters, digits, '-' and '_'")

        if content_type not in self.config.allowed_content_types:
            raise UploadValidationError("Only PDF files are accepted")

        if size > self.config.max_size_bytes:
            raise UploadValidationError(
                f"File size must be under {self.config.max_size_bytes // (1024 * 1024)}MB"
            )

    @staticmethod
    def generate_file_name(sds_id: str, timestamp_ms: Optional[int] = None) -> str:
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"sds-{sds_id}-{timestamp_ms}.pdf"

    def save(
        self,
        sds_id: Optional[str],
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
        uploaded_by: Optional[str] = None
    ) -> SdsUploadRecord:
        """
        Store an uploaded SDS file and record it in the index.

        Args:
            sds_id: Inventory SDS identifier the file belongs to
            filename: Original client-side file name (display only)
            content_type: Declared MIME type
            content: File bytes
            uploaded_by: Optional uploader name

        Returns:
            The new index record
        """
        self.validate(sds_id, filename, content_type, len(content))

        self.directory.mkdir(parents=True, exist_ok=True)
        file_name = self.generate_file_name(sds_id)
        file_path = self.directory / file_name
        file_path.write_bytes(content)

        uploaded_at = datetime.now(timezone.utc)
        try:
            with sds_uow(self.session_factory) as repos:
                row = repos.uploads.replace(
                    sds_id=sds_id,
                    file_name=file_name,
                    original_name=filename,
                    uploaded_at=uploaded_at,
                    uploaded_by=uploaded_by or DEFAULT_UPLOADER,
                    file_size=len(content),
                )
                record = SdsUploadRecord.from_row(row)
        except Exception:
            logger.error(f"Failed to index SDS upload {file_name}; removing stored file")
            file_path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored SDS upload {file_name} ({len(content)} bytes) for SDS {sds_id}")
        return record

    def list_uploads(self) -> List[SdsUploadRecord]:
        with sds_uow(self.session_factory) as repos:
            return [SdsUploadRecord.from_row(row) for row in repos.uploads.list_all()]

    def public_url(self, record: SdsUploadRecord) -> str:
        return f"{self.config.public_url_prefix.rstrip('/')}/{record.file_name}"
