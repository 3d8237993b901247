#!/usr/bin/env python3
"""
SDS upload endpoints - store manually obtained SDS PDFs.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from core.uploads.service import SdsUploadService
from ..dependencies import get_upload_service
from ..models.responses import (
    SdsUploadListResponse,
    SdsUploadRecordResponse,
    SdsUploadResponse,
)
from ..rate_limit import limiter, upload_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sds", tags=["uploads"])


@router.post("/uploads", response_model=SdsUploadResponse)
@limiter.limit(upload_rate_limit)
async def upload_sds_endpoint(
    request: Request,
    file: Optional[UploadFile] = File(None),
    sds_id: Optional[str] = Form(None, alias="sdsId"),
    uploaded_by: Optional[str] = Form(None, alias="uploadedBy"),
    service: SdsUploadService = Depends(get_upload_service)
):
    """
    Upload an SDS PDF for an inventory entry.

    PDF only, 25MB max. A new upload for the same sdsId replaces the index
    entry; earlier files stay on disk.
    """
    content = b""
    if file is not None:
        # Reject on the declared size before buffering the body
        service.validate(sds_id, file.filename, file.content_type, file.size or 0)
        # One byte past the limit is enough for save() to reject an undeclared oversize
        content = await file.read(service.config.max_size_bytes + 1)

    record = await run_in_threadpool(
        service.save,
        sds_id,
        file.filename if file is not None else None,
        file.content_type if file is not None else None,
        content,
        uploaded_by,
    )

    return SdsUploadResponse(
        success=True,
        record=SdsUploadRecordResponse.from_record(record),
        url=service.public_url(record)
    )


@router.get("/uploads", response_model=SdsUploadListResponse)
def list_sds_uploads_endpoint(service: SdsUploadService = Depends(get_upload_service)):
    """List every indexed SDS upload in upload order."""
    return SdsUploadListResponse(
        uploads=[SdsUploadRecordResponse.from_record(r) for r in service.list_uploads()]
    )
