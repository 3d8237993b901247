#!/usr/bin/env python3
"""
Label scan endpoint - read a chemical label photo and auto-link its SDS.
"""

import logging

from fastapi import APIRouter, Depends, Request

from core.scan.service import LabelScanService
from ..config import get_config
from ..dependencies import get_scan_service
from ..models.requests import LabelScanRequest
from ..models.responses import LabelScanResponse
from ..rate_limit import limiter, scan_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chemical", tags=["scan"])


@router.post("/scan", response_model=LabelScanResponse)
@limiter.limit(scan_rate_limit)
def label_scan_endpoint(
    request: Request,
    body: LabelScanRequest,
    service: LabelScanService = Depends(get_scan_service)
):
    """
    Extract GHS label data from a photo.

    When the label names both product and manufacturer, the SDS is resolved
    through the shared SDS database and linked if the result is confident.
    A failed SDS lookup does not fail the scan.
    """
    result = service.scan(body.image, body.mime_type)
    return LabelScanResponse.from_result(result, get_config().resolver.cached_source_label)
