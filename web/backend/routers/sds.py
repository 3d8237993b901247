#!/usr/bin/env python3
"""
SDS lookup endpoint - resolve a product to its Safety Data Sheet.
"""

import logging

from fastapi import APIRouter, Depends, Request

from core.resolver.service import SdsResolutionService
from ..config import get_config
from ..dependencies import get_resolution_service
from ..models.requests import SdsLookupRequest
from ..models.responses import SdsLookupResponse
from ..rate_limit import limiter, lookup_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chemical", tags=["sds"])


@router.post("/sds-lookup", response_model=SdsLookupResponse)
@limiter.limit(lookup_rate_limit)
def sds_lookup_endpoint(
    request: Request,
    body: SdsLookupRequest,
    service: SdsResolutionService = Depends(get_resolution_service)
):
    """
    Resolve a product's SDS reference.

    Checks the shared SDS database first; on a miss (or a low-confidence
    entry) asks the external lookup service and schedules a cache write-back
    without waiting for it.
    """
    result = service.resolve(body.product_name, body.manufacturer)
    logger.info(
        f"SDS lookup for '{body.product_name}' resolved from {result.source.value} "
        f"(confidence={result.record.confidence})"
    )
    return SdsLookupResponse.from_result(result, get_config().resolver.cached_source_label)
