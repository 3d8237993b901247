#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import logging
import threading
from typing import Optional

from core.app_context import AppContext
from core.compliance.service import ComplianceScoringService
from core.resolver.service import SdsResolutionService
from core.scan.service import LabelScanService
from core.uploads.service import SdsUploadService
from .config import get_config

logger = logging.getLogger(__name__)

_context: Optional[AppContext] = None
_context_lock = threading.Lock()


def get_app_context() -> AppContext:
    """
    Return the process-wide AppContext, building it on first use.

    Built lazily so that importing the app (e.g. in tests) does not touch
    the database.
    """
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                logger.info("Building application context")
                _context = AppContext.build(get_config())
    return _context


def close_app_context() -> None:
    """Shut down the AppContext if one was built."""
    global _context
    with _context_lock:
        if _context is not None:
            _context.close()
            _context = None


def get_resolution_service() -> SdsResolutionService:
    return get_app_context().resolution_service


def get_upload_service() -> SdsUploadService:
    return get_app_context().upload_service


def get_scoring_service() -> ComplianceScoringService:
    return get_app_context().scoring_service


def get_scan_service() -> LabelScanService:
    return get_app_context().scan_service
