#!/usr/bin/env python3
"""
Per-client rate limiting shared by all routers.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .config import get_config

limiter = Limiter(key_func=get_remote_address)


def lookup_rate_limit() -> str:
    return get_config().web.lookup_rate_limit


def upload_rate_limit() -> str:
    return get_config().web.upload_rate_limit


def scan_rate_limit() -> str:
    return get_config().web.scan_rate_limit


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": f"Rate limit exceeded: {exc.detail}",
            "type": "RateLimitExceeded"
        }
    )
