#!/usr/bin/env python3
"""
Error handlers for the web application.

Every error response uses the same envelope:
    {"success": false, "error": "<message>", "type": "<ExceptionClass>"}
"""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    ParseError,
    SafetyProgramError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "type": error_type
        }
    )


def status_code_for(exc: SafetyProgramError) -> int:
    """Map a domain exception to an HTTP status code."""
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, ConfigurationError):
        return 500
    if isinstance(exc, (ExternalServiceError, ParseError)):
        return 502
    return 500


async def service_exception_handler(
    request: Request,
    exc: SafetyProgramError
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The domain exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"Rejected request to {request.url.path}: {exc}")

    if isinstance(exc, ParseError) and exc.raw_text:
        logger.error(f"Unparseable lookup response ({len(exc.raw_text)} chars): {exc.raw_text[:500]}")

    return _error_response(status_code, str(exc), exc.__class__.__name__)


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with consistent format."""
    return _error_response(exc.status_code, exc.detail, "HTTPException")


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors (400), not 422."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get('msg'))
    else:
        message = "Invalid request"
    return _error_response(400, message, "ValidationError")


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error in {request.url.path}")
    return _error_response(500, "Internal server error", "InternalError")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SafetyProgramError, service_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)
