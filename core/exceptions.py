"""
Error taxonomy for the HazCom compliance service.

The web layer maps these to HTTP responses in web/backend/exceptions.py.
"""
from typing import Optional


class SafetyProgramError(Exception):
    """Base exception for service layer errors."""
    pass


class ValidationError(SafetyProgramError):
    """Raised when required request fields are missing or blank."""
    pass


class UploadValidationError(ValidationError):
    """Raised when an uploaded SDS file is rejected before it is written."""
    pass


class ConfigurationError(SafetyProgramError):
    """Raised when a required credential or setting is not configured."""
    pass


class CacheError(SafetyProgramError):
    """Raised when the SDS cache store cannot be queried."""
    pass


class CacheWriteError(SafetyProgramError):
    """Raised when a record cannot be written back to the SDS cache."""
    pass


class ExternalServiceError(SafetyProgramError):
    """Raised when the external lookup service fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ParseError(SafetyProgramError):
    """Raised when the lookup response does not contain a parseable JSON object."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
