"""SDS Module - Shared safety data sheet types."""
from core.sds.models import (
    GhsClassification,
    SafetyDocumentRecord,
    ResolutionResult,
    ResolutionSource,
    ResolutionState,
)

__all__ = [
    'GhsClassification',
    'SafetyDocumentRecord',
    'ResolutionResult',
    'ResolutionSource',
    'ResolutionState',
]
