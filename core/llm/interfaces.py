"""
LLM Provider Interfaces - Abstract bases for external model services.

This module defines the interfaces for services that resolve a product to an
SDS reference (OpenAI-compatible search models, SDS vendor APIs, etc.) and
for services that read GHS data off a label photo.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

from core.sds.models import GhsClassification, SafetyDocumentRecord


class SdsLookupProvider(ABC):
    """
    Abstract Interface for external SDS lookup providers.
    """

    @abstractmethod
    def resolve_sds(self, product_name: str, manufacturer: str) -> SafetyDocumentRecord:
        """
        Resolve a product to a safety data sheet reference.

        Raises:
            ConfigurationError: provider credentials are not configured
            ExternalServiceError: transport failure or non-success response
            ParseError: the response did not contain a usable JSON object
        """
        pass


class SdsSeedProvider(ABC):
    """
    Abstract Interface for lookups that also report GHS classification.

    Used when pre-filling the shared SDS database.
    """

    @abstractmethod
    def resolve_sds_with_ghs(
        self,
        product_name: str,
        manufacturer: str
    ) -> Tuple[SafetyDocumentRecord, GhsClassification]:
        """
        Resolve a product to an SDS reference plus its GHS classification.

        Raises the same errors as SdsLookupProvider.resolve_sds.
        """
        pass


class LabelExtractor(ABC):
    """
    Abstract Interface for vision models that read chemical labels.
    """

    @abstractmethod
    def extract_label(self, image_base64: str, mime_type: str) -> Dict[str, Any]:
        """
        Extract the GHS label fields visible in a photo.

        Args:
            image_base64: Base64 image data without a data URI prefix
            mime_type: Image content type (e.g. image/jpeg)

        Returns:
            Parsed label fields; keys the model did not report are absent

        Raises:
            ConfigurationError: provider credentials are not configured
            ExternalServiceError: transport failure or non-success response
            ParseError: the response did not contain a usable JSON object
        """
        pass
