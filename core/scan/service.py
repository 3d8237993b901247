#!/usr/bin/env python3
"""
Label Scan Service - read a chemical label photo and link its SDS.

Flow for one scan:

    extract label fields (vision model)
      -> fill gaps from a fuzzy-matched known chemical
      -> resolve the SDS through the shared cache / external lookup
      -> auto-link the SDS when the result is trustworthy

The SDS step is best effort: a failed lookup leaves the scan result without
an SDS link instead of failing the scan.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from core.compliance.models import SDS_CURRENT, SDS_MISSING
from core.exceptions import SafetyProgramError, ValidationError
from core.llm.interfaces import LabelExtractor
from core.resolver.service import SdsResolutionService
from core.scan.known_chemicals import find_known_chemical, merge_label_data
from core.sds.models import ResolutionResult

logger = logging.getLogger(__name__)

DEFAULT_AUTO_LINK_CONFIDENCE = 0.7
DEFAULT_SCAN_CONFIDENCE = 0.5
DEFAULT_MIME_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")

_DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")


def strip_data_uri(image: str) -> str:
    """Base64 payload of an image given either raw or as a data URI."""
    cleaned = _DATA_URI_PREFIX.sub("", image.strip())
    if "," in cleaned:
        cleaned = cleaned.split(",", 1)[1]
    return cleaned


def _confidence(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return min(max(float(value), 0.0), 1.0)
    except (TypeError, ValueError):
        return None


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


@dataclass
class LabelScanResult:
    """Label fields read from a photo plus the SDS linking outcome."""
    label: Dict[str, Any]
    confidence: float
    fields_uncertain: List[str] = field(default_factory=list)
    known_match: Optional[str] = None
    sds_lookup: Optional[ResolutionResult] = None
    sds_status: Optional[str] = None
    sds_url: Optional[str] = None
    manufacturer_portal_url: Optional[str] = None

    @property
    def product_name(self) -> str:
        return _text(self.label.get("product_name"))

    @property
    def manufacturer(self) -> str:
        return _text(self.label.get("manufacturer"))

    @property
    def sds_linked(self) -> bool:
        return self.sds_status == SDS_CURRENT


class LabelScanService:
    """
    Turns a label photo into inventory-ready chemical data.

    Collaborators are injected: the extractor reads the photo and the
    resolution service finds the SDS (cache first, then external lookup).
    """

    def __init__(
        self,
        extractor: LabelExtractor,
        resolver: SdsResolutionService,
        known_chemicals: Optional[List[Dict[str, Any]]] = None,
        auto_link_confidence: float = DEFAULT_AUTO_LINK_CONFIDENCE,
        allowed_mime_types: Sequence[str] = DEFAULT_MIME_TYPES
    ):
        self.extractor = extractor
        self.resolver = resolver
        self.known_chemicals = known_chemicals or []
        self.auto_link_confidence = auto_link_confidence
        self.allowed_mime_types = tuple(allowed_mime_types)

    def _validate(self, image: Optional[str], mime_type: Optional[str]) -> None:
        if not image or not image.strip() or not mime_type:
            raise ValidationError("Missing image or mimeType in request body")
        if mime_type not in self.allowed_mime_types:
            raise ValidationError(f"Unsupported image type: {mime_type}")

    def scan(self, image: Optional[str], mime_type: Optional[str]) -> LabelScanResult:
        """
        Scan a label photo.

        Args:
            image: Base64 image data, optionally as a data URI
            mime_type: Image content type

        Returns:
            LabelScanResult with merged label fields and SDS link status

        Raises:
            ValidationError: image or mime type missing or unsupported
            ConfigurationError, ExternalServiceError, ParseError: label extraction failed
        """
        self._validate(image, mime_type)
        image_base64 = strip_data_uri(image)
        logger.info(f"Scanning label image ({len(image_base64)} base64 chars, {mime_type})")

        scanned = self.extractor.extract_label(image_base64, mime_type)

        known = find_known_chemical(_text(scanned.get("product_name")), self.known_chemicals)
        if known is not None:
            logger.info(f"Label matched known chemical '{known['product_name']}'")
            label = merge_label_data(known, scanned)
        else:
            label = dict(scanned)

        confidence = _confidence(label.get("confidence"))
        if not confidence:
            scanned_confidence = _confidence(scanned.get("confidence"))
            confidence = DEFAULT_SCAN_CONFIDENCE if scanned_confidence is None else scanned_confidence
        label.pop("confidence", None)

        uncertain = label.pop("fields_uncertain", None) or scanned.get("fields_uncertain") or []
        result = LabelScanResult(
            label=label,
            confidence=confidence,
            fields_uncertain=[str(f) for f in uncertain] if isinstance(uncertain, list) else [],
            known_match=known['product_name'] if known is not None else None,
        )

        if result.product_name and result.manufacturer:
            self._link_sds(result)
        else:
            logger.info("Label scan found no product name and manufacturer; skipping SDS lookup")

        logger.info(
            f"Label scan result: '{result.product_name}' by '{result.manufacturer}', "
            f"confidence={result.confidence}, sds_status={result.sds_status}"
        )
        return result

    def _link_sds(self, result: LabelScanResult) -> None:
        try:
            lookup = self.resolver.resolve(result.product_name, result.manufacturer)
        except SafetyProgramError as e:
            logger.warning(f"SDS lookup for scanned '{result.product_name}' failed: {e}")
            return

        result.sds_lookup = lookup
        record = lookup.record
        result.manufacturer_portal_url = record.manufacturer_portal_url

        # Cache hits already passed the resolver's confidence gate
        if lookup.cached or (record.sds_url and record.confidence > self.auto_link_confidence):
            result.sds_status = SDS_CURRENT
            result.sds_url = record.sds_url
            logger.info(f"SDS auto-linked for '{result.product_name}': {record.sds_url}")
        else:
            result.sds_status = SDS_MISSING
