#!/usr/bin/env python3
"""
SDS Models - Data structures shared by the cache, the lookup client and the resolver.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SafetyDocumentRecord:
    """A resolved safety data sheet reference for one product.

    Records are immutable once created. Re-resolving a product produces a new
    record rather than updating an existing one.
    """
    product_name: str
    manufacturer: Optional[str] = None
    sds_url: Optional[str] = None
    sds_source: Optional[str] = None
    manufacturer_portal_url: Optional[str] = None
    confidence: float = 0.0
    lookup_date: datetime = field(default_factory=_utcnow)
    notes: Optional[str] = None

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    @property
    def has_reference(self) -> bool:
        """True when the record points somewhere an owner can fetch the SDS."""
        return bool(self.sds_url or self.manufacturer_portal_url)


@dataclass(frozen=True)
class GhsClassification:
    """GHS hazard data for a product, as reported by the seeding lookup."""
    signal_word: Optional[str] = None
    pictogram_codes: Tuple[str, ...] = ()
    hazard_statements: Tuple[str, ...] = ()
    cas_numbers: Tuple[str, ...] = ()
    un_number: Optional[str] = None
    ghs_categories: Tuple[str, ...] = ()


class ResolutionSource(str, Enum):
    CACHE = "cache"
    EXTERNAL = "external"
    IN_FLIGHT = "in_flight"


class ResolutionState(str, Enum):
    CACHE_LOOKUP = "cache_lookup"
    EXTERNAL_LOOKUP = "external_lookup"
    DONE = "done"
    ERROR = "error"


@dataclass
class ResolutionResult:
    """Outcome of a single SDS resolution request."""
    record: SafetyDocumentRecord
    source: ResolutionSource

    @property
    def cached(self) -> bool:
        return self.source == ResolutionSource.CACHE
