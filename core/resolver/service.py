#!/usr/bin/env python3
"""
SDS Resolution Service - cache first, external lookup as fallback.

State flow for one request:

    CACHE_LOOKUP --(confident hit)--> DONE
    CACHE_LOOKUP --(miss / low confidence / no url)--> EXTERNAL_LOOKUP
    EXTERNAL_LOOKUP --(success)--> DONE   (cache write-back scheduled, not awaited)
    EXTERNAL_LOOKUP --(failure)--> ERROR  (raised to the caller, no retry)

Concurrent requests for the same product share one external lookup through
the InFlightRegistry.
"""

from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional
import logging

from core.cache.sds_cache import SdsCacheService
from core.exceptions import ExternalServiceError, ValidationError
from core.llm.interfaces import SdsLookupProvider
from core.resolver.inflight import InFlightRegistry, Ready, normalize_key
from core.resolver.writeback import WriteBackWorker
from core.sds.models import (
    ResolutionResult,
    ResolutionSource,
    ResolutionState,
    SafetyDocumentRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.5


def is_confident(
    record: Optional[SafetyDocumentRecord],
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
) -> bool:
    """A cached record is trusted only above the threshold and with a document URL."""
    return record is not None and record.confidence > threshold and bool(record.sds_url)


class SdsResolutionService:
    """
    Resolves a (product name, manufacturer) pair to an SDS reference.

    Collaborators are injected; the service owns no connections.
    """

    def __init__(
        self,
        cache: SdsCacheService,
        lookup: SdsLookupProvider,
        writeback: WriteBackWorker,
        registry: Optional[InFlightRegistry] = None,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        inflight_wait_seconds: Optional[float] = None
    ):
        self.cache = cache
        self.lookup = lookup
        self.writeback = writeback
        self.registry = registry or InFlightRegistry()
        self.confidence_threshold = confidence_threshold
        self.inflight_wait_seconds = inflight_wait_seconds

    @staticmethod
    def _validate(product_name: Optional[str], manufacturer: Optional[str]) -> None:
        if not product_name or not product_name.strip() or not manufacturer or not manufacturer.strip():
            raise ValidationError("Missing product_name or manufacturer")

    def _transition(self, product_name: str, state: ResolutionState) -> None:
        logger.debug(f"SDS resolution for '{product_name}' -> {state.value}")

    def resolve(self, product_name: str, manufacturer: str) -> ResolutionResult:
        """
        Resolve an SDS reference.

        Args:
            product_name: Product name (required)
            manufacturer: Manufacturer name (required)

        Returns:
            ResolutionResult with the record and where it came from

        Raises:
            ValidationError: a required field is missing
            ConfigurationError, ExternalServiceError, ParseError: external lookup failed
        """
        self._validate(product_name, manufacturer)

        self._transition(product_name, ResolutionState.CACHE_LOOKUP)
        cached = self.cache.find(product_name, manufacturer)
        if is_confident(cached, self.confidence_threshold):
            logger.info(f"SDS cache HIT: '{product_name}' -> {cached.sds_url}")
            self._transition(product_name, ResolutionState.DONE)
            return ResolutionResult(record=cached, source=ResolutionSource.CACHE)

        if cached is not None:
            logger.info(
                f"SDS cache partial match for '{product_name}' "
                f"(confidence={cached.confidence}, url={'yes' if cached.sds_url else 'no'}), "
                "proceeding to external lookup"
            )
        else:
            logger.info(f"SDS cache MISS for '{product_name}' by '{manufacturer}'")

        self._transition(product_name, ResolutionState.EXTERNAL_LOOKUP)
        return self._resolve_external(product_name, manufacturer)

    def _resolve_external(self, product_name: str, manufacturer: str) -> ResolutionResult:
        key = normalize_key(product_name, manufacturer)
        entry, is_owner = self.registry.claim(key)

        if isinstance(entry, Ready):
            logger.info(f"Reusing just-resolved SDS for '{product_name}'")
            self._transition(product_name, ResolutionState.DONE)
            return ResolutionResult(record=entry.record, source=ResolutionSource.IN_FLIGHT)

        if not is_owner:
            logger.info(f"Joining in-flight SDS lookup for '{product_name}'")
            try:
                record = entry.future.result(timeout=self.inflight_wait_seconds)
            except FutureTimeoutError as e:
                self._transition(product_name, ResolutionState.ERROR)
                raise ExternalServiceError(
                    "Timed out waiting for in-flight SDS lookup", code="timeout"
                ) from e
            except Exception:
                self._transition(product_name, ResolutionState.ERROR)
                raise
            self._transition(product_name, ResolutionState.DONE)
            return ResolutionResult(record=record, source=ResolutionSource.IN_FLIGHT)

        # An earlier owner's write-back may have landed after our first read
        cached = self.cache.find(product_name, manufacturer)
        if is_confident(cached, self.confidence_threshold):
            logger.info(f"SDS cache HIT after claim: '{product_name}' -> {cached.sds_url}")
            self.registry.complete(key, cached, keep=False)
            self._transition(product_name, ResolutionState.DONE)
            return ResolutionResult(record=cached, source=ResolutionSource.CACHE)

        try:
            record = self.lookup.resolve_sds(product_name, manufacturer)
        except Exception as e:
            self._transition(product_name, ResolutionState.ERROR)
            self.registry.fail(key, e)
            raise

        if record.has_reference:
            self.registry.complete(key, record, keep=True)
            try:
                self.writeback.submit(record, on_complete=lambda: self.registry.release(key))
            except RuntimeError as e:
                # Executor already shut down
                logger.error(f"Could not schedule SDS cache write-back for '{product_name}': {e}")
                self.registry.release(key)
        else:
            logger.info(f"SDS lookup for '{product_name}' returned no URLs; not caching")
            self.registry.complete(key, record, keep=False)

        self._transition(product_name, ResolutionState.DONE)
        return ResolutionResult(record=record, source=ResolutionSource.EXTERNAL)
