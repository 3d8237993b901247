"""Resolver Module - confidence-gated SDS resolution."""
from core.resolver.inflight import InFlightRegistry, Pending, Ready, normalize_key
from core.resolver.writeback import WriteBackWorker
from core.resolver.service import SdsResolutionService, is_confident

__all__ = [
    'InFlightRegistry',
    'Pending',
    'Ready',
    'normalize_key',
    'WriteBackWorker',
    'SdsResolutionService',
    'is_confident',
]
