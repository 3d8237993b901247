"""Cache Module - Caching services."""
from core.cache.sds_cache import (
    SdsCacheService,
    build_search_term,
    row_to_record,
    SEARCH_TOKEN_COUNT
)

__all__ = [
    'SdsCacheService',
    'build_search_term',
    'row_to_record',
    'SEARCH_TOKEN_COUNT'
]
