"""
Write-back Worker - best-effort cache population off the request path.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from core.cache.sds_cache import SdsCacheService
from core.sds.models import SafetyDocumentRecord

logger = logging.getLogger(__name__)


class WriteBackWorker:
    """
    Runs SDS cache inserts on a small thread pool.

    Failures are logged and never reach the caller that triggered the
    write-back; that caller has already returned its result.
    """

    def __init__(self, cache: SdsCacheService, max_workers: int = 2):
        self.cache = cache
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="sds-writeback"
        )

    def _write(
        self,
        record: SafetyDocumentRecord,
        on_complete: Optional[Callable[[], None]]
    ) -> bool:
        try:
            ok = self.cache.store(record)
            if not ok:
                logger.error(f"SDS cache write-back failed for '{record.product_name}'")
            return ok
        except Exception:
            logger.exception(f"Unexpected error during SDS cache write-back for '{record.product_name}'")
            return False
        finally:
            if on_complete is not None:
                on_complete()

    def submit(
        self,
        record: SafetyDocumentRecord,
        on_complete: Optional[Callable[[], None]] = None
    ) -> Future:
        """
        Schedule a cache insert for ``record``.

        Args:
            record: Resolved record to cache
            on_complete: Called after the attempt, whether or not it succeeded

        Returns:
            Future resolving to True when the row was written.
        """
        logger.debug(f"Scheduling SDS cache write-back for '{record.product_name}'")
        return self._executor.submit(self._write, record, on_complete)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with ``wait`` drain pending write-backs."""
        self._executor.shutdown(wait=wait)
