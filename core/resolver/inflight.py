"""
In-flight Registry - at most one concurrent external lookup per product.

Entries move through two states:
- Pending(future): an owner is running the external lookup; other callers
  wait on the future.
- Ready(record): the lookup succeeded and its cache write-back has not
  landed yet; callers take the record directly.
The entry is removed when the lookup fails, or once the write-back finishes.
"""
import logging
import re
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from core.sds.models import SafetyDocumentRecord

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

ProductKey = Tuple[str, str]


def normalize_key(product_name: str, manufacturer: Optional[str]) -> ProductKey:
    """Trimmed, whitespace-collapsed, casefolded product identity."""
    def _norm(value: Optional[str]) -> str:
        return _WHITESPACE.sub(" ", (value or "").strip()).casefold()
    return _norm(product_name), _norm(manufacturer)


@dataclass(frozen=True)
class Pending:
    future: Future


@dataclass(frozen=True)
class Ready:
    record: SafetyDocumentRecord


Entry = Union[Pending, Ready]


class InFlightRegistry:
    """Thread-safe map of product keys to in-progress or just-finished lookups."""

    def __init__(self):
        self._entries: Dict[ProductKey, Entry] = {}
        self._lock = threading.Lock()

    def claim(self, key: ProductKey) -> Tuple[Entry, bool]:
        """
        Join or start a lookup for ``key``.

        Returns:
            (entry, is_owner). The owner must later call complete() or fail().
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                return entry, False
            entry = Pending(Future())
            self._entries[key] = entry
            return entry, True

    def complete(self, key: ProductKey, record: SafetyDocumentRecord, keep: bool) -> None:
        """Resolve waiters with ``record``.

        With ``keep`` the entry stays as Ready(record) until release().
        """
        with self._lock:
            entry = self._entries.get(key)
            if keep:
                self._entries[key] = Ready(record)
            else:
                self._entries.pop(key, None)

        if isinstance(entry, Pending):
            entry.future.set_result(record)

    def fail(self, key: ProductKey, exc: BaseException) -> None:
        """Drop the entry and re-raise ``exc`` in every waiter."""
        with self._lock:
            entry = self._entries.pop(key, None)

        if isinstance(entry, Pending):
            entry.future.set_exception(exc)

    def release(self, key: ProductKey) -> None:
        """Drop a Ready entry once its record is visible in the cache."""
        with self._lock:
            entry = self._entries.get(key)
            if isinstance(entry, Ready):
                del self._entries[key]

    def get(self, key: ProductKey) -> Optional[Entry]:
        with self._lock:
            return self._entries.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
