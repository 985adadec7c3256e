"""Bounded LRU cache of decoded batches.

Batches are immutable once exported, so entries never need
invalidation; only the entry count is bounded.
"""

from __future__ import annotations

from collections import OrderedDict
import threading

from core.errors import StrataConfigError
from core.types import LedgerBatch


class BatchCache:
    """Thread-safe LRU keyed by object key."""

    def __init__(self, max_entries: int) -> None:
        """Initialize the cache.

        Args:
            max_entries: Maximum number of decoded batches kept.

        Raises:
            StrataConfigError: If max_entries is not positive.
        """
        if max_entries <= 0:
            raise StrataConfigError(f"Invalid batch cache size ({max_entries}): must be positive")
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._batches: "OrderedDict[str, LedgerBatch]" = OrderedDict()

    def get(self, object_key: str) -> LedgerBatch | None:
        """Return a cached batch and mark it most recently used."""
        with self._lock:
            batch = self._batches.get(object_key)
            if batch is not None:
                self._batches.move_to_end(object_key)
            return batch

    def put(self, object_key: str, batch: LedgerBatch) -> None:
        """Cache a batch, evicting the least recently used one when full."""
        with self._lock:
            self._batches[object_key] = batch
            self._batches.move_to_end(object_key)
            if len(self._batches) > self._max_entries:
                self._batches.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._batches)
