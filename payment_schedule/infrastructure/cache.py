"""Bounded LRU cache for computed schedule views"""

import hashlib
import threading
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional, Tuple

from payment_schedule.infrastructure.observability.metrics import record_cache_lookup

CacheKey = Tuple[str, int, int, str]


def content_hash(payload: str) -> str:
    """Stable version string for callers that do not send a version counter"""
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ScheduleCache:
    """
    LRU cache of schedule views keyed by (kind, year, month, version).

    The version is the invalidation signal: a counter the caller bumps when
    accounts/transactions change, or a content hash of the request. Stale
    entries are never served because a changed input means a changed key;
    they simply age out.

    One instance is owned by the application (app.state), never by the domain.
    """

    def __init__(self, max_entries: int = 128, enabled: bool = True):
        self.max_entries = max_entries
        self.enabled = enabled
        self._items: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def make_key(kind: str, year: int, month: int, version: str) -> CacheKey:
        return kind, year, month, version

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Tuple[Any, bool]:
        """
        Return (value, cache_hit).

        compute() runs outside the lock; two threads missing on the same key
        both compute and the last one stored wins, which is harmless because
        equal keys mean equal inputs.
        """
        if not self.enabled:
            return compute(), False

        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
                record_cache_lookup(hit=True)
                return self._items[key], True

        record_cache_lookup(hit=False)
        value = compute()

        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            while len(self._items) > self.max_entries:
                self._items.popitem(last=False)

        return value, False

    def invalidate(self, version: Optional[str] = None) -> int:
        """Drop entries for one version (or everything); returns how many were dropped"""
        with self._lock:
            if version is None:
                dropped = len(self._items)
                self._items.clear()
                return dropped

            stale = [key for key in self._items if key[-1] == version]
            for key in stale:
                del self._items[key]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
