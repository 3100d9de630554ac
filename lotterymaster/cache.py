"""
TTL result cache shared by the statistics and analysis services.

Entries are checked lazily on read; a dead entry stays in the map until
the next computation for its key overwrites it. There is no capacity
bound and no background eviction.

get_or_compute() adds a single-flight guard: concurrent callers asking
for the same missing key wait on one in-flight computation instead of
each starting their own.
"""
import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from . import config

logger = logging.getLogger(__name__)


class _Miss:
    def __repr__(self):
        return "MISS"

    def __bool__(self):
        return False


MISS = _Miss()


@dataclass
class CacheEntry:
    key: Hashable
    payload: Any
    created_at: float


class ResultCache:
    def __init__(self, ttl_seconds: float = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = config.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._pending: Dict[Hashable, Future] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._entries)

    def _lookup(self, key):
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.created_at >= self.ttl:
            return MISS
        return entry.payload

    def get(self, key: Hashable):
        """Return the stored payload, or MISS if absent or expired."""
        with self._lock:
            return self._lookup(key)

    def put(self, key: Hashable, payload: Any):
        """Store `payload` under `key`, replacing whatever was there."""
        with self._lock:
            self._entries[key] = CacheEntry(key, payload, self._clock())

    def clear(self):
        with self._lock:
            self._entries.clear()

    def get_or_compute(
        self,
        key: Hashable,
        compute: Callable[[], Any],
        cacheable: Optional[Callable[[Any], bool]] = None,
    ):
        """
        Return the cached payload for `key`, computing it at most once.

        If another thread is already computing `key`, wait for its result
        (or its exception). Failed computations are never stored; neither
        are payloads for which `cacheable(payload)` is False. An exception
        raised by `cacheable` is treated as a failed computation.
        """
        with self._lock:
            payload = self._lookup(key)
            if payload is not MISS:
                logger.debug("Cache hit for %r", key)
                return payload
            future = self._pending.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._pending[key] = future

        if not owner:
            logger.debug("Joining in-flight computation for %r", key)
            return future.result()

        try:
            payload = compute()
            store = cacheable is None or cacheable(payload)
        except BaseException as exc:
            with self._lock:
                self._pending.pop(key, None)
            future.set_exception(exc)
            raise

        with self._lock:
            if store:
                self._entries[key] = CacheEntry(key, payload, self._clock())
            self._pending.pop(key, None)
        future.set_result(payload)
        return payload


# Process-wide cache shared by StatisticsService and AIAnalysisService
RESULT_CACHE = ResultCache()
