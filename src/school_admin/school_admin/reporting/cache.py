from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from ..core.constants import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheKey:
    """Query parameters a cached report was computed from.

    ``class_id=None`` means "all classes"; ``subject`` names a single
    student for per-student reports.
    """

    kind: str
    periods: tuple[str, ...]
    class_id: Optional[str] = None
    subject: Optional[str] = None

    def matches(self, *, period: Optional[str], class_id: Optional[str]) -> bool:
        if period is not None and period not in self.periods:
            return False
        if class_id is not None and self.class_id not in (None, class_id):
            return False
        return True


class ReportCache:
    """In-process report cache keyed by query parameters.

    Entries expire ``ttl_seconds`` after they were computed, the least
    recently used entry is evicted beyond ``max_entries``, and
    ``invalidate`` drops entries early after a known write.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0 or max_entries <= 0:
            raise ValueError("ttl_seconds and max_entries must be positive")
        self._enabled = bool(enabled)
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[CacheKey, tuple[float, object]] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock.
        expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
        for k in expired:
            del self._entries[k]

    def get_or_compute(self, key: CacheKey, compute: Callable[[], T]) -> T:
        if not self._enabled:
            return compute()

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                expires_at, value = entry
                if expires_at > self._clock():
                    self._entries.move_to_end(key)
                    logger.debug("report cache hit: %s", key)
                    return value  # type: ignore[return-value]
                del self._entries[key]

        logger.debug("report cache miss: %s", key)
        value = compute()
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._entries[key] = (now + self._ttl, value)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("report cache evicted: %s", evicted)
        return value

    def invalidate(self, *, period: Optional[str] = None, class_id: Optional[str] = None) -> int:
        """Drop entries touching ``period`` and/or ``class_id``; both None clears everything."""
        with self._lock:
            self._purge_expired(self._clock())
            stale = [k for k in self._entries if k.matches(period=period, class_id=class_id)]
            for k in stale:
                del self._entries[k]
        if stale:
            logger.info("invalidated %d cached report(s) (period=%s, class_id=%s)", len(stale), period, class_id)
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._entries)
