"""Correlation cache bridging pre-drop and post-drop events."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached definition with metadata."""
    value: T
    created_at: float
    ttl_seconds: float
    key: str

    def is_expired(self, now: float) -> bool:
        return now > self.created_at + self.ttl_seconds


@dataclass
class CorrelationCache:
    """
    Thread-safe key -> definition cache with read-and-remove semantics.

    A drop pre-event stores the definition under the resource's qualified
    name; the matching post-event takes it back out. Post-events that never
    arrive must not leak, so entries are bounded twice:
    - TTL: entries expire `ttl_seconds` after they were written
    - Capacity: beyond `max_size` entries the oldest writes are evicted

    Keys are unique per drop, and the post-event is expected to follow
    its pre-event within the same process lifetime, well inside the TTL.
    """
    # Maximum entries
    max_size: int = 10000

    # Expiry after write
    ttl_seconds: float = 600.0

    # Injectable for tests
    clock: Callable[[], float] = time.monotonic

    # Internal storage, insertion ordered = write ordered
    _store: OrderedDict[str, CacheEntry] = field(default_factory=OrderedDict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    # Stats
    _hits: int = field(default=0, init=False)
    _misses: int = field(default=0, init=False)
    _evictions: int = field(default=0, init=False)

    def put(self, key: str, value: Any) -> None:
        """Store a definition, replacing any previous one for the key."""
        entry = CacheEntry(value=value, created_at=self.clock(), ttl_seconds=self.ttl_seconds, key=key)
        with self._lock:
            self._store.pop(key, None)
            self._store[key] = entry
            self._evict_if_needed()

    def take(self, key: str) -> Any | None:
        """
        Remove and return the definition for a key.

        Returns None if the key was never stored, already taken, or expired.
        """
        with self._lock:
            entry = self._store.pop(key, None)
            if entry is None or entry.is_expired(self.clock()):
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def peek(self, key: str) -> Any | None:
        """Return the definition for a key without removing it."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.is_expired(self.clock()):
                return None
            return entry.value

    def __contains__(self, key: str) -> bool:
        return self.peek(key) is not None

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._store.clear()

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns count removed."""
        now = self.clock()
        with self._lock:
            expired_keys = [key for key, entry in self._store.items() if entry.is_expired(now)]
            for key in expired_keys:
                del self._store[key]
            self._evictions += len(expired_keys)
        if expired_keys:
            logger.debug(f"Reclaimed {len(expired_keys)} stale correlation entries")
        return len(expired_keys)

    def _evict_if_needed(self) -> None:
        """Drop expired entries, then the oldest writes over capacity (caller holds lock)."""
        now = self.clock()
        while self._store:
            oldest_key, oldest = next(iter(self._store.items()))
            if not oldest.is_expired(now) and len(self._store) <= self.max_size:
                break
            del self._store[oldest_key]
            self._evictions += 1
            logger.debug(f"Evicted correlation entry {oldest_key}")

    @property
    def size(self) -> int:
        """Current number of entries, expired ones included until reclaimed."""
        return len(self._store)

    @property
    def stats(self) -> dict:
        """Cache statistics."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "ttl_seconds": self.ttl_seconds,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
        }
