"""Response cache keyed by normalized query and retrieved-context fingerprint.

Expiry is lazy: entries older than the TTL are treated as misses at read
time and stay in memory until overwritten or until clear() is called.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from newsrag.models import ScoredPassage

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600.0
_FINGERPRINT_PASSAGES = 3
_TITLE_PREFIX = 10


@dataclass(frozen=True)
class CacheEntry:
    text: str
    timestamp: float


def cache_key(query: str, passages: Sequence[ScoredPassage]) -> str:
    """Return ``"{normalized query}:{title prefixes of the first 3 passages}"``."""
    normalized = query.lower().strip()
    fingerprint = "|".join(
        p.article_title[:_TITLE_PREFIX] for p in passages[:_FINGERPRINT_PASSAGES]
    )
    return f"{normalized}:{fingerprint}"


class ResponseCache:
    """Thread-safe memo of synthesized responses with a time-to-live."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, query: str, passages: Sequence[ScoredPassage]) -> str | None:
        """Return the cached text, or None if absent or older than the TTL."""
        key = cache_key(query, passages)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or self._clock() - entry.timestamp >= self.ttl_seconds:
            return None
        logger.debug("Using cached response for query %r", query)
        return entry.text

    def put(self, query: str, passages: Sequence[ScoredPassage], text: str) -> None:
        key = cache_key(query, passages)
        with self._lock:
            self._entries[key] = CacheEntry(text=text, timestamp=self._clock())

    def clear(self) -> bool:
        with self._lock:
            self._entries.clear()
        logger.info("Response cache cleared")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
