"""In-process passage store."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from newsrag.models import Article, Chunk, Passage
from newsrag.store.base import PassageStore, make_passages

logger = logging.getLogger(__name__)


class MemoryPassageStore(PassageStore):
    """Passage store backed by a list, guarded by a lock."""

    def __init__(self, passages: Sequence[Passage] = ()) -> None:
        self._passages: list[Passage] = list(passages)
        self._lock = threading.Lock()

    def insert(self, article_id: str, chunks: Sequence[Chunk], article: Article) -> int:
        new = make_passages(article_id, chunks, article)
        with self._lock:
            self._passages.extend(new)
        logger.debug("Added %d passages for article %s", len(new), article_id)
        return len(new)

    def all(self) -> tuple[Passage, ...]:
        with self._lock:
            return tuple(self._passages)

    def count(self) -> int:
        with self._lock:
            return len(self._passages)

    def clear(self) -> bool:
        with self._lock:
            self._passages.clear()
        logger.info("Cleared in-memory passage store")
        return True
