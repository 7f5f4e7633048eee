"""SQLite-backed passage store."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from newsrag.db.repository import Repository
from newsrag.models import Article, Chunk, IngestedArticle, Passage
from newsrag.store.base import PassageStore, make_passages

logger = logging.getLogger(__name__)


class SqlitePassageStore(PassageStore):
    """Passage store persisted in the ``passages`` table.

    Access to the shared connection is serialised with a lock. Inserts and
    clears are single transactions.
    """

    def __init__(self, repo: Repository) -> None:
        self._repo = repo
        self._lock = threading.Lock()

    def insert(self, article_id: str, chunks: Sequence[Chunk], article: Article) -> int:
        passages = make_passages(article_id, chunks, article)
        with self._lock:
            inserted = self._repo.add_passages(article_id, passages)
        logger.debug("Stored %d passages for article %s", inserted, article_id)
        return inserted

    def insert_ingested(
        self, record: IngestedArticle, chunks: Sequence[Chunk], article: Article
    ) -> int:
        """Store the passages and the ledger record of *record* in one transaction."""
        passages = make_passages(record.id, chunks, article)
        with self._lock:
            inserted = self._repo.add_ingested_article(record, passages)
        logger.debug("Stored %d passages and ledger record for %s", inserted, record.url)
        return inserted

    def all(self) -> tuple[Passage, ...]:
        with self._lock:
            return tuple(self._repo.list_passages())

    def count(self) -> int:
        with self._lock:
            return self._repo.count_passages()

    def clear(self) -> bool:
        with self._lock:
            self._repo.clear_passages()
        logger.info("Cleared passage store")
        return True
