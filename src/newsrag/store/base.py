"""Passage store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from newsrag.models import Article, Chunk, IngestedArticle, Passage


class PassageStore(ABC):
    """Append-only collection of passages with an explicit full clear.

    Implementations provide their own mutual exclusion for insert, read and
    clear. Content is not de-duplicated: inserting the same article twice
    yields duplicate passages.
    """

    @abstractmethod
    def insert(self, article_id: str, chunks: Sequence[Chunk], article: Article) -> int:
        """Append *chunks* as passages of *article*. Returns the number inserted."""

    @abstractmethod
    def all(self) -> tuple[Passage, ...]:
        """Return a read-only snapshot of every stored passage, in insertion order."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored passages."""

    @abstractmethod
    def clear(self) -> bool:
        """Remove every passage. Returns True once the store is empty."""

    def insert_ingested(
        self, record: IngestedArticle, chunks: Sequence[Chunk], article: Article
    ) -> int:
        """Append *chunks* for a newly ingested article described by *record*.

        Stores that keep the ingestion ledger override this to write the
        passages and the ledger record together. The default only inserts.
        """
        return self.insert(record.id, chunks, article)


def make_passages(article_id: str, chunks: Sequence[Chunk], article: Article) -> list[Passage]:
    """Build passages with ids ``{article_id}-chunk-{index}``."""
    return [
        Passage(
            id=f"{article_id}-chunk-{index}",
            text=chunk.text,
            article_title=article.title,
            article_url=article.url,
            published_at=article.published_at,
            chunk_type=chunk.type,
        )
        for index, chunk in enumerate(chunks)
    ]
