"""Repository pattern for newsrag database operations.

Single interface for: passages (retrieval candidates) and the article ledger
used for URL-based de-duplication on re-ingestion.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence

from newsrag.models import IngestedArticle, Passage


class Repository:
    """Data access layer for passages and ingested articles.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see newsrag.db.migrations.initialize).
        """
        self._conn = conn

    # ------------------------------------------------------------------
    # Passages
    # ------------------------------------------------------------------

    def add_passages(self, article_id: str, passages: Sequence[Passage]) -> int:
        """Insert *passages* of *article_id* in one transaction. Returns the row count."""
        with self._conn:
            self._insert_passages(article_id, passages)
        return len(passages)

    def add_ingested_article(self, record: IngestedArticle, passages: Sequence[Passage]) -> int:
        """Insert an article's passages and its ledger record in one transaction.

        Either both land or neither does, so a URL in the ledger always has its
        passages and stored passages always have a ledger record.

        Raises:
            sqlite3.IntegrityError: If the URL is already recorded (nothing is written).
        """
        with self._conn:
            self._insert_passages(record.id, passages)
            self._insert_article(record)
        return len(passages)

    def _insert_passages(self, article_id: str, passages: Sequence[Passage]) -> None:
        self._conn.executemany(
            """
            INSERT INTO passages (
                id, article_id, chunk_index, text,
                article_title, article_url, published_at, chunk_type
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    p.id,
                    article_id,
                    index,
                    p.text,
                    p.article_title,
                    p.article_url,
                    p.published_at,
                    p.chunk_type,
                )
                for index, p in enumerate(passages)
            ],
        )

    def list_passages(self) -> list[Passage]:
        """Return every passage in insertion order."""
        rows = self._conn.execute(
            """
            SELECT id, text, article_title, article_url, published_at, chunk_type
            FROM passages ORDER BY rowid
            """
        ).fetchall()
        return [_row_to_passage(r) for r in rows]

    def count_passages(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM passages").fetchone()[0]

    def clear_passages(self) -> None:
        """Delete every passage. Rolled back as a whole on failure."""
        with self._conn:
            self._conn.execute("DELETE FROM passages")

    # ------------------------------------------------------------------
    # Article ledger
    # ------------------------------------------------------------------

    def add_article(self, article: IngestedArticle) -> None:
        """Record an ingested article.

        Raises:
            sqlite3.IntegrityError: If an article with the same URL is already recorded.
        """
        with self._conn:
            self._insert_article(article)

    def _insert_article(self, article: IngestedArticle) -> None:
        self._conn.execute(
            """
            INSERT INTO articles (id, url, title, published_at, ingested_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                article.id,
                article.url,
                article.title,
                article.published_at,
                article.ingested_at,
            ),
        )

    def get_article_by_url(self, url: str) -> IngestedArticle | None:
        """Return the ledger record for *url*, or None if it was never ingested."""
        row = self._conn.execute(
            "SELECT id, url, title, published_at, ingested_at FROM articles WHERE url = ?",
            (url,),
        ).fetchone()
        return _row_to_article(row) if row else None

    def list_articles(self) -> list[IngestedArticle]:
        """Return all ledger records ordered by ingestion time (oldest first)."""
        rows = self._conn.execute(
            "SELECT id, url, title, published_at, ingested_at FROM articles ORDER BY ingested_at, rowid"
        ).fetchall()
        return [_row_to_article(r) for r in rows]

    def ingested_urls(self) -> set[str]:
        return {r[0] for r in self._conn.execute("SELECT url FROM articles").fetchall()}

    def last_ingested_at(self) -> str | None:
        """Return the most recent ``ingested_at`` timestamp, or None if the ledger is empty."""
        return self._conn.execute("SELECT MAX(ingested_at) FROM articles").fetchone()[0]

    def clear_articles(self) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM articles")


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------


def _row_to_passage(row: sqlite3.Row) -> Passage:
    return Passage(
        id=row["id"],
        text=row["text"],
        article_title=row["article_title"],
        article_url=row["article_url"],
        published_at=row["published_at"],
        chunk_type=row["chunk_type"],
    )


def _row_to_article(row: sqlite3.Row) -> IngestedArticle:
    return IngestedArticle(
        id=row["id"],
        url=row["url"],
        title=row["title"],
        published_at=row["published_at"],
        ingested_at=row["ingested_at"],
    )
