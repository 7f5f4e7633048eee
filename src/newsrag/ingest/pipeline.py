"""Article ingestion: load, de-duplicate by URL, chunk, store.

De-duplication happens here, not in the passage store: an article whose URL
is already in the ledger (``seen_urls``) or earlier in the same batch is
skipped. A failure on one article is logged and the batch continues.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from importlib import resources
from pathlib import Path
from typing import Any

from newsrag.dates import to_iso, utc_now
from newsrag.ingest.chunker import ArticleChunker
from newsrag.models import Article, IngestedArticle
from newsrag.store.base import PassageStore

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS: tuple[str, ...] = ("title", "content", "url")
_SAMPLE_RESOURCE = "sample_articles.json"


class ArticleError(ValueError):
    """Raised when an article file or record cannot be used."""


@dataclass
class IngestResult:
    ingested: list[IngestedArticle] = field(default_factory=list)
    skipped_urls: list[str] = field(default_factory=list)
    failed_urls: list[str] = field(default_factory=list)
    passage_count: int = 0

    @property
    def ingested_count(self) -> int:
        return len(self.ingested)


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------


def load_articles(path: Path, *, clock: Callable[[], datetime] = utc_now) -> list[Article]:
    """Read articles from a JSON array or JSON Lines file.

    Raises:
        ArticleError: If the file cannot be parsed or a record is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ArticleError(f"Cannot read article file '{path}': {exc}") from exc

    records = _parse_records(text, path)
    return [_to_article(r, i, clock) for i, r in enumerate(records)]


def sample_articles(*, clock: Callable[[], datetime] = utc_now) -> list[Article]:
    """Return the demo articles bundled with the package, published "now"."""
    text = resources.files("newsrag.data").joinpath(_SAMPLE_RESOURCE).read_text(encoding="utf-8")
    return [_to_article(r, i, clock) for i, r in enumerate(json.loads(text))]


def _parse_records(text: str, path: Path) -> list[Any]:
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Not a single JSON document, try JSON Lines
        try:
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        except json.JSONDecodeError as exc:
            raise ArticleError(
                f"'{path}' is neither a JSON array nor JSON Lines (line {exc.lineno}): {exc.msg}"
            ) from exc
    if isinstance(data, dict):
        return [data]
    if not isinstance(data, list):
        raise ArticleError(f"'{path}' must contain an array of article objects.")
    return data


def _to_article(record: Any, index: int, clock: Callable[[], datetime]) -> Article:
    if not isinstance(record, dict):
        raise ArticleError(f"Article #{index} is not an object.")
    missing = [f for f in _REQUIRED_FIELDS if not str(record.get(f) or "").strip()]
    if missing:
        raise ArticleError(f"Article #{index} is missing required field(s): {', '.join(missing)}")

    published_at = record.get("publishedAt") or record.get("published_at") or to_iso(clock())
    return Article(
        id=str(record.get("id") or ""),
        title=str(record["title"]),
        content=str(record["content"]),
        url=str(record["url"]),
        published_at=str(published_at),
        summary=record.get("summary") or None,
    )


# ------------------------------------------------------------------
# Ingestion
# ------------------------------------------------------------------


def ingest_articles(
    articles: Iterable[Article],
    store: PassageStore,
    *,
    seen_urls: Iterable[str] = (),
    chunker: ArticleChunker | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> IngestResult:
    """Chunk and store every article whose URL has not been ingested yet.

    Articles without an id get ``article-{epoch_ms}-{index}``.
    """
    chunker = chunker or ArticleChunker()
    seen = set(seen_urls)
    result = IngestResult()

    fresh = []
    for article in articles:
        if article.url in seen:
            result.skipped_urls.append(article.url)
            continue
        seen.add(article.url)
        fresh.append(article)

    logger.info(
        "Found %d new articles to ingest (%d already ingested)",
        len(fresh),
        len(result.skipped_urls),
    )

    batch_ms = int(clock().timestamp() * 1000)
    for index, article in enumerate(fresh):
        record = IngestedArticle(
            id=article.id or f"article-{batch_ms}-{index}",
            title=article.title,
            url=article.url,
            published_at=article.published_at,
            ingested_at=to_iso(clock()),
        )
        try:
            chunks = chunker.chunk(article)
            result.passage_count += store.insert_ingested(record, chunks, article)
        except Exception:
            logger.exception("Error processing article %r", article.title)
            result.failed_urls.append(article.url)
            continue

        result.ingested.append(record)
        logger.info("Ingested article %r (%d chunks)", article.title, len(chunks))

    return result
