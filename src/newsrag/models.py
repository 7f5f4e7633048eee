"""Domain models shared by ingestion, storage, retrieval and synthesis."""

from __future__ import annotations

from dataclasses import dataclass

CHUNK_TYPES: tuple[str, ...] = ("title", "summary", "paragraph")


@dataclass(frozen=True)
class Article:
    id: str
    title: str
    content: str
    url: str
    published_at: str
    summary: str | None = None


@dataclass(frozen=True)
class Chunk:
    text: str
    type: str  # title | summary | paragraph


@dataclass(frozen=True)
class Passage:
    """A stored chunk. ``id`` is ``{article_id}-chunk-{index}``."""

    id: str
    text: str
    article_title: str
    article_url: str
    published_at: str
    chunk_type: str


@dataclass
class ScoredPassage:
    """A passage annotated with a relevance score for one retrieval call.

    Scores are only comparable among results of the same ``retrieve()`` call.
    The stored passage id is not exposed.
    """

    text: str
    article_title: str
    article_url: str
    published_at: str
    chunk_type: str
    score: float

    @classmethod
    def from_passage(cls, passage: Passage, score: float) -> ScoredPassage:
        return cls(
            text=passage.text,
            article_title=passage.article_title,
            article_url=passage.article_url,
            published_at=passage.published_at,
            chunk_type=passage.chunk_type,
            score=score,
        )


@dataclass(frozen=True)
class ChatMessage:
    role: str  # user | assistant
    content: str
    timestamp: str | None = None


@dataclass(frozen=True)
class IngestedArticle:
    """Ledger record for an ingested article, keyed by ``url``."""

    id: str
    title: str
    url: str
    published_at: str
    ingested_at: str | None = None
