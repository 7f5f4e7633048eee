"""Lexical retriever: keyword overlap + title match + recency boost.

Per-passage score (computed fresh on every call):
  score  = Σ keyword in text   → +2 whole word, +1 substring only
         + Σ keyword in title  → +1.5
         + recency_boost × (3 if the query asks for recent news else 1)
         + jitter ∈ [0, 0.1)
  recency_boost = max(0, 1 − age_days / 30)
  score ≤ 0 → 0.1, so every passage stays retrievable.

Scores are only comparable within a single retrieve() call.
"""

from __future__ import annotations

import logging
import random
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from newsrag.dates import parse_datetime, utc_now
from newsrag.models import Passage, ScoredPassage
from newsrag.rag.keywords import query_keywords
from newsrag.store.base import PassageStore

logger = logging.getLogger(__name__)

_RECENCY_TERMS: tuple[str, ...] = ("recent", "latest", "new")
_SECONDS_PER_DAY = 86_400
_SCORE_FLOOR = 0.1

_WHOLE_WORD_POINTS = 2.0
_SUBSTRING_POINTS = 1.0
_TITLE_POINTS = 1.5


@dataclass
class RetrieverConfig:
    """Configuration for the lexical retriever.

    Attributes:
        top_k: Number of passages returned when retrieve() is called without top_k.
        recency_window_days: Age at which the recency boost reaches zero.
        recency_multiplier: Boost multiplier for queries asking for recent news.
        jitter: Upper bound (exclusive) of the random tie-breaking term.
    """

    top_k: int = 5
    recency_window_days: float = 30.0
    recency_multiplier: float = 3.0
    jitter: float = 0.1


class Retriever:
    """Score every stored passage against a query and return the best ones."""

    def __init__(
        self,
        store: PassageStore,
        config: RetrieverConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.config = config or RetrieverConfig()
        self._rng = rng or random.Random()
        self._clock = clock

    def retrieve(self, query: str, top_k: int | None = None) -> list[ScoredPassage]:
        """Return up to *top_k* passages, best-first.

        Returns an empty list when the store is empty or *top_k* <= 0.
        """
        k = self.config.top_k if top_k is None else top_k
        passages = self.store.all()
        if not passages or k <= 0:
            logger.debug("No passages to retrieve for query %r", query)
            return []

        keywords = query_keywords(query)
        wants_recent = _asks_for_recent(query)
        now = self._clock()
        logger.debug("Keywords extracted: %s", keywords)

        scored = [
            ScoredPassage.from_passage(p, self._score(p, keywords, wants_recent, now))
            for p in passages
        ]
        scored.sort(key=lambda s: s.score, reverse=True)
        top = scored[:k]
        logger.info("Found %d relevant passages for query %r", len(top), query)
        return top

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _score(
        self,
        passage: Passage,
        keywords: list[str],
        wants_recent: bool,
        now: datetime,
    ) -> float:
        score = keyword_score(passage, keywords)

        boost = recency_boost(passage.published_at, now, self.config.recency_window_days)
        score += boost * (self.config.recency_multiplier if wants_recent else 1.0)

        score += self._rng.random() * self.config.jitter

        return score if score > 0 else _SCORE_FLOOR


def keyword_score(passage: Passage, keywords: list[str]) -> float:
    """Text and title overlap score for *keywords* (already lowercased)."""
    text = passage.text.lower()
    title = passage.article_title.lower()
    score = 0.0

    for keyword in keywords:
        if keyword in text:
            if re.search(rf"\b{re.escape(keyword)}\b", text):
                score += _WHOLE_WORD_POINTS
            else:
                score += _SUBSTRING_POINTS

    for keyword in keywords:
        if keyword in title:
            score += _TITLE_POINTS

    return score


def recency_boost(published_at: str, now: datetime, window_days: float = 30.0) -> float:
    """Linear decay from 1 (published now) to 0 (``window_days`` old or older).

    Unparsable dates get no boost.
    """
    published = parse_datetime(published_at)
    if published is None:
        return 0.0
    age_days = (now - published).total_seconds() / _SECONDS_PER_DAY
    return max(0.0, 1.0 - age_days / window_days)


def _asks_for_recent(query: str) -> bool:
    lowered = query.lower()
    return any(term in lowered for term in _RECENCY_TERMS)
