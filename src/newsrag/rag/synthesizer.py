"""Template-driven response synthesizer.

Priority chain (first match wins):
  1. cache hit            → cached text
  2. no passages          → "no information" template
  3. follow-up question   → follow-up template, passage chosen with the
                            previous question's context
  4. intent rules         → see newsrag.rag.intents
  5. default              → generic template
The synthesizer performs no I/O and never raises for empty or unusual input.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from newsrag.models import ChatMessage, ScoredPassage
from newsrag.rag import templates
from newsrag.rag.cache import ResponseCache
from newsrag.rag.intents import INTENT_RULES, IntentRule
from newsrag.rag.keywords import extract_keywords

logger = logging.getLogger(__name__)

_FOLLOW_UP_MARKERS: tuple[str, ...] = ("what about", "how about", "and", "also")
_SHORT_QUERY_CHARS = 15
_JITTER = 0.1


class Synthesizer:
    """Render a response for a query from retrieved passages and chat history.

    Args:
        cache: Optional response cache consulted before and filled after rendering.
        rng: Randomness for phrasing choice and tie-breaking; seed it for
            reproducible output.
        rules: Ordered intent rules (defaults to INTENT_RULES).
    """

    def __init__(
        self,
        cache: ResponseCache | None = None,
        *,
        rng: random.Random | None = None,
        rules: Sequence[IntentRule] = INTENT_RULES,
    ) -> None:
        self.cache = cache
        self._rng = rng or random.Random()
        self._rules = tuple(rules)

    def synthesize(
        self,
        query: str,
        passages: Sequence[ScoredPassage],
        history: Sequence[ChatMessage] = (),
    ) -> str:
        if self.cache is not None:
            cached = self.cache.get(query, passages)
            if cached is not None:
                return cached

        response = self._render(query, passages, history)

        if self.cache is not None:
            self.cache.put(query, passages, response)
        return response

    def _render(
        self,
        query: str,
        passages: Sequence[ScoredPassage],
        history: Sequence[ChatMessage],
    ) -> str:
        if not passages:
            logger.info("No passages for query %r; using no-information template", query)
            return templates.no_passages(query, self._rng)

        previous = previous_question(history)
        if previous is not None and is_follow_up(query):
            keywords = extract_keywords(f"{previous} {query}")
            passage = most_relevant_passage(keywords, passages, self._rng)
            logger.debug("Follow-up to %r answered from %r", previous, passage.article_title)
            return templates.follow_up(query, passage)

        relevant = most_relevant_passage(extract_keywords(query), passages, self._rng)
        for rule in self._rules:
            if not rule.matches(query):
                continue
            text = rule.build(passages, relevant)
            if text is not None:
                logger.debug("Intent %r matched query %r", rule.name, query)
                return text

        return templates.default(relevant, self._rng)


def previous_question(history: Sequence[ChatMessage]) -> str | None:
    """Return the user message before the current turn, or None.

    *history* is chronological and already contains the current query as
    its last user message.
    """
    questions = [m.content for m in history if m.role == "user"]
    return questions[-2] if len(questions) > 1 else None


def is_follow_up(query: str) -> bool:
    lowered = query.lower()
    return any(m in lowered for m in _FOLLOW_UP_MARKERS) or len(query) < _SHORT_QUERY_CHARS


def most_relevant_passage(
    keywords: Sequence[str],
    passages: Sequence[ScoredPassage],
    rng: random.Random,
) -> ScoredPassage:
    """Pick the passage with the highest keyword overlap.

    +1 per keyword found in the text, +0.5 per keyword found in the title,
    plus jitter in [0, 0.1). Falls back to the first passage.
    """
    best = passages[0]
    best_score = 0.0

    for passage in passages:
        text = passage.text.lower()
        title = passage.article_title.lower()
        score = 0.0
        for keyword in keywords:
            if keyword in text:
                score += 1
            if keyword in title:
                score += 0.5
        score += rng.random() * _JITTER

        if score > best_score:
            best_score = score
            best = passage

    return best
