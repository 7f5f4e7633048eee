"""Answer engine: retrieve passages, then synthesize a response.

Retrieval failures degrade to an empty passage list; synthesis failures
degrade to a fixed apology. Neither propagates to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from newsrag.models import ChatMessage, ScoredPassage
from newsrag.rag.retriever import Retriever
from newsrag.rag.synthesizer import Synthesizer

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = (
    "Sorry, I encountered an error while generating a response. Please try again in a moment."
)


@dataclass
class Answer:
    text: str
    passages: list[ScoredPassage] = field(default_factory=list)
    failed: bool = False


class AnswerEngine:
    """Wires a Retriever to a Synthesizer for one conversation turn."""

    def __init__(self, retriever: Retriever, synthesizer: Synthesizer) -> None:
        self.retriever = retriever
        self.synthesizer = synthesizer

    def respond(self, query: str, history: Sequence[ChatMessage] = ()) -> Answer:
        """Answer *query*; *history* must already end with the current user turn."""
        try:
            passages = self.retriever.retrieve(query)
        except Exception:
            logger.exception("Error retrieving passages for query %r", query)
            passages = []

        try:
            text = self.synthesizer.synthesize(query, passages, history)
        except Exception:
            logger.exception("Error generating response for query %r", query)
            return Answer(text=FALLBACK_RESPONSE, passages=passages, failed=True)

        return Answer(text=text, passages=passages)

    def answer(self, query: str, history: Sequence[ChatMessage] = ()) -> str:
        return self.respond(query, history).text
