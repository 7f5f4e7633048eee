"""Retrieval and template-driven answer synthesis."""

from newsrag.rag.answer import FALLBACK_RESPONSE, Answer, AnswerEngine
from newsrag.rag.cache import ResponseCache
from newsrag.rag.retriever import Retriever, RetrieverConfig
from newsrag.rag.synthesizer import Synthesizer

__all__ = [
    "FALLBACK_RESPONSE",
    "Answer",
    "AnswerEngine",
    "ResponseCache",
    "Retriever",
    "RetrieverConfig",
    "Synthesizer",
]
