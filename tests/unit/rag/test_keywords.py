"""Tests for keyword extraction."""

from __future__ import annotations

from newsrag.rag.keywords import extract_keywords, query_keywords


def test_query_keywords_drops_short_and_question_words():
    assert query_keywords("What is the latest solar news?") == ["latest", "solar", "news?"]


def test_query_keywords_lowercases_and_keeps_duplicates():
    assert query_keywords("Solar SOLAR solar") == ["solar", "solar", "solar"]


def test_query_keywords_empty():
    assert query_keywords("") == []
    assert query_keywords("why how who") == []


def test_extract_keywords_strips_punctuation_and_stop_words():
    assert extract_keywords("Tell me about solar energy and what about cost?") == [
        "tell",
        "solar",
        "energy",
        "cost",
    ]


def test_extract_keywords_dedupes_in_first_seen_order():
    assert extract_keywords("Quantum, quantum! Computing (quantum)") == ["quantum", "computing"]


def test_extract_keywords_strips_curly_quotes():
    assert extract_keywords("“Climate” deal’s") == ["climate", "deals"]
