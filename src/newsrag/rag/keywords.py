"""Keyword extraction for retrieval scoring and response synthesis.

Two extractors with different rules:
  - query_keywords(): retriever terms — whitespace split, length > 3,
    question words removed, punctuation kept.
  - extract_keywords(): synthesis terms — punctuation stripped, length > 2,
    broad stop-word list, de-duplicated in first-seen order.
"""

from __future__ import annotations

import re

QUESTION_WORDS: frozenset[str] = frozenset(
    ["what", "when", "where", "which", "who", "whom", "whose", "why", "how"]
)

STOP_WORDS: frozenset[str] = frozenset(
    [
        "a", "an", "the", "and", "or", "but", "is", "are", "was", "were",
        "in", "on", "at", "to", "for", "with", "about",
        "what", "when", "where", "who", "how", "why", "which",
        "do", "does", "did", "have", "has", "had",
        "can", "could", "will", "would", "should", "may", "might",
        "me", "my", "mine", "your", "yours", "we", "our", "ours",
        "they", "their", "theirs", "this", "that", "these", "those",
        "it", "its", "of", "from",
    ]
)

_PUNCTUATION_RE = re.compile(r"[.,?!;:()\[\]{}\"'“”‘’]")


def query_keywords(query: str) -> list[str]:
    """Return retriever keywords for *query*, in query order (duplicates kept)."""
    return [
        word
        for word in query.lower().split()
        if len(word) > 3 and word not in QUESTION_WORDS
    ]


def extract_keywords(text: str) -> list[str]:
    """Return unique synthesis keywords for *text*, in first-seen order."""
    words = _PUNCTUATION_RE.sub("", text.lower()).split()
    return list(dict.fromkeys(w for w in words if len(w) > 2 and w not in STOP_WORDS))
