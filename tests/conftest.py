"""Shared pytest fixtures."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from newsrag.db.connection import Database
from newsrag.db.migrations import initialize
from newsrag.models import Passage, ScoredPassage

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> str:
    return (NOW - timedelta(days=days)).isoformat()


def make_passage(
    text: str = "Some passage text.",
    title: str = "Some Article",
    *,
    published_at: str | None = None,
    pid: str = "a-chunk-0",
    chunk_type: str = "paragraph",
) -> Passage:
    return Passage(
        id=pid,
        text=text,
        article_title=title,
        article_url=f"https://example.com/{pid}",
        published_at=published_at or days_ago(1),
        chunk_type=chunk_type,
    )


def make_scored(
    text: str = "Some passage text.",
    title: str = "Some Article",
    *,
    published_at: str | None = None,
    score: float = 1.0,
) -> ScoredPassage:
    return ScoredPassage.from_passage(
        make_passage(text, title, published_at=published_at), score
    )


@pytest.fixture
def clock():
    """Fixed wall clock for recency scoring."""
    return lambda: NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".newsrag.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()
