"""Tests for the SQLite repository, migrations and SqlitePassageStore."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from newsrag.db.connection import Database
from newsrag.db.migrations import CURRENT_VERSION, initialize, run_migrations
from newsrag.db.repository import Repository
from newsrag.ingest.pipeline import ingest_articles
from newsrag.models import Article, Chunk, IngestedArticle
from newsrag.store.sqlite import SqlitePassageStore

_ARTICLE = Article(
    id="art-1",
    title="Quantum Computing Milestone Achieved",
    content="",
    url="https://example.com/quantum",
    published_at="2026-10-16T10:00:00Z",
)

_CHUNKS = [
    Chunk(text="Title: Quantum Computing Milestone Achieved", type="title"),
    Chunk(text="A 1,000-qubit processor was announced.", type="paragraph"),
]


def _ledger_record(url: str = "https://example.com/quantum", ingested_at: str = "2026-10-19T10:00:00.000Z"):
    return IngestedArticle(
        id="art-1",
        title="Quantum Computing Milestone Achieved",
        url=url,
        published_at="2026-10-16T10:00:00Z",
        ingested_at=ingested_at,
    )


# ------------------------------------------------------------------
# Migrations
# ------------------------------------------------------------------


def test_initialize_creates_tables(tmp_db):
    names = {
        r[0]
        for r in tmp_db.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    }
    assert {"schema_version", "articles", "passages"} <= names


def test_migrations_idempotent(tmp_db):
    run_migrations(tmp_db)
    run_migrations(tmp_db)
    versions = tmp_db.execute("SELECT version FROM schema_version").fetchall()
    assert [v[0] for v in versions] == [CURRENT_VERSION]


# ------------------------------------------------------------------
# Passages
# ------------------------------------------------------------------


def test_sqlite_store_insert_and_read(tmp_db):
    store = SqlitePassageStore(Repository(tmp_db))
    assert store.insert("art-1", _CHUNKS, _ARTICLE) == 2
    passages = store.all()
    assert [p.id for p in passages] == ["art-1-chunk-0", "art-1-chunk-1"]
    assert passages[0].chunk_type == "title"
    assert passages[1].article_url == "https://example.com/quantum"
    assert store.count() == 2


def test_sqlite_store_keeps_insertion_order(tmp_db):
    store = SqlitePassageStore(Repository(tmp_db))
    store.insert("b", _CHUNKS, _ARTICLE)
    store.insert("a", _CHUNKS, _ARTICLE)
    assert [p.id for p in store.all()] == ["b-chunk-0", "b-chunk-1", "a-chunk-0", "a-chunk-1"]


def test_sqlite_store_clear(tmp_db):
    store = SqlitePassageStore(Repository(tmp_db))
    store.insert("art-1", _CHUNKS, _ARTICLE)
    assert store.clear() is True
    assert store.count() == 0
    assert store.all() == ()


def test_sqlite_store_persists_across_connections(tmp_path: Path):
    db_path = tmp_path / "kb.db"
    with Database(db_path) as conn:
        initialize(conn)
        SqlitePassageStore(Repository(conn)).insert("art-1", _CHUNKS, _ARTICLE)

    with Database(db_path) as conn:
        initialize(conn)
        assert SqlitePassageStore(Repository(conn)).count() == 2


# ------------------------------------------------------------------
# Article ledger
# ------------------------------------------------------------------


def test_ledger_add_and_lookup(tmp_db):
    repo = Repository(tmp_db)
    repo.add_article(_ledger_record())
    found = repo.get_article_by_url("https://example.com/quantum")
    assert found is not None
    assert found.id == "art-1"
    assert repo.get_article_by_url("https://example.com/other") is None
    assert repo.ingested_urls() == {"https://example.com/quantum"}


def test_ledger_rejects_duplicate_url(tmp_db):
    repo = Repository(tmp_db)
    repo.add_article(_ledger_record())
    with pytest.raises(sqlite3.IntegrityError):
        repo.add_article(_ledger_record())
    assert len(repo.list_articles()) == 1


def test_ledger_last_ingested_at(tmp_db):
    repo = Repository(tmp_db)
    assert repo.last_ingested_at() is None
    repo.add_article(_ledger_record("https://example.com/1", "2026-10-18T10:00:00.000Z"))
    repo.add_article(_ledger_record("https://example.com/2", "2026-10-19T10:00:00.000Z"))
    assert repo.last_ingested_at() == "2026-10-19T10:00:00.000Z"


def test_ledger_clear_is_independent_of_passages(tmp_db):
    repo = Repository(tmp_db)
    store = SqlitePassageStore(repo)
    store.insert("art-1", _CHUNKS, _ARTICLE)
    repo.add_article(_ledger_record())

    store.clear()
    assert repo.list_articles() != []

    repo.clear_articles()
    assert repo.list_articles() == []


# ------------------------------------------------------------------
# Ingestion atomicity
# ------------------------------------------------------------------


class _LockedOnThirdArticle(Repository):
    """Repository whose ledger insert fails once, on the third article."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        super().__init__(conn)
        self.calls = 0

    def _insert_article(self, article: IngestedArticle) -> None:
        self.calls += 1
        if self.calls == 3:
            raise sqlite3.OperationalError("database is locked")
        super()._insert_article(article)


def _news(n: int) -> list[Article]:
    return [
        Article(
            id="",
            title=f"Story {i}",
            content="First paragraph.\n\nSecond paragraph.",
            url=f"https://example.com/story-{i}",
            published_at="2026-10-18T00:00:00Z",
        )
        for i in range(n)
    ]


def test_add_ingested_article_writes_passages_and_ledger_together(tmp_db):
    repo = Repository(tmp_db)
    store = SqlitePassageStore(repo)
    assert store.insert_ingested(_ledger_record(), _CHUNKS, _ARTICLE) == 2
    assert repo.count_passages() == 2
    assert repo.ingested_urls() == {"https://example.com/quantum"}


def test_duplicate_ledger_url_rolls_back_passages(tmp_db):
    repo = Repository(tmp_db)
    store = SqlitePassageStore(repo)
    store.insert_ingested(_ledger_record(), _CHUNKS, _ARTICLE)
    with pytest.raises(sqlite3.IntegrityError):
        store.insert_ingested(_ledger_record(), _CHUNKS, _ARTICLE)
    assert repo.count_passages() == 2


def test_failed_ledger_write_leaves_no_orphan_passages(tmp_db):
    repo = _LockedOnThirdArticle(tmp_db)
    result = ingest_articles(_news(5), SqlitePassageStore(repo))

    assert result.failed_urls == ["https://example.com/story-2"]
    assert result.ingested_count == 4
    # 3 passages per article (title + 2 paragraphs), only for ledgered articles
    assert repo.count_passages() == 4 * 3
    assert len(repo.list_articles()) == 4


def test_reingest_after_failed_ledger_write_adds_no_duplicates(tmp_db):
    repo = _LockedOnThirdArticle(tmp_db)
    ingest_articles(_news(5), SqlitePassageStore(repo))

    retry = ingest_articles(
        _news(5), SqlitePassageStore(repo), seen_urls=repo.ingested_urls()
    )

    assert retry.ingested_count == 1
    assert len(retry.skipped_urls) == 4
    assert repo.count_passages() == 5 * 3
    assert len(repo.list_articles()) == 5
    urls = [p.article_url for p in repo.list_passages()]
    assert len(urls) == 5 * 3
    assert all(urls.count(a.url) == 3 for a in _news(5))


def test_migrations_skip_database_at_newer_version(tmp_path: Path):
    with Database(tmp_path / "future.db") as conn:
        run_migrations(conn)
        conn.execute("DROP TABLE passages")
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (CURRENT_VERSION + 1,))
        conn.commit()

        run_migrations(conn)

        names = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert "passages" not in names
