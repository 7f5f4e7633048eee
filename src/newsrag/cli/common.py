"""Shared CLI plumbing: config loading, database access, engine wiring."""

from __future__ import annotations

import logging
import random
import sqlite3
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from newsrag.cli.errors import err_config
from newsrag.config import ConfigError, NewsragConfig, load_config
from newsrag.db.connection import Database
from newsrag.db.migrations import initialize
from newsrag.db.repository import Repository
from newsrag.rag.answer import AnswerEngine
from newsrag.rag.cache import ResponseCache
from newsrag.rag.retriever import Retriever, RetrieverConfig
from newsrag.rag.synthesizer import Synthesizer
from newsrag.store.sqlite import SqlitePassageStore

console = Console()


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_cfg() -> NewsragConfig:
    """Load config or exit 1 with an actionable message."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc


def resolve_db(db: Path | None, cfg: NewsragConfig) -> Path:
    return db if db is not None else Path(cfg.storage.db_path)


def open_db(db_path: Path) -> sqlite3.Connection:
    db = Database(db_path)
    conn = db.connect()
    initialize(conn)
    return conn


def build_engine(
    conn: sqlite3.Connection,
    cfg: NewsragConfig,
    *,
    top_k: int | None = None,
    seed: int | None = None,
) -> AnswerEngine:
    """Wire store → retriever → cached synthesizer for one CLI process."""
    rng = random.Random(seed if seed is not None else cfg.synthesis.seed)
    store = SqlitePassageStore(Repository(conn))
    retriever = Retriever(
        store,
        RetrieverConfig(
            top_k=top_k or cfg.retrieval.top_k,
            recency_window_days=cfg.retrieval.recency_window_days,
            recency_multiplier=cfg.retrieval.recency_multiplier,
            jitter=cfg.retrieval.jitter,
        ),
        rng=rng,
    )
    synthesizer = Synthesizer(ResponseCache(ttl_seconds=cfg.cache.ttl_seconds), rng=rng)
    return AnswerEngine(retriever, synthesizer)
