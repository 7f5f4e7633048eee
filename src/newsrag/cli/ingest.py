"""newsrag ingest — load articles, chunk them, and store their passages.

Sources:
  --source PATH   JSON array or JSON Lines file of articles (repeatable)
  --sample        bundled demo articles, published at ingestion time

Articles whose URL is already in the ledger are skipped, so re-running the
same ingest is a no-op.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from newsrag.cli.common import console, load_cfg, open_db, resolve_db
from newsrag.cli.errors import err_article_file, err_no_sources
from newsrag.db.repository import Repository
from newsrag.ingest.chunker import ArticleChunker
from newsrag.ingest.pipeline import ArticleError, ingest_articles, load_articles, sample_articles
from newsrag.models import Article
from newsrag.store.sqlite import SqlitePassageStore


def ingest_cmd(
    source: Annotated[
        list[Path] | None,
        typer.Option("--source", "-s", help="Article file: JSON array or JSON Lines (repeatable)."),
    ] = None,
    sample: Annotated[
        bool,
        typer.Option("--sample", help="Ingest the bundled demo articles."),
    ] = False,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the newsrag database (created if missing)."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be ingested without writing."),
    ] = False,
) -> None:
    """Ingest news articles into the knowledge base."""
    cfg = load_cfg()
    sources = source or []

    if not sources and not sample:
        console.print(err_no_sources())
        raise typer.Exit(1)

    articles: list[Article] = []
    try:
        for path in sources:
            articles.extend(load_articles(path))
    except ArticleError as exc:
        console.print(err_article_file(str(exc)))
        raise typer.Exit(1) from exc
    if sample:
        articles.extend(sample_articles())

    if not articles:
        console.print("[yellow]No articles found to ingest.[/]")
        raise typer.Exit(0)

    db_path = resolve_db(db, cfg)
    conn = open_db(db_path)
    repo = Repository(conn)

    try:
        seen = repo.ingested_urls()

        if dry_run:
            _show_plan(articles, seen)
            return

        result = ingest_articles(
            articles,
            SqlitePassageStore(repo),
            seen_urls=seen,
            chunker=ArticleChunker(max_chunk_size=cfg.chunking.max_chunk_size),
        )
    finally:
        conn.close()

    console.print(
        f"[green]✓[/] Ingested {result.ingested_count} article(s) "
        f"→ {result.passage_count} passage(s) in {db_path}"
    )
    if result.skipped_urls:
        console.print(f"  [dim]Skipped {len(result.skipped_urls)} already-ingested URL(s).[/]")
    if result.failed_urls:
        console.print(f"  [red]Failed:[/] {len(result.failed_urls)} article(s)")
        for url in result.failed_urls:
            console.print(f"    {url}")
        raise typer.Exit(1)


def _show_plan(articles: list[Article], seen: set[str]) -> None:
    table = Table(title="Dry run — nothing written")
    table.add_column("Title")
    table.add_column("URL")
    table.add_column("Action")
    planned: set[str] = set()
    for article in articles:
        if article.url in seen or article.url in planned:
            action = "[dim]skip (already ingested)[/]"
        else:
            action = "[green]ingest[/]"
            planned.add(article.url)
        table.add_row(article.title, article.url, action)
    console.print(table)
