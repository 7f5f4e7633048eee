"""newsrag status / clear — knowledge base statistics and administration."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel

from newsrag.cli.common import console, load_cfg, open_db, resolve_db
from newsrag.cli.errors import err_no_db, warn_ledger_kept
from newsrag.db.repository import Repository
from newsrag.store.sqlite import SqlitePassageStore


def status_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the newsrag database."),
    ] = None,
) -> None:
    """Show passage and article counts and the last ingestion time."""
    cfg = load_cfg()
    db_path = resolve_db(db, cfg)

    if not db_path.exists():
        console.print(
            Panel(
                "[yellow]No database found.[/]\n"
                "  Run:  newsrag ingest --sample",
                title="[bold]Knowledge Base[/]",
                expand=False,
            )
        )
        return

    conn = open_db(db_path)
    try:
        repo = Repository(conn)
        passages = SqlitePassageStore(repo).count()
        articles = len(repo.list_articles())
        last_ingest = repo.last_ingested_at()
    finally:
        conn.close()

    size_mb = db_path.stat().st_size / (1024 * 1024)
    lines = [
        f"Database:  {db_path} ({size_mb:.1f} MB)",
        f"Articles: [bold]{articles}[/]  |  Passages: [bold]{passages:,}[/]",
        f"Last ingest: [dim]{last_ingest}[/]" if last_ingest else "[dim]No articles ingested yet.[/]",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Knowledge Base[/]", expand=False))


def clear_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the newsrag database."),
    ] = None,
    ledger: Annotated[
        bool,
        typer.Option("--ledger", help="Also forget ingested URLs so they can be re-ingested."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove every passage from the knowledge base."""
    cfg = load_cfg()
    db_path = resolve_db(db, cfg)
    if not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)

    conn = open_db(db_path)
    try:
        repo = Repository(conn)
        store = SqlitePassageStore(repo)
        count = store.count()

        console.print(f"\nClear knowledge base: [bold]{db_path}[/]")
        console.print(f"  Passages: {count}  |  Ledger: {'cleared' if ledger else 'kept'}")

        if not yes:
            if not typer.confirm("Confirm clear?", default=False):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)

        store.clear()
        if ledger:
            repo.clear_articles()
    finally:
        conn.close()

    console.print(f"\n[green]✓[/] Cleared {count} passage(s)")
    if not ledger:
        console.print(f"\n{warn_ledger_kept()}")
