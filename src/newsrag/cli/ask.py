"""newsrag ask / chat — answer questions from the knowledge base.

ask   one question, no history.
chat  interactive session. History lives in memory for the session only.
      Commands: /reset (forget history), /clear-cache, /quit.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from newsrag.cli.common import build_engine, console, load_cfg, open_db, resolve_db
from newsrag.cli.errors import err_no_db, warn_empty_store
from newsrag.dates import format_date, to_iso, utc_now
from newsrag.models import ChatMessage, ScoredPassage

_QUIT_COMMANDS = {"/quit", "/exit"}


def ask_cmd(
    query: Annotated[str, typer.Argument(help="Question to answer.")],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the newsrag database."),
    ] = None,
    top_k: Annotated[
        int | None,
        typer.Option("--top-k", "-k", min=1, help="Passages to retrieve (default: config)."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for tie-breaking and phrasing (reproducible output)."),
    ] = None,
    show_passages: Annotated[
        bool,
        typer.Option("--show-passages", help="Print the retrieved passages and scores."),
    ] = False,
) -> None:
    """Answer a single question."""
    cfg = load_cfg()
    db_path = resolve_db(db, cfg)
    if not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)

    conn = open_db(db_path)
    try:
        engine = build_engine(conn, cfg, top_k=top_k, seed=seed)
        if engine.retriever.store.count() == 0:
            console.print(warn_empty_store())
        history = [ChatMessage(role="user", content=query, timestamp=to_iso(utc_now()))]
        answer = engine.respond(query, history)
    finally:
        conn.close()

    if show_passages:
        _show_passages(answer.passages)
    console.print(answer.text, markup=False, highlight=False)


def chat_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the newsrag database."),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for tie-breaking and phrasing (reproducible output)."),
    ] = None,
) -> None:
    """Start an interactive chat session."""
    cfg = load_cfg()
    db_path = resolve_db(db, cfg)
    if not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)

    conn = open_db(db_path)
    history: list[ChatMessage] = []
    try:
        engine = build_engine(conn, cfg, seed=seed)
        console.print(
            f"[bold]newsrag chat[/] — {engine.retriever.store.count()} passages. "
            "[dim]/reset  /clear-cache  /quit[/]"
        )
        while True:
            try:
                message = typer.prompt("You").strip()
            except typer.Abort:
                break

            if not message:
                continue
            if message in _QUIT_COMMANDS:
                break
            if message == "/reset":
                history.clear()
                console.print("[dim]Conversation history cleared.[/]")
                continue
            if message == "/clear-cache":
                cache = engine.synthesizer.cache
                if cache is not None:
                    cache.clear()
                console.print("[dim]Response cache cleared.[/]")
                continue

            history.append(ChatMessage(role="user", content=message, timestamp=to_iso(utc_now())))
            reply = engine.answer(message, history)
            history.append(ChatMessage(role="assistant", content=reply, timestamp=to_iso(utc_now())))
            console.print(f"\n{reply}\n", markup=False, highlight=False)
    finally:
        conn.close()


def _show_passages(passages: list[ScoredPassage]) -> None:
    table = Table(title="Retrieved passages")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Article")
    table.add_column("Published")
    table.add_column("Type")
    for i, p in enumerate(passages, start=1):
        table.add_row(
            str(i), f"{p.score:.2f}", p.article_title, format_date(p.published_at), p.chunk_type
        )
    console.print(table)
