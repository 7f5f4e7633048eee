"""newsrag rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from newsrag.cli.errors import err_no_db
    console.print(err_no_db(".newsrag.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_no_db(db_path: str = ".newsrag.db") -> str:
    """No database at *db_path* — nothing has been ingested yet."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  newsrag ingest --source articles.json   (or --sample)"
    )


def err_no_sources() -> str:
    """ingest called without --source or --sample."""
    return (
        "[red]Error:[/] Nothing to ingest.\n"
        "  Use --source PATH (JSON array or JSON Lines), or --sample for the demo articles."
    )


def err_article_file(message: str) -> str:
    """Article file could not be parsed or a record is invalid."""
    return (
        f"[red]Error:[/] {message}\n"
        "  Each article needs 'title', 'content' and 'url'; "
        "'summary', 'publishedAt' and 'id' are optional."
    )


def err_config(message: str) -> str:
    """newsrag.yaml, global config or NEWSRAG_* environment holds an invalid value."""
    return (
        f"[red]Error:[/] Invalid configuration: {message}\n"
        "  Check newsrag.yaml, ~/.newsrag/config.yaml and NEWSRAG_* environment variables."
    )


def warn_empty_store() -> str:
    """The passage store is empty — answers will fall back to 'no information'."""
    return (
        "[yellow]Warning:[/] The knowledge base has no passages.\n"
        "  Run:  newsrag ingest --sample   to load demo articles."
    )


def warn_ledger_kept() -> str:
    """Passages cleared but the ingestion ledger kept — re-ingest will skip known URLs."""
    return (
        "[yellow]⚠[/] The ingestion ledger was kept; previously ingested URLs will be skipped.\n"
        "  To re-ingest them, run:  newsrag clear --ledger"
    )
