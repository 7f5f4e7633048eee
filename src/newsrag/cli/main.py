"""newsrag CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from newsrag.cli.ask import ask_cmd, chat_cmd
from newsrag.cli.common import setup_logging
from newsrag.cli.ingest import ingest_cmd
from newsrag.cli.status import clear_cmd, status_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("newsrag")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"newsrag {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="newsrag",
    help=(
        "newsrag — question answering over ingested news articles.\n\n"
        "  newsrag ingest  Load articles into the knowledge base.\n"
        "  newsrag ask     Answer one question from the ingested passages."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log retrieval and synthesis details."),
    ] = False,
) -> None:
    """newsrag — question answering over ingested news articles."""
    setup_logging(verbose)


app.command("ingest")(ingest_cmd)
app.command("ask")(ask_cmd)
app.command("chat")(chat_cmd)
app.command("status")(status_cmd)
app.command("clear")(clear_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed newsrag version."""
    typer.echo(f"newsrag {_installed_version()}")


if __name__ == "__main__":
    app()
