"""Tests for newsrag.cli.errors — every message names the cause and the fix."""

from __future__ import annotations

import pytest

from newsrag.cli import errors


@pytest.mark.parametrize(
    ("message", "fix"),
    [
        (errors.err_no_db("kb.db"), "newsrag ingest"),
        (errors.err_no_sources(), "--sample"),
        (errors.err_article_file("Article #2 is not an object."), "'title'"),
        (errors.err_config("retrieval.top_k must be >= 1"), "newsrag.yaml"),
        (errors.warn_empty_store(), "newsrag ingest --sample"),
        (errors.warn_ledger_kept(), "newsrag clear --ledger"),
    ],
)
def test_message_contains_action(message: str, fix: str) -> None:
    assert fix in message
    assert "\n" in message


def test_no_db_names_path() -> None:
    assert "'kb.db'" in errors.err_no_db("kb.db")


def test_article_file_includes_cause() -> None:
    assert "Article #2 is not an object." in errors.err_article_file("Article #2 is not an object.")
