"""newsrag ingest pipeline — article loading, chunking, URL de-duplication."""

from newsrag.ingest.chunker import ArticleChunker
from newsrag.ingest.pipeline import (
    ArticleError,
    IngestResult,
    ingest_articles,
    load_articles,
    sample_articles,
)

__all__ = [
    "ArticleChunker",
    "ArticleError",
    "IngestResult",
    "ingest_articles",
    "load_articles",
    "sample_articles",
]
