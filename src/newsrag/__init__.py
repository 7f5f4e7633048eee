"""newsrag — retrieval-augmented question answering over ingested news articles."""

__version__ = "0.1.0"
