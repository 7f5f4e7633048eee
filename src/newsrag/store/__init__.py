"""Passage stores — in-memory and SQLite-backed."""

from newsrag.store.base import PassageStore, make_passages
from newsrag.store.memory import MemoryPassageStore
from newsrag.store.sqlite import SqlitePassageStore

__all__ = [
    "MemoryPassageStore",
    "PassageStore",
    "SqlitePassageStore",
    "make_passages",
]
