"""newsrag database layer."""

from newsrag.db.connection import Database
from newsrag.db.migrations import MIGRATIONS, initialize, run_migrations
from newsrag.db.repository import Repository

__all__ = [
    "Database",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
    "Repository",
]
