"""Storage layer for Wiki-Tree."""

from wikitree.storage.database import Database, get_db, reset_db
from wikitree.storage.repositories import (
    ContentBlockRepository,
    SectionRepository,
)

__all__ = [
    "Database",
    "get_db",
    "reset_db",
    "SectionRepository",
    "ContentBlockRepository",
]
