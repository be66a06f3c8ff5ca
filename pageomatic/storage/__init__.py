"""Storage layer for Page-O-Matic."""

from pageomatic.storage.database import Database, get_db
from pageomatic.storage.repositories import PageComponentRepository

__all__ = [
    "Database",
    "get_db",
    "PageComponentRepository",
]
