"""Database models for Page-O-Matic."""

from pageomatic.models.base import Base
from pageomatic.models.component import PageComponent

__all__ = ["Base", "PageComponent"]
