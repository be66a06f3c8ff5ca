"""Shared pytest fixtures and test utilities for Page-O-Matic tests."""

import os
import tempfile
from typing import Generator

import pytest

from pageomatic.sections.registry import create_default
from pageomatic.sections.types import SectionType
from pageomatic.services.document import PageDocument
from pageomatic.services.page_service import PageService
from pageomatic.storage.database import Database, reset_db


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Database instance with tables created
    """
    # Create temporary database file
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Reset global database instance
    reset_db()

    # Create database
    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    # Cleanup
    database.drop_tables()
    database.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_session(temp_db):
    """Get a database session from temp_db."""
    with temp_db.session() as session:
        yield session


@pytest.fixture
def page_service(temp_db):
    """Create a page service instance."""
    with temp_db.session() as session:
        yield PageService(session)


@pytest.fixture
def sample_document():
    """A small dirty document with one section of three common types."""
    return PageDocument(
        sections=[
            create_default(SectionType.HERO_RESPONSIVE, "hero-1"),
            create_default(SectionType.TEXT, "text-1"),
            create_default(SectionType.FEATURE_CARD_GRID, "grid-1"),
        ],
        dirty=True,
    )


def make_document(*tags, dirty: bool = False) -> PageDocument:
    """Build a document holding one default section per tag, ids s0, s1, ..."""
    return PageDocument(
        sections=[create_default(tag, f"s{index}") for index, tag in enumerate(tags)],
        dirty=dirty,
    )
