"""Engine and session management for the component store."""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pageomatic.config import get_settings
from pageomatic.models.base import Base

logger = logging.getLogger(__name__)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict[str, Any]:
    settings = get_settings()
    options: dict[str, Any] = {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_pre_ping": True,
        "echo": settings.sql_echo,
    }
    if database_url.startswith("sqlite"):
        # Sessions are handed across threads by the HTTP API
        options["connect_args"] = {"check_same_thread": False}
    return options


class Database:
    """Owns the engine and hands out sessions for page loads and saves."""

    def __init__(self, database_url: str | None = None, pool_size: int | None = None, max_overflow: int | None = None):
        """
        Initialize database connection.

        Args:
            database_url: Database connection URL. If None, reads from settings.
                         Supports PostgreSQL and SQLite.
            pool_size: Connections kept in the pool. If None, uses settings.
            max_overflow: Connections allowed beyond pool_size. If None, uses settings.
        """
        settings = get_settings()
        self.database_url = database_url or settings.get_database_url()
        self.engine = create_engine(
            self.database_url,
            **_engine_options(
                self.database_url,
                settings.db_pool_size if pool_size is None else pool_size,
                settings.db_max_overflow if max_overflow is None else max_overflow,
            ),
        )
        # Saved components stay readable after their own commit
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    def create_tables(self) -> None:
        """Create the page_components table if missing."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Ensured tables on %s", self.engine.url.render_as_string(hide_password=True))

    def drop_tables(self) -> None:
        """Drop all tables."""
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()

    def ping(self) -> bool:
        """Check that the store answers a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database ping failed: %s", e)
            return False

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Session scope: commits on exit, rolls back on error.

        Services may commit inside the scope; the page service commits once per
        component so one failed write does not undo the others.

        Usage:
            with db.session() as session:
                PageService(session).save(...)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global database instance
_db: Database | None = None


def get_db(database_url: str | None = None) -> Database:
    """
    Get or create the global database instance.

    Args:
        database_url: Database connection URL. Only used on first call.

    Returns:
        Database instance
    """
    global _db
    if _db is None:
        _db = Database(database_url)
    return _db


def reset_db() -> None:
    """Reset the global database instance (useful for testing)."""
    global _db
    _db = None
