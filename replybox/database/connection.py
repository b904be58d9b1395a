"""
Database connection and session management.

One Database object per process: it owns the SQLAlchemy engine and session
factory, and hands out short-lived sessions through session_scope().
Uses the configured URL (Postgres when set, otherwise a SQLite file).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from replybox.config.env import mask_database_url
from replybox.database.models import Base
from replybox.replybox_logging import get_logger

logger = get_logger(__name__)


class Database:
    """Engine plus session factory for one database URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("database_engine_created", url=mask_database_url(url))

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager for a single session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """
        Create tables if they do not exist.
        Uses Base.metadata.create_all. Safe to call on every startup.
        Runs migration to add options.version if missing.
        """
        try:
            Base.metadata.create_all(bind=self.engine)
            self._migrate_option_version()
            logger.info("database_init_db", url=mask_database_url(self.url))
        except Exception as e:
            logger.exception("database_init_db_failed", error=str(e))
            raise

    def _migrate_option_version(self) -> None:
        """Add the version column to options tables created before it existed."""
        columns = {c["name"] for c in inspect(self.engine).get_columns("options")}
        if "version" in columns:
            return
        with self.engine.begin() as conn:
            conn.execute(text("ALTER TABLE options ADD COLUMN version INTEGER NOT NULL DEFAULT 0"))
        logger.info("database_migration", added="options.version")

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(url: str, *, create_tables: bool = True) -> Database:
    """Return a Database for the given URL, with tables created unless create_tables=False."""
    db = Database(url)
    if create_tables:
        db.init_db()
    return db
