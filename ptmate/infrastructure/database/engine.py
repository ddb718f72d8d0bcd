"""
Database connection management.

Provides the engine factory and a session context manager. One Database
is created at application startup and shared read-only by every request;
each request gets its own short-lived SQLAlchemy session from it.

Using the repository pattern means most code never touches this module
directly - it goes through repositories which handle the translation
between domain models and database rows.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .tables import Base

logger = logging.getLogger(__name__)


class DatabaseConnectionError(Exception):
    """Raised when the database cannot be reached."""
    pass


@dataclass
class DatabaseConfig:
    """Configuration for the relational database."""
    url: str
    echo: bool = False


def _engine_options(url: str) -> dict:
    """
    Driver-specific engine options.

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory database only exists for as long as its single connection
    does, so it is pinned with StaticPool.
    """
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    options: dict = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
        options["poolclass"] = StaticPool
    return options


class Database:
    """Engine plus session factory for one database."""

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: Engine = create_engine(
            config.url,
            echo=config.echo,
            **_engine_options(config.url),
        )
        self._sessionmaker = sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
        )

        logger.info(
            "Initialized database engine",
            extra={"dialect": self._engine.dialect.name}
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(self._engine)
        logger.info("Database schema is up to date")

    def drop_schema(self) -> None:
        Base.metadata.drop_all(self._engine)
        logger.warning("Dropped all tables")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a session with automatic cleanup.

        Usage:
            with database.session() as session:
                repo = ClientRepository(session)
                ...

        Repositories commit their own writes; anything left uncommitted
        when an exception escapes is rolled back.
        """
        session = self._sessionmaker()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> None:
        """Run a trivial query. Raises DatabaseConnectionError on failure."""
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Database ping failed", extra={"error": str(e)})
            raise DatabaseConnectionError(f"Database unreachable: {e}")

    def dispose(self) -> None:
        self._engine.dispose()
        logger.debug("Disposed database engine")


def create_database(config: DatabaseConfig) -> Database:
    """Create the Database for a configuration."""
    return Database(config)
