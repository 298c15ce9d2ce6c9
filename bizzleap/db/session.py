"""
Database handle and session management.

The :class:`Database` owns the SQLModel engine and its connection pool.
It is constructed explicitly, opened at application startup, disposed
at shutdown, and reached by endpoints through :func:`get_db`.
"""

import logging
from typing import Any, Generator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine, text

from bizzleap.core.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Explicitly managed engine + connection pool."""

    def __init__(self, url: str, **engine_kwargs: Any):
        self.url = url
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DEBUG,  # Log SQL queries in debug mode
            pool_pre_ping=True,   # Verify connections before using
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,  # Acquire timeout
        )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> None:
        """Create the engine and check that the store answers."""
        if self._engine is not None:
            return
        self._engine = create_engine(self.url, **self.engine_kwargs)
        if self._engine.dialect.name == "sqlite":
            # SQLite ignores FOREIGN KEY ... ON DELETE CASCADE unless asked
            event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)
        try:
            self.ping()
        except Exception:
            self.close()
            raise
        logger.info("Database connected: %s", self._engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database connection pool closed")

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def create_all(self) -> None:
        """Create all tables known to SQLModel metadata."""
        import bizzleap.db.base  # noqa: F401

        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session bound to the application's Database

    Example:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.exec(select(Item)).all()
    """
    with get_database(request).session() as session:
        yield session
