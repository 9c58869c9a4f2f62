"""Database engine ownership and session configuration."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from chow.core.settings import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import chow.models  # noqa: E402,F401


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on FK enforcement (and ON DELETE CASCADE) for every SQLite connection."""

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def enable_sqlite_immediate_transactions(engine: Engine) -> None:
    """Open every SQLite transaction with BEGIN IMMEDIATE.

    pysqlite otherwise defers BEGIN until the first write, so reads made
    before it (such as the prior-vote lookup) run unlocked. Taking the write
    lock up front serialises writers the way row locks do on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def _disable_implicit_begin(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection: Any) -> None:
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def _engine_options(
    url: str,
    *,
    pool_size: int,
    pool_timeout: float,
    statement_timeout_ms: int | None,
) -> dict[str, Any]:
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        # SQLite serialises writers itself; wait on locks instead of failing fast.
        return {"connect_args": {"check_same_thread": False, "timeout": pool_timeout}}

    options: dict[str, Any] = {
        "pool_size": pool_size,
        "max_overflow": 0,
        "pool_timeout": pool_timeout,
    }
    if backend == "postgresql":
        options["isolation_level"] = "READ COMMITTED"
        if statement_timeout_ms:
            options["connect_args"] = {
                "options": f"-c statement_timeout={int(statement_timeout_ms)}",
            }
    return options


class Database:
    """Owns the engine (and therefore the connection pool) for one process.

    Constructed once at startup, handed to every request through
    :func:`get_db`, and disposed on shutdown.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 30,
        pool_timeout: float = 30.0,
        statement_timeout_ms: int | None = None,
        echo: bool = False,
    ) -> None:
        self.engine: Engine = create_engine(
            url,
            pool_pre_ping=True,
            echo=echo,
            **_engine_options(
                url,
                pool_size=pool_size,
                pool_timeout=pool_timeout,
                statement_timeout_ms=statement_timeout_ms,
            ),
        )
        if self.engine.dialect.name == "sqlite":
            enable_sqlite_foreign_keys(self.engine)
            enable_sqlite_immediate_transactions(self.engine)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Database engine created for %s", self.engine.url.render_as_string())

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        """Build a database handle from application settings."""
        return cls(
            settings.effective_database_url,
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout_seconds,
            statement_timeout_ms=settings.db_statement_timeout_ms,
            echo=settings.sql_debug,
        )

    def session(self) -> Session:
        """Return a new session bound to this database."""
        return self.session_factory()

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables."""
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
