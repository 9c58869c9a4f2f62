"""Create the configured PostgreSQL database when it does not exist yet."""
from __future__ import annotations

import argparse
import logging
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql

from chow.core.logging import configure_logging
from chow.core.settings import settings

logger = logging.getLogger("chow.ensure_db")


def to_libpq_url(uri: str) -> str:
    """Return ``uri`` with any SQLAlchemy driver suffix removed.

    ``postgresql+psycopg://...`` becomes ``postgresql://...`` so that
    ``psycopg.connect`` accepts it. Surrounding quotes from .env files are dropped.
    """
    uri = (uri or "").strip().strip("'\"")
    if not uri:
        raise ValueError("database URL is empty")

    parts = urlsplit(uri)
    scheme = parts.scheme.split("+", 1)[0]
    if scheme not in ("postgresql", "postgres"):
        raise ValueError(f"not a PostgreSQL URL: {parts.scheme or '<no scheme>'}")
    return urlunsplit(("postgresql", parts.netloc, parts.path, parts.query, parts.fragment))


def maintenance_target(db_url: str) -> tuple[str, str]:
    """Split ``db_url`` into ``(maintenance_url, database_name)``."""
    parts = urlsplit(to_libpq_url(db_url))
    target_db = parts.path.lstrip("/") or "postgres"
    admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, ""))
    return admin_url, target_db


def ensure_database_exists(db_url: str) -> bool:
    """Create the database named in ``db_url``; return True if it was created."""
    admin_url, target_db = maintenance_target(db_url)
    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is not None:
            logger.info("Database %s already exists", target_db)
            return False
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
    logger.info("Created database %s", target_db)
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ensure the configured database exists")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to the effective settings URL)",
    )
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    try:
        ensure_database_exists(args.url or settings.effective_database_url)
    except (ValueError, psycopg.Error) as exc:
        logger.error("Could not ensure database: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
