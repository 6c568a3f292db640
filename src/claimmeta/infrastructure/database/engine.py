"""Database engine setup.

SQLite is the default persistence layer: WAL mode for concurrent reads,
foreign keys for referential integrity between claims, dialects and
mappings. Any SQLAlchemy URL can be supplied through settings.

SQLAlchemy Core (not ORM) is used because the repositories map rows onto
pydantic models themselves; no benefit from identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from claimmeta.infrastructure.database.schema import metadata


def create_db_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections get WAL mode and foreign keys."""
    engine = create_engine(url, echo=echo)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_database(url: str, *, echo: bool = False) -> Engine:
    """Create the engine and all tables from :data:`schema.metadata`.

    For file-backed SQLite URLs the parent directory is created first.
    Idempotent; safe to call on an existing database.

    Returns the engine ready for use.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(url, echo=echo)
    metadata.create_all(engine)
    return engine
