"""Database engine setup for SQLite with WAL mode.

WAL mode lets readers proceed while a writer holds the lock; writers
queue on SQLite's busy timeout. The DB lives at
``{root}/.catalogctl/catalog.db`` unless configured otherwise.

SQLAlchemy Core (not ORM) is used: every conditional write is a single
explicit ``UPDATE ... WHERE version = ?`` statement.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from catalogctl.infrastructure.database.schema import metadata

DATA_DIRNAME = ".catalogctl"
DB_FILENAME = "catalog.db"


def create_db_engine(db_path: Path, *, busy_timeout: float = 5.0) -> Engine:
    """Create a SQLite engine with WAL mode, usable across threads."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": busy_timeout, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(
    root: Path,
    *,
    db_path: Path | None = None,
    busy_timeout: float = 5.0,
) -> Engine:
    """Initialize the catalog database under *root*.

    Creates the ``.catalogctl/`` directory (or the parent of an explicit
    *db_path*) and all tables from :data:`schema.metadata`.

    Idempotent — safe to call on an existing catalog.

    Returns the engine ready for use.
    """
    if db_path is None:
        db_path = root / DATA_DIRNAME / DB_FILENAME
    elif not db_path.is_absolute():
        db_path = root / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(db_path, busy_timeout=busy_timeout)
    metadata.create_all(engine)
    return engine
