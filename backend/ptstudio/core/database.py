"""Engine-level tweaks applied to every SQLAlchemy engine the app creates.

SQLite ships with foreign keys disabled and lets the ``sqlite3`` driver open
transactions implicitly, which breaks ``ON DELETE CASCADE`` and SAVEPOINTs.
The listeners below make SQLite behave like PostgreSQL for those two concerns
so aggregate writes roll back identically on both backends.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Connection, Engine


def _sqlite_on_connect(dbapi_connection: Any, connection_record: Any) -> None:
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    # Let SQLAlchemy emit BEGIN itself (see _sqlite_on_begin)
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _sqlite_on_begin(conn: Connection) -> None:
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN")


def enable_sqlite_integrity() -> None:
    """Install the SQLite listeners once per process (idempotent)."""
    if not event.contains(Engine, "connect", _sqlite_on_connect):
        event.listen(Engine, "connect", _sqlite_on_connect)
    if not event.contains(Engine, "begin", _sqlite_on_begin):
        event.listen(Engine, "begin", _sqlite_on_begin)


__all__ = ["enable_sqlite_integrity"]
