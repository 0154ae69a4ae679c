"""Database connection helpers."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from closet_rental.config import IN_MEMORY_DATABASE


def get_connection(database: Path | str = IN_MEMORY_DATABASE) -> sqlite3.Connection:
    """Create a SQLite connection with foreign keys enabled.

    The default is a private in-memory database that lives as long as the
    connection; pass a file path to keep data between runs.
    """
    if str(database) != IN_MEMORY_DATABASE:
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(str(database))
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON;")
    return connection


@contextmanager
def transaction(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Provide a transaction scope for SQLite operations."""
    try:
        yield connection
    except Exception:
        connection.rollback()
        raise
    else:
        connection.commit()
