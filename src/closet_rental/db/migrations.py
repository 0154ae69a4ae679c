"""Database migrations for SQLite schema versioning."""

from __future__ import annotations

from dataclasses import dataclass
import sqlite3

from closet_rental.db.connection import transaction
from closet_rental.logging_config import get_logger


@dataclass(frozen=True)
class Migration:
    version: int
    script: str


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        script="""
        CREATE TABLE IF NOT EXISTS clothing_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            size TEXT NOT NULL,
            rental_price REAL NOT NULL DEFAULT 0 CHECK (rental_price >= 0),
            quantity INTEGER NOT NULL DEFAULT 0 CHECK (quantity >= 0),
            image_url TEXT NOT NULL DEFAULT ''
        );

        CREATE TABLE IF NOT EXISTS customers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            phone TEXT NOT NULL,
            address TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS rentals (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            customer_id INTEGER NOT NULL,
            rental_date TEXT NOT NULL,
            due_date TEXT NOT NULL,
            return_date TEXT,
            total_price INTEGER,
            discount_percent REAL
                CHECK (discount_percent IS NULL
                       OR (discount_percent >= 0 AND discount_percent <= 100)),
            notes TEXT,
            FOREIGN KEY (customer_id) REFERENCES customers(id)
        );

        CREATE TABLE IF NOT EXISTS rental_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            rental_id INTEGER NOT NULL,
            item_id INTEGER NOT NULL,
            quantity INTEGER NOT NULL CHECK (quantity >= 1),
            FOREIGN KEY (rental_id) REFERENCES rentals(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_rentals_customer_id
            ON rentals(customer_id);
        CREATE INDEX IF NOT EXISTS idx_rentals_return_date
            ON rentals(return_date);
        CREATE INDEX IF NOT EXISTS idx_rentals_rental_date
            ON rentals(rental_date);
        CREATE INDEX IF NOT EXISTS idx_rental_items_rental_id
            ON rental_items(rental_id);
        CREATE INDEX IF NOT EXISTS idx_rental_items_item_id
            ON rental_items(item_id);
        """,
    ),
]


def _fetch_schema_version(connection: sqlite3.Connection) -> int:
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS app_meta (
            schema_version INTEGER NOT NULL
        );
        """
    )
    row = connection.execute(
        "SELECT schema_version FROM app_meta LIMIT 1"
    ).fetchone()
    if row is None:
        connection.execute("INSERT INTO app_meta (schema_version) VALUES (0)")
        return 0
    return int(row[0])


def apply_migrations(connection: sqlite3.Connection) -> int:
    """Apply pending database migrations and return the resulting version."""
    logger = get_logger("migrations")
    with transaction(connection):
        current_version = _fetch_schema_version(connection)

    for migration in MIGRATIONS:
        if migration.version <= current_version:
            continue
        try:
            with transaction(connection):
                connection.executescript(migration.script)
                connection.execute(
                    "UPDATE app_meta SET schema_version = ?",
                    (migration.version,),
                )
        except sqlite3.Error:
            logger.exception("Failed to apply migration version=%s", migration.version)
            raise
        logger.debug("Applied migration version=%s", migration.version)
        current_version = migration.version
    return current_version
