"""Repository for clothing item persistence."""

from __future__ import annotations

import sqlite3
from typing import List, Optional

from closet_rental.db.connection import transaction
from closet_rental.domain.models import ClothingItem
from closet_rental.logging_config import get_logger
from closet_rental.repositories.mappers import (
    item_from_row,
    item_to_record,
    like_pattern,
)


class ClothingItemRepo:
    """CRUD operations for clothing items."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def create(
        self,
        name: str,
        size: str,
        rental_price: float,
        quantity: int,
        image_url: str = "",
    ) -> ClothingItem:
        item = ClothingItem(
            id=None,
            name=name,
            size=size,
            rental_price=rental_price,
            quantity=quantity,
            image_url=image_url,
        )
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    INSERT INTO clothing_items (
                        name,
                        size,
                        rental_price,
                        quantity,
                        image_url
                    )
                    VALUES (:name, :size, :rental_price, :quantity, :image_url)
                    """,
                    item_to_record(item),
                )
        except Exception:
            self._logger.exception("Failed to create clothing item")
            raise
        item.id = cursor.lastrowid
        return item

    def update(self, item: ClothingItem) -> Optional[ClothingItem]:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    UPDATE clothing_items
                    SET
                        name = :name,
                        size = :size,
                        rental_price = :rental_price,
                        quantity = :quantity,
                        image_url = :image_url
                    WHERE id = :id
                    """,
                    item_to_record(item),
                )
        except Exception:
            self._logger.exception("Failed to update clothing item id=%s", item.id)
            raise

        if cursor.rowcount == 0:
            return None
        return self.get_by_id(item.id or 0)

    def delete(self, item_id: int) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "DELETE FROM clothing_items WHERE id = ?",
                    (item_id,),
                )
        except Exception:
            self._logger.exception("Failed to delete clothing item id=%s", item_id)
            raise
        return cursor.rowcount > 0

    def list_all(self) -> List[ClothingItem]:
        """Return every item in insertion order."""
        try:
            rows = self._connection.execute(
                "SELECT * FROM clothing_items ORDER BY id"
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list clothing items")
            raise
        return [item_from_row(row) for row in rows]

    def search_by_name(self, term: str) -> List[ClothingItem]:
        term = term.strip()
        if not term:
            return self.list_all()
        try:
            rows = self._connection.execute(
                """
                SELECT * FROM clothing_items
                WHERE name LIKE ? ESCAPE '\\' OR size LIKE ? ESCAPE '\\'
                ORDER BY id
                """,
                (like_pattern(term), like_pattern(term)),
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to search clothing items term=%s", term)
            raise
        return [item_from_row(row) for row in rows]

    def get_by_id(self, item_id: int) -> Optional[ClothingItem]:
        try:
            row = self._connection.execute(
                "SELECT * FROM clothing_items WHERE id = ?",
                (item_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to get clothing item id=%s", item_id)
            raise
        return item_from_row(row) if row else None

    def price_table(self) -> dict[int, float]:
        """Map every item id to its current per-day rental price."""
        try:
            rows = self._connection.execute(
                "SELECT id, rental_price FROM clothing_items"
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to load rental price table")
            raise
        return {int(row["id"]): float(row["rental_price"]) for row in rows}

    def delete_all(self) -> None:
        try:
            with transaction(self._connection):
                self._connection.execute("DELETE FROM clothing_items")
        except Exception:
            self._logger.exception("Failed to delete all clothing items")
            raise
