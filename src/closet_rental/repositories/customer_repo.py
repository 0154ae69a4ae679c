"""Repository for customer persistence."""

from __future__ import annotations

import sqlite3
from typing import List, Optional

from closet_rental.db.connection import transaction
from closet_rental.domain.models import Customer
from closet_rental.logging_config import get_logger
from closet_rental.repositories.mappers import (
    customer_from_row,
    customer_to_record,
    like_pattern,
)


class CustomerRepo:
    """CRUD operations for customers."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def create(self, name: str, phone: str, address: str) -> Customer:
        customer = Customer(id=None, name=name, phone=phone, address=address)
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    INSERT INTO customers (name, phone, address)
                    VALUES (:name, :phone, :address)
                    """,
                    customer_to_record(customer),
                )
        except Exception:
            self._logger.exception("Failed to create customer")
            raise
        customer.id = cursor.lastrowid
        return customer

    def update(self, customer: Customer) -> Optional[Customer]:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    UPDATE customers
                    SET
                        name = :name,
                        phone = :phone,
                        address = :address
                    WHERE id = :id
                    """,
                    customer_to_record(customer),
                )
        except Exception:
            self._logger.exception("Failed to update customer id=%s", customer.id)
            raise

        if cursor.rowcount == 0:
            return None
        return self.get_by_id(customer.id or 0)

    def delete(self, customer_id: int) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "DELETE FROM customers WHERE id = ?",
                    (customer_id,),
                )
        except Exception:
            self._logger.exception("Failed to delete customer id=%s", customer_id)
            raise
        return cursor.rowcount > 0

    def list_all(self) -> List[Customer]:
        try:
            rows = self._connection.execute(
                "SELECT * FROM customers ORDER BY id"
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list customers")
            raise
        return [customer_from_row(row) for row in rows]

    def search(self, term: str) -> List[Customer]:
        """Match the term against name or phone."""
        term = term.strip()
        if not term:
            return self.list_all()
        try:
            rows = self._connection.execute(
                """
                SELECT * FROM customers
                WHERE name LIKE ? ESCAPE '\\' OR phone LIKE ? ESCAPE '\\'
                ORDER BY id
                """,
                (like_pattern(term), like_pattern(term)),
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to search customers term=%s", term)
            raise
        return [customer_from_row(row) for row in rows]

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        try:
            row = self._connection.execute(
                "SELECT * FROM customers WHERE id = ?",
                (customer_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to get customer id=%s", customer_id)
            raise
        return customer_from_row(row) if row else None

    def delete_all(self) -> None:
        try:
            with transaction(self._connection):
                self._connection.execute("DELETE FROM customers")
        except Exception:
            self._logger.exception("Failed to delete all customers")
            raise
