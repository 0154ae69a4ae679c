"""Referential integrity rules for deletions."""

from __future__ import annotations

import sqlite3
from typing import Optional

from closet_rental.repositories import rental_repo


class IntegrityService:
    """Refuses deletions that would leave a rental pointing at nothing."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def customer_deletion_block(self, customer_id: int) -> Optional[str]:
        """Return why the customer cannot be deleted, or ``None`` if it can."""
        count = rental_repo.count_rentals_for_customer(
            customer_id, connection=self._connection
        )
        if count == 0:
            return None
        noun = "rental" if count == 1 else "rentals"
        return (
            f"Customer has {count} {noun} on record and cannot be deleted."
        )

    def can_delete_customer(self, customer_id: int) -> bool:
        return self.customer_deletion_block(customer_id) is None
