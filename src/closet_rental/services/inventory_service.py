"""Inventory availability calculations."""

from __future__ import annotations

import sqlite3
from typing import Iterable, Optional

from closet_rental.domain.models import (
    AvailabilityFilter,
    ClothingItem,
    ItemAvailability,
    RentalLine,
)
from closet_rental.logging_config import get_logger
from closet_rental.repositories import ClothingItemRepo, rental_repo
from closet_rental.services.errors import AvailabilityError


class InventoryService:
    """Live availability derived from active rentals.

    Nothing is cached: every call sums the active rental lines as they are
    right now, and over-committed items report a negative available count.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._item_repo = ClothingItemRepo(connection)
        self._logger = get_logger(self.__class__.__name__)

    def rented_counts(self) -> dict[int, int]:
        return rental_repo.active_quantities(connection=self._connection)

    def rented_count(self, item_id: int) -> int:
        counts = rental_repo.active_quantities(item_id, connection=self._connection)
        return counts.get(item_id, 0)

    def available_count(self, item_id: int) -> Optional[int]:
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            return None
        return item.quantity - self.rented_count(item_id)

    def availability(self, item_id: int) -> Optional[ItemAvailability]:
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            return None
        return self._build(item, self.rented_count(item_id))

    def list_availability(
        self, availability: AvailabilityFilter | str = AvailabilityFilter.ALL
    ) -> list[ItemAvailability]:
        availability = AvailabilityFilter(availability)
        counts = self.rented_counts()
        rows = [
            self._build(item, counts.get(item.id or 0, 0))
            for item in self._item_repo.list_all()
        ]
        if availability == AvailabilityFilter.AVAILABLE:
            return [row for row in rows if row.available > 0]
        if availability == AvailabilityFilter.UNAVAILABLE:
            return [row for row in rows if row.available <= 0]
        return rows

    def check_request(self, lines: Iterable[RentalLine]) -> None:
        """Raise ``AvailabilityError`` if any line asks for more than is free."""
        counts = self.rented_counts()
        for line in lines:
            item = self._item_repo.get_by_id(line.item_id)
            if item is None:
                continue
            available = item.quantity - counts.get(line.item_id, 0)
            if line.quantity > available:
                self._logger.info(
                    "Rejected over-allocation item_id=%s requested=%s available=%s",
                    line.item_id,
                    line.quantity,
                    available,
                )
                raise AvailabilityError(
                    f"Not enough stock for {item.name} ({item.size}). "
                    f"Available {max(available, 0)}, requested {line.quantity}.",
                    item_id=line.item_id,
                    requested=line.quantity,
                    available=available,
                )

    @staticmethod
    def _build(item: ClothingItem, rented: int) -> ItemAvailability:
        if item.quantity - rented < 0:
            get_logger(InventoryService.__name__).warning(
                "Item id=%s is over-allocated: owned=%s rented=%s",
                item.id,
                item.quantity,
                rented,
            )
        return ItemAvailability(item=item, rented=rented, available=item.quantity - rented)
