"""Clothing catalog service."""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from closet_rental.domain.models import AvailabilityFilter, ClothingItem
from closet_rental.logging_config import get_logger
from closet_rental.repositories import ClothingItemRepo
from closet_rental.services.inventory_service import InventoryService
from closet_rental.services.validators import validate_item


class CatalogService:
    """Create, edit and remove rentable clothing items."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._repo = ClothingItemRepo(connection)
        self._inventory = InventoryService(connection)
        self._logger = get_logger(self.__class__.__name__)

    def create_item(
        self,
        name: Any,
        size: Any,
        rental_price: Any,
        quantity: Any,
        image_url: Any = "",
    ) -> ClothingItem:
        data = validate_item(name, size, rental_price, quantity, image_url)
        item = self._repo.create(
            name=data.name,
            size=data.size,
            rental_price=data.rental_price,
            quantity=data.quantity,
            image_url=data.image_url,
        )
        self._logger.info("Created item id=%s name=%s", item.id, item.name)
        return item

    def update_item(self, item: ClothingItem) -> Optional[ClothingItem]:
        """Replace the stored item with the same id; unknown ids are ignored."""
        if item.id is None:
            return None
        data = validate_item(
            item.name, item.size, item.rental_price, item.quantity, item.image_url
        )
        updated = self._repo.update(
            ClothingItem(
                id=item.id,
                name=data.name,
                size=data.size,
                rental_price=data.rental_price,
                quantity=data.quantity,
                image_url=data.image_url,
            )
        )
        if updated is None:
            self._logger.debug("Ignored update for unknown item id=%s", item.id)
        return updated

    def delete_item(self, item_id: int) -> bool:
        deleted = self._repo.delete(item_id)
        if deleted:
            self._logger.info("Deleted item id=%s", item_id)
        return deleted

    def get_item(self, item_id: int) -> Optional[ClothingItem]:
        return self._repo.get_by_id(item_id)

    def list_items(self) -> list[ClothingItem]:
        return self._repo.list_all()

    def search_items(
        self,
        term: str = "",
        availability: AvailabilityFilter | str = AvailabilityFilter.ALL,
    ) -> list[ClothingItem]:
        """Items matching ``term`` by name or size, narrowed by stock state."""
        matches = self._repo.search_by_name(term)
        availability = AvailabilityFilter(availability)
        if availability == AvailabilityFilter.ALL:
            return matches
        allowed = {
            row.item.id for row in self._inventory.list_availability(availability)
        }
        return [item for item in matches if item.id in allowed]
