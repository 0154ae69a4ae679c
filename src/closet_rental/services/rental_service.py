"""Rental service for the check-out / return lifecycle."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from closet_rental.db.connection import transaction
from closet_rental.domain.models import Invoice, InvoiceLine, Rental, RentalStatus
from closet_rental.logging_config import get_logger
from closet_rental.repositories import ClothingItemRepo, CustomerRepo, rental_repo
from closet_rental.services.errors import NotFoundError, ValidationError
from closet_rental.services.inventory_service import InventoryService
from closet_rental.services.pricing import compute_price, rental_days
from closet_rental.services.validators import validate_checkout
from closet_rental.utils.dates import to_datetime

Clock = Callable[[], datetime]


class RentalService:
    """Service for rental business rules.

    A rental is created Active and moves to Returned exactly once, when
    ``return_rental`` prices it. Nothing else ever edits a rental.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        *,
        clock: Clock = datetime.now,
        enforce_availability: bool = False,
    ) -> None:
        self._connection = connection
        self._clock = clock
        self._enforce_availability = enforce_availability
        self._item_repo = ClothingItemRepo(connection)
        self._customer_repo = CustomerRepo(connection)
        self._inventory = InventoryService(connection)
        self._logger = get_logger(self.__class__.__name__)

    def check_out(
        self,
        customer_id: Any,
        lines: Iterable[Any],
        rental_date: Any,
        due_date: Any,
        discount_percent: Any = None,
        notes: Any = None,
    ) -> Rental:
        """Validate a check-out request and store it as an active rental.

        Availability is only enforced here when the service was built with
        ``enforce_availability``; otherwise the caller is expected to have
        checked ``InventoryService.available_count`` itself.
        """
        request = validate_checkout(
            customer_id, lines, rental_date, due_date, discount_percent, notes
        )
        if self._customer_repo.get_by_id(request.customer_id) is None:
            raise ValidationError(
                f"Customer {request.customer_id} does not exist.", field="customer_id"
            )
        for line in request.lines:
            if self._item_repo.get_by_id(line.item_id) is None:
                raise ValidationError(
                    f"Item {line.item_id} does not exist.", field="lines"
                )
        if self._enforce_availability:
            self._inventory.check_request(request.lines)

        rental = rental_repo.create_rental(
            request.customer_id,
            request.lines,
            request.rental_date,
            request.due_date,
            request.discount_percent,
            request.notes,
            connection=self._connection,
        )
        self._logger.info(
            "Checked out rental id=%s customer_id=%s lines=%s",
            rental.id,
            rental.customer_id,
            len(rental.lines),
        )
        return rental

    def return_rental(self, rental_id: int) -> Optional[Rental]:
        """Price an active rental at today's catalog prices and close it.

        Returns the updated rental, or ``None`` when the id is unknown or
        the rental was already returned.
        """
        returned_at = to_datetime(self._clock()).replace(microsecond=0)
        with transaction(self._connection):
            rental = rental_repo.get_rental(rental_id, connection=self._connection)
            if rental is None or not rental.is_active:
                self._logger.debug("Ignored return for rental id=%s", rental_id)
                return None
            price = compute_price(
                rental.lines,
                self._item_repo.price_table(),
                rental.rental_date,
                returned_at,
                rental.discount_percent,
            )
            if not rental_repo.mark_returned(
                rental_id,
                returned_at,
                price.total_price,
                connection=self._connection,
            ):
                return None
        rental.return_date = returned_at
        rental.total_price = price.total_price
        self._logger.info(
            "Returned rental id=%s days=%s total=%s",
            rental_id,
            price.rental_days,
            price.total_price,
        )
        return rental

    def delete_rental(self, rental_id: int) -> bool:
        rental = rental_repo.get_rental(rental_id, connection=self._connection)
        if rental is None:
            return False
        if rental.is_active:
            self._logger.warning("Deleting active rental id=%s", rental_id)
        return rental_repo.delete_rental(rental_id, connection=self._connection)

    def get_rental(self, rental_id: int) -> Optional[Rental]:
        return rental_repo.get_rental(rental_id, connection=self._connection)

    def list_rentals(
        self,
        *,
        status: Optional[RentalStatus | str] = None,
        customer_id: Optional[int] = None,
    ) -> list[Rental]:
        return rental_repo.list_rentals(
            status=status, customer_id=customer_id, connection=self._connection
        )

    def list_active(self) -> list[Rental]:
        """Active rentals, most recent check-out first."""
        rentals = self.list_rentals(status=RentalStatus.ACTIVE)
        rentals.sort(key=lambda rental: rental.rental_date, reverse=True)
        return rentals

    def list_returned(self) -> list[Rental]:
        """Returned rentals, most recent return first."""
        rentals = self.list_rentals(status=RentalStatus.RETURNED)
        rentals.sort(key=lambda rental: rental.return_date or rental.rental_date, reverse=True)
        return rentals

    def build_invoice(self, rental_id: int) -> Invoice:
        """Itemised bill for a returned rental.

        Line prices come from the current catalog; the total is the one
        stored when the rental was returned.
        """
        rental = rental_repo.get_rental(rental_id, connection=self._connection)
        if rental is None:
            raise NotFoundError(f"Rental {rental_id} not found.")
        if rental.return_date is None or rental.total_price is None:
            raise ValidationError(
                f"Rental {rental_id} has not been returned yet.", field="rental_id"
            )
        days = rental_days(rental.rental_date, rental.return_date)
        lines: list[InvoiceLine] = []
        for line in rental.lines:
            item = self._item_repo.get_by_id(line.item_id)
            if item is None:
                continue
            lines.append(
                InvoiceLine(
                    item_id=line.item_id,
                    name=item.name,
                    size=item.size,
                    unit_price=item.rental_price,
                    quantity=line.quantity,
                    days=days,
                    subtotal=item.rental_price * line.quantity * days,
                )
            )
        subtotal = sum(line.subtotal for line in lines)
        discount = rental.discount_percent or 0.0
        return Invoice(
            rental=rental,
            customer=self._customer_repo.get_by_id(rental.customer_id),
            lines=lines,
            rental_days=days,
            subtotal=subtotal,
            discount_percent=discount,
            discount_amount=subtotal * discount / 100,
            total_price=rental.total_price,
        )
