"""Customer service."""

from __future__ import annotations

import sqlite3
from typing import Any, Optional

from closet_rental.domain.models import Customer, CustomerHistory, DeletionResult
from closet_rental.logging_config import get_logger
from closet_rental.repositories import CustomerRepo, rental_repo
from closet_rental.services.errors import NotFoundError
from closet_rental.services.integrity_service import IntegrityService
from closet_rental.services.validators import validate_customer


class CustomerService:
    """Customer records and their rental history."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._repo = CustomerRepo(connection)
        self._integrity = IntegrityService(connection)
        self._logger = get_logger(self.__class__.__name__)

    def create_customer(self, name: Any, phone: Any, address: Any) -> Customer:
        data = validate_customer(name, phone, address)
        customer = self._repo.create(data.name, data.phone, data.address)
        self._logger.info("Created customer id=%s", customer.id)
        return customer

    def update_customer(self, customer: Customer) -> Optional[Customer]:
        if customer.id is None:
            return None
        data = validate_customer(customer.name, customer.phone, customer.address)
        return self._repo.update(
            Customer(
                id=customer.id,
                name=data.name,
                phone=data.phone,
                address=data.address,
            )
        )

    def delete_customer(self, customer_id: int) -> DeletionResult:
        reason = self._integrity.customer_deletion_block(customer_id)
        if reason is not None:
            self._logger.info(
                "Refused to delete customer id=%s: %s", customer_id, reason
            )
            return DeletionResult(deleted=False, reason=reason)
        if not self._repo.delete(customer_id):
            return DeletionResult(deleted=False, reason="Customer not found.")
        self._logger.info("Deleted customer id=%s", customer_id)
        return DeletionResult(deleted=True)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self._repo.get_by_id(customer_id)

    def list_customers(self) -> list[Customer]:
        return self._repo.list_all()

    def search_customers(self, term: str = "") -> list[Customer]:
        return self._repo.search(term)

    def history(self, customer_id: int) -> CustomerHistory:
        """Customer with every rental they made, newest first."""
        customer = self._repo.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found.")
        rentals = rental_repo.list_rentals(
            customer_id=customer_id, connection=self._connection
        )
        rentals.sort(key=lambda rental: rental.rental_date, reverse=True)
        return CustomerHistory(customer=customer, rentals=rentals)
