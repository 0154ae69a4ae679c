"""Rental store: one owned connection shared by every service."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from closet_rental.config import EngineSettings
from closet_rental.db.connection import get_connection
from closet_rental.db.migrations import apply_migrations
from closet_rental.domain.models import (
    AvailabilityFilter,
    ClothingItem,
    Customer,
    CustomerHistory,
    CustomerSpending,
    DashboardSummary,
    DeletionResult,
    Invoice,
    ItemAvailability,
    RankedItem,
    Rental,
    RentalStatus,
    RevenueBucket,
    RevenueGranularity,
)
from closet_rental.logging_config import get_logger
from closet_rental.repositories import ClothingItemRepo, CustomerRepo, rental_repo
from closet_rental.services.catalog_service import CatalogService
from closet_rental.services.customer_service import CustomerService
from closet_rental.services.integrity_service import IntegrityService
from closet_rental.services.inventory_service import InventoryService
from closet_rental.services.rental_service import RentalService
from closet_rental.services.report_service import ReportService


class RentalStore:
    """Owns the item, customer and rental collections.

    Build one with :meth:`init` and pass it to whatever needs the data; all
    reads go straight to the connection, so every query sees every prior
    write.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        *,
        settings: Optional[EngineSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.connection = connection
        self.clock = clock
        self.catalog = CatalogService(connection)
        self.customers = CustomerService(connection)
        self.integrity = IntegrityService(connection)
        self.inventory = InventoryService(connection)
        self.rentals = RentalService(
            connection,
            clock=clock,
            enforce_availability=self.settings.enforce_availability,
        )
        self.reports = ReportService(connection, clock=clock, top_n=self.settings.top_n)
        self._logger = get_logger(self.__class__.__name__)

    @classmethod
    def init(
        cls,
        settings: Optional[EngineSettings] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
        seed: bool = False,
    ) -> "RentalStore":
        """Open the configured database, create the schema and optionally seed it."""
        settings = settings or EngineSettings()
        connection = get_connection(settings.database)
        apply_migrations(connection)
        store = cls(connection, settings=settings, clock=clock)
        if seed:
            from closet_rental.seed import seed_demo_data

            seed_demo_data(store)
        return store

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "RentalStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def reset(self) -> None:
        """Remove every item, customer and rental. Ids are never reissued."""
        rental_repo.delete_all(connection=self.connection)
        CustomerRepo(self.connection).delete_all()
        ClothingItemRepo(self.connection).delete_all()
        self._logger.warning("All rental data was cleared")

    # Items

    def create_item(
        self,
        name: Any,
        size: Any,
        rental_price: Any,
        quantity: Any,
        image_url: Any = "",
    ) -> ClothingItem:
        return self.catalog.create_item(name, size, rental_price, quantity, image_url)

    def update_item(self, item: ClothingItem) -> Optional[ClothingItem]:
        return self.catalog.update_item(item)

    def delete_item(self, item_id: int) -> bool:
        return self.catalog.delete_item(item_id)

    def get_item(self, item_id: int) -> Optional[ClothingItem]:
        return self.catalog.get_item(item_id)

    def list_items(self) -> list[ClothingItem]:
        return self.catalog.list_items()

    def search_items(
        self,
        term: str = "",
        availability: AvailabilityFilter | str = AvailabilityFilter.ALL,
    ) -> list[ClothingItem]:
        return self.catalog.search_items(term, availability)

    # Customers

    def create_customer(self, name: Any, phone: Any, address: Any) -> Customer:
        return self.customers.create_customer(name, phone, address)

    def update_customer(self, customer: Customer) -> Optional[Customer]:
        return self.customers.update_customer(customer)

    def delete_customer(self, customer_id: int) -> DeletionResult:
        return self.customers.delete_customer(customer_id)

    def can_delete_customer(self, customer_id: int) -> bool:
        return self.integrity.can_delete_customer(customer_id)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self.customers.get_customer(customer_id)

    def list_customers(self) -> list[Customer]:
        return self.customers.list_customers()

    def search_customers(self, term: str = "") -> list[Customer]:
        return self.customers.search_customers(term)

    def customer_history(self, customer_id: int) -> CustomerHistory:
        return self.customers.history(customer_id)

    # Rentals

    def create_rental(
        self,
        customer_id: Any,
        lines: Iterable[Any],
        rental_date: Any,
        due_date: Any,
        discount_percent: Any = None,
        notes: Any = None,
    ) -> Rental:
        return self.rentals.check_out(
            customer_id, lines, rental_date, due_date, discount_percent, notes
        )

    def return_rental(self, rental_id: int) -> Optional[Rental]:
        return self.rentals.return_rental(rental_id)

    def delete_rental(self, rental_id: int) -> bool:
        return self.rentals.delete_rental(rental_id)

    def get_rental(self, rental_id: int) -> Optional[Rental]:
        return self.rentals.get_rental(rental_id)

    def list_rentals(
        self,
        *,
        status: Optional[RentalStatus | str] = None,
        customer_id: Optional[int] = None,
    ) -> list[Rental]:
        return self.rentals.list_rentals(status=status, customer_id=customer_id)

    def build_invoice(self, rental_id: int) -> Invoice:
        return self.rentals.build_invoice(rental_id)

    # Read projections

    def available_count(self, item_id: int) -> Optional[int]:
        return self.inventory.available_count(item_id)

    def rented_count(self, item_id: int) -> int:
        return self.inventory.rented_count(item_id)

    def list_availability(
        self, availability: AvailabilityFilter | str = AvailabilityFilter.ALL
    ) -> list[ItemAvailability]:
        return self.inventory.list_availability(availability)

    def overdue_rentals(self) -> list[Rental]:
        return self.reports.overdue_rentals()

    def popular_items(self, n: Optional[int] = None) -> list[RankedItem]:
        return self.reports.popular_items(n)

    def top_spenders(
        self, year: Optional[int] = None, n: Optional[int] = None
    ) -> list[CustomerSpending]:
        return self.reports.top_spenders(year, n)

    def revenue_by_bucket(
        self, granularity: RevenueGranularity | str = RevenueGranularity.MONTH
    ) -> list[RevenueBucket]:
        return self.reports.revenue_by_bucket(granularity)

    def dashboard_summary(self) -> DashboardSummary:
        return self.reports.dashboard_summary()
