"""Domain dataclasses and enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class RentalStatus(str, Enum):
    ACTIVE = "active"
    RETURNED = "returned"


class RevenueGranularity(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class AvailabilityFilter(str, Enum):
    ALL = "all"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(slots=True)
class ClothingItem:
    id: Optional[int]
    name: str
    size: str
    rental_price: float
    quantity: int
    image_url: str = ""


@dataclass(slots=True)
class Customer:
    id: Optional[int]
    name: str
    phone: str
    address: str


@dataclass(frozen=True, slots=True)
class RentalLine:
    item_id: int
    quantity: int


@dataclass(slots=True)
class Rental:
    id: Optional[int]
    customer_id: int
    lines: list[RentalLine]
    rental_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None
    total_price: Optional[int] = None
    discount_percent: Optional[float] = None
    notes: Optional[str] = None

    @property
    def status(self) -> RentalStatus:
        if self.return_date is None:
            return RentalStatus.ACTIVE
        return RentalStatus.RETURNED

    @property
    def is_active(self) -> bool:
        return self.return_date is None

    def is_overdue(self, now: datetime) -> bool:
        """An active rental whose due date is strictly before ``now``."""
        return self.is_active and self.due_date < now


@dataclass(frozen=True)
class ItemAvailability:
    item: ClothingItem
    rented: int
    available: int

    @property
    def over_allocated(self) -> bool:
        return self.available < 0


@dataclass(frozen=True)
class PriceBreakdown:
    rental_days: int
    daily_rate: float
    gross_price: float
    discount_percent: float
    discount_amount: float
    total_price: int


@dataclass(frozen=True)
class InvoiceLine:
    item_id: int
    name: str
    size: str
    unit_price: float
    quantity: int
    days: int
    subtotal: float


@dataclass(frozen=True)
class Invoice:
    rental: Rental
    customer: Optional[Customer]
    lines: list[InvoiceLine]
    rental_days: int
    subtotal: float
    discount_percent: float
    discount_amount: float
    total_price: int


@dataclass(frozen=True)
class RankedItem:
    item: ClothingItem
    rented: int


@dataclass(frozen=True)
class CustomerSpending:
    customer_id: int
    name: str
    total_spent: int


@dataclass(frozen=True)
class RevenueBucket:
    label: str
    start: date
    end: date
    total: int


@dataclass(frozen=True)
class CustomerHistory:
    customer: Customer
    rentals: list[Rental] = field(default_factory=list)

    @property
    def rental_count(self) -> int:
        return len(self.rentals)

    @property
    def total_spent(self) -> int:
        return sum(rental.total_price or 0 for rental in self.rentals)


@dataclass(frozen=True)
class DashboardSummary:
    item_kinds: int
    total_stock: int
    active_rentals: int
    overdue_rentals: int


@dataclass(frozen=True)
class DeletionResult:
    deleted: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.deleted
