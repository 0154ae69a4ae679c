"""Domain models for ClosetRental."""

from closet_rental.domain.models import (
    AvailabilityFilter,
    ClothingItem,
    Customer,
    CustomerHistory,
    CustomerSpending,
    DashboardSummary,
    DeletionResult,
    Invoice,
    InvoiceLine,
    ItemAvailability,
    PriceBreakdown,
    RankedItem,
    Rental,
    RentalLine,
    RentalStatus,
    RevenueBucket,
    RevenueGranularity,
)

__all__ = [
    "AvailabilityFilter",
    "ClothingItem",
    "Customer",
    "CustomerHistory",
    "CustomerSpending",
    "DashboardSummary",
    "DeletionResult",
    "Invoice",
    "InvoiceLine",
    "ItemAvailability",
    "PriceBreakdown",
    "RankedItem",
    "Rental",
    "RentalLine",
    "RentalStatus",
    "RevenueBucket",
    "RevenueGranularity",
]
