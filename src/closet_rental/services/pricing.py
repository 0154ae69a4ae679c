"""Rental pricing rules.

Rentals are priced at the current catalog price, not the price in force at
check-out: editing an item's price changes what every pending rental will
cost when it comes back.
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional

from closet_rental.config import MAX_SQLITE_INTEGER, MIN_RENTAL_DAYS
from closet_rental.domain.models import PriceBreakdown, RentalLine
from closet_rental.services.errors import ValidationError
from closet_rental.utils.dates import calendar_day_difference


def rental_days(rental_date: datetime, returned_at: datetime) -> int:
    """Inclusive calendar days charged, with a one-day minimum."""
    return max(MIN_RENTAL_DAYS, calendar_day_difference(returned_at, rental_date) + 1)


def daily_rate(lines: Iterable[RentalLine], price_table: Mapping[int, float]) -> float:
    """Per-day price of a rental; lines whose item no longer exists cost nothing."""
    return sum(price_table.get(line.item_id, 0.0) * line.quantity for line in lines)


def round_currency(value: float) -> int:
    """Round to a whole currency unit, halves away from zero.

    Raises ``ValidationError`` when the result cannot be stored.
    """
    if not math.isfinite(value):
        raise ValidationError("total_price is not a finite amount.", field="total_price")
    if abs(value) >= MAX_SQLITE_INTEGER:
        raise ValidationError(
            f"total_price {value:.0f} is too large to store.", field="total_price"
        )
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_price(
    lines: Iterable[RentalLine],
    price_table: Mapping[int, float],
    rental_date: datetime,
    returned_at: datetime,
    discount_percent: Optional[float] = None,
) -> PriceBreakdown:
    days = rental_days(rental_date, returned_at)
    rate = daily_rate(lines, price_table)
    gross = days * rate
    discount = discount_percent or 0.0
    discount_amount = gross * discount / 100
    return PriceBreakdown(
        rental_days=days,
        daily_rate=rate,
        gross_price=gross,
        discount_percent=discount,
        discount_amount=discount_amount,
        total_price=round_currency(gross - discount_amount),
    )
