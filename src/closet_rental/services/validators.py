"""Boundary validation for raw create and edit requests.

Every helper either returns a clean value or raises ``ValidationError``;
nothing here touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from closet_rental.config import (
    MAX_DISCOUNT_PERCENT,
    MAX_QUANTITY,
    MAX_RENTAL_PRICE,
    MAX_SQLITE_INTEGER,
)
from closet_rental.domain.models import RentalLine
from closet_rental.services.errors import ValidationError
from closet_rental.utils.dates import to_datetime


@dataclass(frozen=True)
class ItemInput:
    name: str
    size: str
    rental_price: float
    quantity: int
    image_url: str


@dataclass(frozen=True)
class CustomerInput:
    name: str
    phone: str
    address: str


@dataclass(frozen=True)
class CheckoutInput:
    customer_id: int
    lines: list[RentalLine]
    rental_date: datetime
    due_date: datetime
    discount_percent: Optional[float]
    notes: Optional[str]


def require_text(value: Any, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required.", field=field)
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_price(
    value: Any,
    field: str = "rental_price",
    *,
    maximum: float = MAX_RENTAL_PRICE,
) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number.", field=field)
    try:
        price = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{field} must be a number.", field=field) from exc
    if price != price or price in (float("inf"), float("-inf")):
        raise ValidationError(f"{field} must be a finite number.", field=field)
    if price < 0:
        raise ValidationError(f"{field} cannot be negative.", field=field)
    if price > maximum:
        raise ValidationError(f"{field} cannot exceed {maximum:,.0f}.", field=field)
    return price


def parse_int(
    value: Any,
    field: str,
    *,
    minimum: int,
    maximum: int = MAX_SQLITE_INTEGER,
) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number.", field=field)
    if isinstance(value, str):
        value = value.strip()
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be a whole number.", field=field)
        value = int(value)
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a whole number.", field=field) from exc
    if number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}.", field=field)
    if number > maximum:
        raise ValidationError(f"{field} cannot exceed {maximum}.", field=field)
    return number


def parse_date(value: Any, field: str) -> datetime:
    """Parse a date; the stored precision is whole seconds."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required.", field=field)
    if not isinstance(value, (str, date, datetime)):
        raise ValidationError(f"{field} is not a valid date.", field=field)
    try:
        return to_datetime(value).replace(microsecond=0)
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"{field} is not a valid date.", field=field) from exc


def parse_discount(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_price(value, field="discount_percent", maximum=MAX_DISCOUNT_PERCENT)


def parse_lines(raw_lines: Any) -> list[RentalLine]:
    """Validate line items and merge repeated item ids, keeping first-seen order."""
    if raw_lines is None or isinstance(raw_lines, (str, bytes)):
        raise ValidationError("At least one item is required.", field="lines")
    merged: dict[int, int] = {}
    for raw in raw_lines:
        if isinstance(raw, RentalLine):
            item_id, quantity = raw.item_id, raw.quantity
        elif isinstance(raw, Mapping):
            item_id, quantity = raw.get("item_id"), raw.get("quantity")
        else:
            try:
                item_id, quantity = raw
            except (TypeError, ValueError) as exc:
                raise ValidationError("Malformed line item.", field="lines") from exc
        item_id = parse_int(item_id, "item_id", minimum=1)
        quantity = parse_int(quantity, "quantity", minimum=1, maximum=MAX_QUANTITY)
        merged[item_id] = merged.get(item_id, 0) + quantity
        if merged[item_id] > MAX_QUANTITY:
            raise ValidationError(
                f"quantity cannot exceed {MAX_QUANTITY}.", field="quantity"
            )
    if not merged:
        raise ValidationError("At least one item is required.", field="lines")
    return [RentalLine(item_id=item_id, quantity=qty) for item_id, qty in merged.items()]


def validate_item(
    name: Any,
    size: Any,
    rental_price: Any,
    quantity: Any,
    image_url: Any = "",
) -> ItemInput:
    return ItemInput(
        name=require_text(name, "name"),
        size=require_text(size, "size"),
        rental_price=parse_price(rental_price),
        quantity=parse_int(quantity, "quantity", minimum=0, maximum=MAX_QUANTITY),
        image_url=optional_text(image_url) or "",
    )


def validate_customer(name: Any, phone: Any, address: Any) -> CustomerInput:
    return CustomerInput(
        name=require_text(name, "name"),
        phone=require_text(phone, "phone"),
        address=require_text(address, "address"),
    )


def validate_checkout(
    customer_id: Any,
    lines: Iterable[Any],
    rental_date: Any,
    due_date: Any,
    discount_percent: Any = None,
    notes: Any = None,
) -> CheckoutInput:
    if customer_id is None or (isinstance(customer_id, str) and not customer_id.strip()):
        raise ValidationError("A customer is required.", field="customer_id")
    parsed_customer = parse_int(customer_id, "customer_id", minimum=1)
    parsed_lines = parse_lines(lines)
    start = parse_date(rental_date, "rental_date")
    due = parse_date(due_date, "due_date")
    if due.date() < start.date():
        raise ValidationError(
            "due_date cannot be earlier than rental_date.", field="due_date"
        )
    return CheckoutInput(
        customer_id=parsed_customer,
        lines=parsed_lines,
        rental_date=start,
        due_date=due,
        discount_percent=parse_discount(discount_percent),
        notes=optional_text(notes),
    )
