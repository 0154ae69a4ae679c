"""SQLite row mappers for domain models."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, Iterable

from closet_rental.domain.models import ClothingItem, Customer, Rental, RentalLine
from closet_rental.utils.dates import from_iso, to_datetime, to_iso


def _row_value(row: sqlite3.Row, key: str) -> Any:
    return row[key] if key in row.keys() else None


def item_from_row(row: sqlite3.Row) -> ClothingItem:
    return ClothingItem(
        id=row["id"],
        name=row["name"],
        size=row["size"],
        rental_price=float(row["rental_price"]),
        quantity=int(row["quantity"]),
        image_url=_row_value(row, "image_url") or "",
    )


def item_to_record(item: ClothingItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "size": item.size,
        "rental_price": item.rental_price,
        "quantity": item.quantity,
        "image_url": item.image_url,
    }


def customer_from_row(row: sqlite3.Row) -> Customer:
    return Customer(
        id=row["id"],
        name=row["name"],
        phone=row["phone"],
        address=row["address"],
    )


def customer_to_record(customer: Customer) -> Dict[str, Any]:
    return {
        "id": customer.id,
        "name": customer.name,
        "phone": customer.phone,
        "address": customer.address,
    }


def line_from_row(row: sqlite3.Row) -> RentalLine:
    return RentalLine(item_id=int(row["item_id"]), quantity=int(row["quantity"]))


def rental_from_row(row: sqlite3.Row, line_rows: Iterable[sqlite3.Row]) -> Rental:
    total_price = _row_value(row, "total_price")
    discount = _row_value(row, "discount_percent")
    return Rental(
        id=row["id"],
        customer_id=int(row["customer_id"]),
        lines=[line_from_row(line_row) for line_row in line_rows],
        rental_date=to_datetime(row["rental_date"]),
        due_date=to_datetime(row["due_date"]),
        return_date=from_iso(_row_value(row, "return_date")),
        total_price=int(total_price) if total_price is not None else None,
        discount_percent=float(discount) if discount is not None else None,
        notes=_row_value(row, "notes"),
    )


def rental_to_record(rental: Rental) -> Dict[str, Any]:
    return {
        "id": rental.id,
        "customer_id": rental.customer_id,
        "rental_date": to_iso(rental.rental_date),
        "due_date": to_iso(rental.due_date),
        "return_date": to_iso(rental.return_date) if rental.return_date else None,
        "total_price": rental.total_price,
        "discount_percent": rental.discount_percent,
        "notes": rental.notes,
    }


def like_pattern(term: str) -> str:
    """Substring pattern for ``LIKE ? ESCAPE '\\'`` with wildcards taken literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
