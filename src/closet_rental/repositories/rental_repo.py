"""Repository helpers for rental persistence."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from closet_rental.db.connection import transaction
from closet_rental.domain.models import Rental, RentalLine, RentalStatus
from closet_rental.logging_config import get_logger
from closet_rental.repositories.mappers import rental_from_row, rental_to_record
from closet_rental.utils.dates import to_datetime, to_iso


@dataclass(frozen=True)
class CustomerTotal:
    customer_id: int
    customer_name: str
    total: int


@dataclass(frozen=True)
class DatedAmount:
    rental_date: datetime
    amount: int


def _coerce_status(status: str | RentalStatus) -> RentalStatus:
    if isinstance(status, RentalStatus):
        return status
    return RentalStatus(status)


def _status_clause(status: RentalStatus) -> str:
    if status == RentalStatus.ACTIVE:
        return "r.return_date IS NULL"
    return "r.return_date IS NOT NULL"


def _load_lines(
    conn: sqlite3.Connection, rental_ids: Iterable[int]
) -> dict[int, list[sqlite3.Row]]:
    ids = sorted({int(rental_id) for rental_id in rental_ids})
    grouped: dict[int, list[sqlite3.Row]] = {rental_id: [] for rental_id in ids}
    if not ids:
        return grouped
    placeholders = ", ".join(["?"] * len(ids))
    rows = conn.execute(
        f"""
        SELECT * FROM rental_items
        WHERE rental_id IN ({placeholders})
        ORDER BY id
        """,
        ids,
    ).fetchall()
    for row in rows:
        grouped[int(row["rental_id"])].append(row)
    return grouped


def create_rental(
    customer_id: int,
    lines: Iterable[RentalLine],
    rental_date: datetime,
    due_date: datetime,
    discount_percent: Optional[float] = None,
    notes: Optional[str] = None,
    *,
    connection: sqlite3.Connection,
) -> Rental:
    """Create an active rental and its line items in a transaction."""
    logger = get_logger("rental_repo")
    rental = Rental(
        id=None,
        customer_id=customer_id,
        lines=list(lines),
        rental_date=rental_date,
        due_date=due_date,
        discount_percent=discount_percent,
        notes=notes,
    )
    record = rental_to_record(rental)
    try:
        with transaction(connection):
            cursor = connection.execute(
                """
                INSERT INTO rentals (
                    customer_id,
                    rental_date,
                    due_date,
                    return_date,
                    total_price,
                    discount_percent,
                    notes
                )
                VALUES (
                    :customer_id,
                    :rental_date,
                    :due_date,
                    NULL,
                    NULL,
                    :discount_percent,
                    :notes
                )
                """,
                record,
            )
            rental_id = cursor.lastrowid
            connection.executemany(
                """
                INSERT INTO rental_items (rental_id, item_id, quantity)
                VALUES (?, ?, ?)
                """,
                [(rental_id, line.item_id, line.quantity) for line in rental.lines],
            )
    except Exception:
        logger.exception("Failed to create rental")
        raise
    rental.id = rental_id
    return rental


def get_rental(
    rental_id: int,
    *,
    connection: sqlite3.Connection,
) -> Optional[Rental]:
    """Fetch a rental with its line items."""
    logger = get_logger("rental_repo")
    try:
        row = connection.execute(
            "SELECT * FROM rentals WHERE id = ?",
            (rental_id,),
        ).fetchone()
        if not row:
            return None
        lines = _load_lines(connection, [rental_id])
    except Exception:
        logger.exception("Failed to fetch rental id=%s", rental_id)
        raise
    return rental_from_row(row, lines[int(rental_id)])


def list_rentals(
    *,
    status: Optional[str | RentalStatus] = None,
    customer_id: Optional[int] = None,
    connection: sqlite3.Connection,
) -> list[Rental]:
    """List rentals in insertion order with optional status/customer filters."""
    logger = get_logger("rental_repo")
    clauses: list[str] = []
    params: list[object] = []
    if status:
        clauses.append(_status_clause(_coerce_status(status)))
    if customer_id is not None:
        clauses.append("r.customer_id = ?")
        params.append(customer_id)
    where_clause = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    try:
        rows = connection.execute(
            f"SELECT r.* FROM rentals r {where_clause} ORDER BY r.id",
            params,
        ).fetchall()
        lines = _load_lines(connection, [row["id"] for row in rows])
    except Exception:
        logger.exception("Failed to list rentals")
        raise
    return [rental_from_row(row, lines[int(row["id"])]) for row in rows]


def mark_returned(
    rental_id: int,
    return_date: datetime,
    total_price: int,
    *,
    connection: sqlite3.Connection,
) -> bool:
    """Record the return of an active rental.

    Only matches a rental that has no return date yet. Runs inside the
    caller's transaction so the price read and this write commit together.
    """
    logger = get_logger("rental_repo")
    try:
        cursor = connection.execute(
            """
            UPDATE rentals
            SET return_date = ?,
                total_price = ?
            WHERE id = ?
              AND return_date IS NULL
            """,
            (to_iso(return_date), total_price, rental_id),
        )
    except Exception:
        logger.exception("Failed to mark rental returned id=%s", rental_id)
        raise
    return cursor.rowcount > 0


def delete_rental(
    rental_id: int,
    *,
    connection: sqlite3.Connection,
) -> bool:
    logger = get_logger("rental_repo")
    try:
        with transaction(connection):
            connection.execute(
                "DELETE FROM rental_items WHERE rental_id = ?",
                (rental_id,),
            )
            cursor = connection.execute(
                "DELETE FROM rentals WHERE id = ?",
                (rental_id,),
            )
    except Exception:
        logger.exception("Failed to delete rental id=%s", rental_id)
        raise
    return cursor.rowcount > 0


def count_rentals_for_customer(
    customer_id: int,
    *,
    connection: sqlite3.Connection,
) -> int:
    """Count rentals in any state that reference the customer."""
    logger = get_logger("rental_repo")
    try:
        row = connection.execute(
            "SELECT COUNT(*) AS total FROM rentals WHERE customer_id = ?",
            (customer_id,),
        ).fetchone()
    except Exception:
        logger.exception("Failed to count rentals for customer id=%s", customer_id)
        raise
    return int(row["total"]) if row else 0


def active_quantities(
    item_id: Optional[int] = None,
    *,
    connection: sqlite3.Connection,
) -> dict[int, int]:
    """Sum line quantities of active rentals, per item."""
    logger = get_logger("rental_repo")
    item_clause = ""
    params: list[object] = []
    if item_id is not None:
        item_clause = "AND ri.item_id = ?"
        params.append(item_id)
    try:
        rows = connection.execute(
            f"""
            SELECT ri.item_id, COALESCE(SUM(ri.quantity), 0) AS rented_qty
            FROM rental_items ri
            JOIN rentals r ON r.id = ri.rental_id
            WHERE r.return_date IS NULL
              {item_clause}
            GROUP BY ri.item_id
            """,
            params,
        ).fetchall()
    except Exception:
        logger.exception("Failed to sum active quantities item_id=%s", item_id)
        raise
    return {int(row["item_id"]): int(row["rented_qty"]) for row in rows}


def list_customer_totals(
    year: int,
    *,
    connection: sqlite3.Connection,
) -> list[CustomerTotal]:
    """Sum returned totals per customer for rentals started in ``year``.

    Highest total first; equal totals keep customer insertion order.
    """
    logger = get_logger("rental_repo")
    try:
        rows = connection.execute(
            """
            SELECT
                c.id AS customer_id,
                c.name AS customer_name,
                SUM(r.total_price) AS total
            FROM rentals r
            JOIN customers c ON c.id = r.customer_id
            WHERE r.return_date IS NOT NULL
              AND r.total_price IS NOT NULL
              AND r.total_price <> 0
              AND strftime('%Y', r.rental_date) = ?
            GROUP BY c.id, c.name
            ORDER BY total DESC, c.id
            """,
            (f"{year:04d}",),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list customer totals year=%s", year)
        raise
    return [
        CustomerTotal(
            customer_id=int(row["customer_id"]),
            customer_name=row["customer_name"],
            total=int(row["total"] or 0),
        )
        for row in rows
    ]


def list_returned_amounts(
    start: datetime,
    end: datetime,
    *,
    connection: sqlite3.Connection,
) -> list[DatedAmount]:
    """Returned rentals whose rental date lies in ``[start, end)``."""
    logger = get_logger("rental_repo")
    try:
        rows = connection.execute(
            """
            SELECT rental_date, total_price
            FROM rentals
            WHERE return_date IS NOT NULL
              AND total_price IS NOT NULL
              AND rental_date >= ?
              AND rental_date < ?
            ORDER BY rental_date
            """,
            (to_iso(start), to_iso(end)),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list returned amounts")
        raise
    return [
        DatedAmount(
            rental_date=to_datetime(row["rental_date"]),
            amount=int(row["total_price"]),
        )
        for row in rows
    ]


def delete_all(*, connection: sqlite3.Connection) -> None:
    """Remove every rental and line item."""
    logger = get_logger("rental_repo")
    try:
        with transaction(connection):
            connection.execute("DELETE FROM rental_items")
            connection.execute("DELETE FROM rentals")
    except Exception:
        logger.exception("Failed to delete all rentals")
        raise
