"""Display helpers for money and dates."""

from __future__ import annotations

from datetime import date, datetime

from closet_rental.config import CURRENCY_CODE, DATE_DISPLAY_FORMAT

_CURRENCY_SYMBOLS = {"VND": "₫"}


def format_currency(amount: float | int | None, currency: str = CURRENCY_CODE) -> str:
    """Format an amount the way the shop prints it, e.g. ``400.000 ₫``."""
    value = amount or 0
    symbol = _CURRENCY_SYMBOLS.get(currency)
    if symbol:
        # Dong has no subunit; thousands are dot separated.
        grouped = f"{round(value):,}".replace(",", ".")
        return f"{grouped} {symbol}"
    return f"{value:,.2f} {currency}"


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime(DATE_DISPLAY_FORMAT)
