"""Read-only reporting projections over the rental store."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from closet_rental.config import (
    DEFAULT_TOP_N,
    REVENUE_MONTHS,
    REVENUE_WEEKS,
    REVENUE_YEARS,
)
from closet_rental.domain.models import (
    CustomerSpending,
    DashboardSummary,
    RankedItem,
    Rental,
    RentalStatus,
    RevenueBucket,
    RevenueGranularity,
)
from closet_rental.logging_config import get_logger
from closet_rental.repositories import ClothingItemRepo, rental_repo
from closet_rental.services.inventory_service import InventoryService
from closet_rental.utils.dates import to_datetime


class ReportService:
    """Dashboard figures, recomputed from the store on every call."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        *,
        clock: Callable[[], datetime] = datetime.now,
        top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self._connection = connection
        self._clock = clock
        self._top_n = top_n
        self._item_repo = ClothingItemRepo(connection)
        self._inventory = InventoryService(connection)
        self._logger = get_logger(self.__class__.__name__)

    def _now(self) -> datetime:
        return to_datetime(self._clock())

    def overdue_rentals(self) -> list[Rental]:
        """Active rentals past their due date, earliest due first."""
        now = self._now()
        active = rental_repo.list_rentals(
            status=RentalStatus.ACTIVE, connection=self._connection
        )
        overdue = [rental for rental in active if rental.is_overdue(now)]
        overdue.sort(key=lambda rental: rental.due_date)
        return overdue

    def popular_items(self, n: Optional[int] = None) -> list[RankedItem]:
        """Items currently out on rental, most units out first."""
        limit = self._top_n if n is None else n
        counts = self._inventory.rented_counts()
        ranked = [
            RankedItem(item=item, rented=counts.get(item.id or 0, 0))
            for item in self._item_repo.list_all()
        ]
        # Stable sort keeps insertion order between equal counts.
        ranked.sort(key=lambda entry: entry.rented, reverse=True)
        return [entry for entry in ranked if entry.rented > 0][: max(limit, 0)]

    def top_spenders(
        self, year: Optional[int] = None, n: Optional[int] = None
    ) -> list[CustomerSpending]:
        """Customers by returned revenue for rentals started in ``year``."""
        limit = self._top_n if n is None else n
        target_year = self._now().year if year is None else year
        totals = rental_repo.list_customer_totals(
            target_year, connection=self._connection
        )
        return [
            CustomerSpending(
                customer_id=row.customer_id,
                name=row.customer_name,
                total_spent=row.total,
            )
            for row in totals[: max(limit, 0)]
        ]

    def revenue_by_bucket(
        self, granularity: RevenueGranularity | str = RevenueGranularity.MONTH
    ) -> list[RevenueBucket]:
        """Returned revenue keyed by rental start date, oldest bucket first.

        Weeks run Monday to Sunday. Every bucket is present even when empty.
        """
        granularity = RevenueGranularity(granularity)
        windows = self._bucket_windows(granularity, self._now().date())
        first_start = datetime.combine(windows[0][1], datetime.min.time())
        last_end = datetime.combine(windows[-1][2], datetime.min.time())
        amounts = rental_repo.list_returned_amounts(
            first_start, last_end, connection=self._connection
        )
        self._logger.debug(
            "Bucketing %s returned rentals by %s", len(amounts), granularity.value
        )
        totals = [0] * len(windows)
        for amount in amounts:
            day = amount.rental_date.date()
            for index, (_, start, end) in enumerate(windows):
                if start <= day < end:
                    totals[index] += amount.amount
                    break
        return [
            RevenueBucket(label=label, start=start, end=end, total=totals[index])
            for index, (label, start, end) in enumerate(windows)
        ]

    def dashboard_summary(self) -> DashboardSummary:
        items = self._item_repo.list_all()
        active = rental_repo.list_rentals(
            status=RentalStatus.ACTIVE, connection=self._connection
        )
        return DashboardSummary(
            item_kinds=len(items),
            total_stock=sum(item.quantity for item in items),
            active_rentals=len(active),
            overdue_rentals=len(self.overdue_rentals()),
        )

    @staticmethod
    def _bucket_windows(
        granularity: RevenueGranularity, today: date
    ) -> list[tuple[str, date, date]]:
        windows: list[tuple[str, date, date]] = []
        if granularity == RevenueGranularity.WEEK:
            current = today - timedelta(days=today.weekday())
            for offset in range(REVENUE_WEEKS - 1, -1, -1):
                start = current - timedelta(weeks=offset)
                iso_year, iso_week, _ = start.isocalendar()
                windows.append(
                    (f"W{iso_week:02d} {iso_year}", start, start + timedelta(weeks=1))
                )
        elif granularity == RevenueGranularity.MONTH:
            current = today.replace(day=1)
            for offset in range(REVENUE_MONTHS - 1, -1, -1):
                start = current - relativedelta(months=offset)
                windows.append(
                    (start.strftime("%m/%Y"), start, start + relativedelta(months=1))
                )
        else:
            for offset in range(REVENUE_YEARS - 1, -1, -1):
                start = date(today.year - offset, 1, 1)
                windows.append((str(start.year), start, date(start.year + 1, 1, 1)))
        return windows
