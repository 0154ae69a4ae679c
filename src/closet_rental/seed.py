"""Demo data for a fresh rental store."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from closet_rental.db.connection import transaction
from closet_rental.domain.models import RentalLine
from closet_rental.logging_config import get_logger
from closet_rental.repositories import rental_repo
from closet_rental.services.pricing import compute_price
from closet_rental.utils.dates import to_datetime

if TYPE_CHECKING:
    from closet_rental.store import RentalStore

DEFAULT_SEED = 42
GENERATED_RENTALS = 50


@dataclass(frozen=True)
class ItemSeed:
    name: str
    size: str
    rental_price: float
    quantity: int
    image_url: str


@dataclass(frozen=True)
class CustomerSeed:
    name: str
    phone: str
    address: str


@dataclass(frozen=True)
class RentalSeed:
    customer: int
    lines: tuple[tuple[int, int], ...]
    started_days_ago: int
    due_in_days: int
    returned_days_ago: Optional[int] = None
    discount_percent: Optional[float] = None
    notes: Optional[str] = None


ITEMS = (
    ItemSeed("Váy Dạ Hội", "M", 50000, 5, "https://picsum.photos/seed/gown/400/600"),
    ItemSeed("Áo Tuxedo", "L", 75000, 3, "https://picsum.photos/seed/tuxedo/400/600"),
    ItemSeed("Váy Cocktail", "S", 40000, 7, "https://picsum.photos/seed/cocktail/400/600"),
    ItemSeed("Váy Mùa Hè", "M", 30000, 10, "https://picsum.photos/seed/summer/400/600"),
    ItemSeed("Bộ Suit Công Sở", "XL", 65000, 4, "https://picsum.photos/seed/suit/400/600"),
    ItemSeed("Áo Khoác Vintage", "L", 45000, 6, "https://picsum.photos/seed/jacket/400/600"),
)

CUSTOMERS = (
    CustomerSeed("Nguyễn Thị An", "090-111-2222", "123 Đường Lê Lợi, Quận 1, TP. HCM"),
    CustomerSeed("Trần Văn Bình", "091-333-4444", "456 Đường Nguyễn Huệ, Quận 3, TP. HCM"),
    CustomerSeed("Lê Thị Cẩm", "098-555-6666", "789 Đường Pasteur, Quận 1, TP. Đà Nẵng"),
    CustomerSeed("Phạm Văn Dũng", "093-777-8888", "101 Đường Võ Văn Tần, Quận 3, TP. HCM"),
    CustomerSeed("Hoàng Thị Mai", "094-999-0000", "212 Đường Lý Thường Kiệt, Quận 10, TP. Hà Nội"),
    CustomerSeed("Vũ Minh Tuấn", "097-123-4567", "333 Đường Trần Hưng Đạo, Quận 5, TP. HCM"),
    CustomerSeed("Đặng Thu Hà", "096-888-9999", "555 Đường Hai Bà Trưng, Quận 1, TP. Hải Phòng"),
    CustomerSeed("Bùi Anh Khoa", "092-222-3333", "444 Đường Nguyễn Văn Cừ, Quận Long Biên, TP. Hà Nội"),
)

# Indexes refer to ITEMS and CUSTOMERS.
FIXED_RENTALS = (
    RentalSeed(0, ((0, 1),), 5, 2, notes="Khách hàng yêu cầu giao hàng tận nơi."),
    RentalSeed(1, ((1, 1), (4, 1)), 2, 5),
    RentalSeed(2, ((2, 1),), 10, -3, returned_days_ago=2, notes="Trả đồ có vết bẩn nhỏ, đã xử lý."),
    RentalSeed(0, ((3, 1),), 40, -33, returned_days_ago=32),
    RentalSeed(1, ((5, 1),), 80, -73, returned_days_ago=71),
    RentalSeed(2, ((0, 1),), 35, -28, returned_days_ago=28, discount_percent=10,
               notes="Khách hàng quen, giảm giá 10%."),
)


def _generate_rentals(rng: random.Random) -> list[RentalSeed]:
    generated: list[RentalSeed] = []
    for _ in range(GENERATED_RENTALS):
        customer = rng.randrange(len(CUSTOMERS))
        picked = rng.sample(range(len(ITEMS)), rng.randint(1, 2))
        started = rng.randint(1, 180)
        duration = rng.randint(5, 15)
        lines = tuple((index, 1) for index in picked)
        if started <= 10:
            generated.append(RentalSeed(customer, lines, started, duration - started))
            continue
        returned = started - duration - rng.randint(-2, 4)
        if returned < 0:
            continue
        generated.append(
            RentalSeed(customer, lines, started, duration - started, returned_days_ago=returned)
        )
    return generated


def seed_demo_data(store: "RentalStore", *, seed: int = DEFAULT_SEED) -> int:
    """Fill the store with the demo catalog, customers and rental history.

    Returns the number of rentals created.
    """
    logger = get_logger("seed")
    now = to_datetime(store.clock()).replace(microsecond=0)
    items = [
        store.create_item(item.name, item.size, item.rental_price, item.quantity, item.image_url)
        for item in ITEMS
    ]
    customers = [
        store.create_customer(customer.name, customer.phone, customer.address)
        for customer in CUSTOMERS
    ]
    price_table = {item.id: item.rental_price for item in items}

    rentals = list(FIXED_RENTALS) + _generate_rentals(random.Random(seed))
    connection = store.connection
    for entry in rentals:
        started = now - timedelta(days=entry.started_days_ago)
        lines = [
            RentalLine(item_id=items[index].id or 0, quantity=quantity)
            for index, quantity in entry.lines
        ]
        rental = rental_repo.create_rental(
            customers[entry.customer].id or 0,
            lines,
            started,
            now + timedelta(days=entry.due_in_days),
            entry.discount_percent,
            entry.notes,
            connection=connection,
        )
        if entry.returned_days_ago is None:
            continue
        returned = now - timedelta(days=entry.returned_days_ago)
        price = compute_price(
            lines, price_table, started, returned, entry.discount_percent
        )
        with transaction(connection):
            rental_repo.mark_returned(
                rental.id or 0, returned, price.total_price, connection=connection
            )
    logger.info(
        "Seeded %s items, %s customers, %s rentals",
        len(items),
        len(customers),
        len(rentals),
    )
    return len(rentals)
