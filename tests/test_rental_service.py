# tests/test_rental_service.py
from dataclasses import replace
from datetime import date, datetime

import pytest

from closet_rental.domain.models import RentalLine, RentalStatus
from closet_rental.services.errors import (
    AvailabilityError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def week_rental(store, customer, gown):
    """One gown checked out seven days before the test clock"""
    return store.create_rental(
        customer.id,
        [RentalLine(gown.id, 1)],
        "2026-10-12",
        "2026-10-19",
    )


def test_check_out_creates_active_rental(store, customer, gown, week_rental):
    assert week_rental.id is not None
    assert week_rental.status == RentalStatus.ACTIVE
    assert week_rental.total_price is None
    assert week_rental.return_date is None

    stored = store.get_rental(week_rental.id)
    assert stored.lines == [RentalLine(gown.id, 1)]
    assert stored.rental_date == datetime(2026, 10, 12)
    assert stored.customer_id == customer.id


def test_return_prices_inclusive_days(store, week_rental, clock):
    """Test day 0 to day 7 is billed as eight days at 50,000"""
    returned = store.return_rental(week_rental.id)
    assert returned.status == RentalStatus.RETURNED
    assert returned.total_price == 400000
    assert returned.return_date == clock.now

    stored = store.get_rental(week_rental.id)
    assert stored.total_price == 400000
    assert stored.return_date == datetime(2026, 10, 19, 10, 0)


def test_second_return_is_a_no_op(store, week_rental, clock):
    first = store.return_rental(week_rental.id)
    clock.advance(days=3)
    assert store.return_rental(week_rental.id) is None

    stored = store.get_rental(week_rental.id)
    assert stored.total_price == first.total_price
    assert stored.return_date == first.return_date


def test_return_of_unknown_rental_returns_nothing(store):
    assert store.return_rental(999) is None


def test_same_day_return_charges_one_day(store, customer, gown, clock):
    rental = store.create_rental(customer.id, [(gown.id, 2)], "2026-10-19", "2026-10-20")
    assert store.return_rental(rental.id).total_price == 100000


def test_return_uses_current_catalog_price(store, gown, week_rental):
    """Test a price edit after check-out changes the amount billed"""
    store.update_item(replace(gown, rental_price=60000))
    assert store.return_rental(week_rental.id).total_price == 8 * 60000


def test_return_applies_discount(store, customer, gown):
    rental = store.create_rental(
        customer.id,
        [{"item_id": gown.id, "quantity": 2}],
        "2026-10-15",
        "2026-10-20",
        discount_percent="10",
    )
    assert rental.discount_percent == 10
    assert store.return_rental(rental.id).total_price == 450000


def test_full_discount_is_free(store, customer, gown):
    rental = store.create_rental(
        customer.id, [(gown.id, 1)], "2026-10-15", "2026-10-20", discount_percent=100
    )
    assert store.return_rental(rental.id).total_price == 0


def test_deleted_item_line_is_priced_at_zero(store, customer, gown, tuxedo):
    rental = store.create_rental(
        customer.id, [(gown.id, 1), (tuxedo.id, 1)], "2026-10-19", "2026-10-20"
    )
    store.delete_item(tuxedo.id)
    assert store.return_rental(rental.id).total_price == 50000


def test_repeated_items_are_merged(store, customer, gown):
    rental = store.create_rental(
        customer.id, [(gown.id, 1), (gown.id, 2)], "2026-10-19", "2026-10-20"
    )
    assert rental.lines == [RentalLine(gown.id, 3)]


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"customer_id": None}, "customer_id"),
        ({"customer_id": 999}, "customer_id"),
        ({"lines": []}, "lines"),
        ({"lines": [(1, 0)]}, "quantity"),
        ({"lines": [(1, "two")]}, "quantity"),
        ({"lines": [(404, 1)]}, "lines"),
        ({"lines": [(2**63, 1)]}, "item_id"),
        ({"customer_id": 2**63}, "customer_id"),
        ({"lines": [(1, 100_001)]}, "quantity"),
        ({"lines": [(1, 60_000), (1, 50_000)]}, "quantity"),
        ({"rental_date": "not-a-date"}, "rental_date"),
        ({"due_date": ""}, "due_date"),
        ({"due_date": "2026-10-01"}, "due_date"),
        ({"discount_percent": -1}, "discount_percent"),
        ({"discount_percent": 101}, "discount_percent"),
        ({"discount_percent": "ten"}, "discount_percent"),
    ],
)
def test_invalid_check_out_is_rejected_without_writing(
    store, customer, gown, overrides, field
):
    request = {
        "customer_id": customer.id,
        "lines": [(gown.id, 1)],
        "rental_date": "2026-10-15",
        "due_date": "2026-10-20",
        "discount_percent": None,
    }
    request.update(overrides)
    with pytest.raises(ValidationError) as excinfo:
        store.create_rental(**request)
    assert excinfo.value.field == field
    assert store.list_rentals() == []


def test_default_check_out_trusts_caller_on_availability(store, customer, gown):
    rental = store.create_rental(customer.id, [(gown.id, 6)], "2026-10-19", "2026-10-20")
    assert rental.id is not None
    assert store.available_count(gown.id) == -1


def test_strict_check_out_rejects_over_allocation(strict_store):
    item = strict_store.create_item("Evening Gown", "M", 50000, 5)
    buyer = strict_store.create_customer("An Nguyen", "090-111-2222", "123 Le Loi")
    strict_store.create_rental(buyer.id, [(item.id, 4)], "2026-10-19", "2026-10-20")

    with pytest.raises(AvailabilityError):
        strict_store.create_rental(buyer.id, [(item.id, 2)], "2026-10-19", "2026-10-20")
    assert len(strict_store.list_rentals()) == 1
    strict_store.create_rental(buyer.id, [(item.id, 1)], "2026-10-19", "2026-10-20")
    assert strict_store.available_count(item.id) == 0


def test_delete_rental(store, week_rental):
    store.return_rental(week_rental.id)
    assert store.delete_rental(week_rental.id) is True
    assert store.get_rental(week_rental.id) is None
    assert store.delete_rental(week_rental.id) is False


def test_identities_are_never_reused(store, customer, gown, week_rental):
    store.delete_rental(week_rental.id)
    again = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-19", "2026-10-20")
    assert again.id > week_rental.id


def test_active_and_returned_listings(store, customer, gown, week_rental):
    newer = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-18", "2026-10-25")
    older = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-01", "2026-10-25")
    store.return_rental(older.id)

    assert [r.id for r in store.rentals.list_active()] == [newer.id, week_rental.id]
    assert [r.id for r in store.rentals.list_returned()] == [older.id]
    assert [r.id for r in store.list_rentals(status="returned")] == [older.id]


def test_invoice_for_returned_rental(store, customer, gown, tuxedo):
    rental = store.create_rental(
        customer.id,
        [(gown.id, 2), (tuxedo.id, 1)],
        date(2026, 10, 15),
        date(2026, 10, 20),
        discount_percent=10,
        notes="Deliver to the venue",
    )
    returned = store.return_rental(rental.id)
    invoice = store.build_invoice(rental.id)

    assert invoice.customer == customer
    assert invoice.rental_days == 5
    assert [(line.name, line.quantity, line.subtotal) for line in invoice.lines] == [
        ("Evening Gown", 2, 500000),
        ("Tuxedo", 1, 375000),
    ]
    assert invoice.subtotal == 875000
    assert invoice.discount_amount == 87500
    assert invoice.total_price == returned.total_price == 787500
    assert invoice.rental.notes == "Deliver to the venue"


def test_invoice_requires_a_returned_rental(store, week_rental):
    with pytest.raises(ValidationError):
        store.build_invoice(week_rental.id)
    with pytest.raises(NotFoundError):
        store.build_invoice(4242)


def test_check_out_keeps_whole_seconds(store, customer, gown):
    """Test the returned rental matches what is read back"""
    rental = store.create_rental(
        customer.id,
        [(gown.id, 1)],
        datetime(2026, 10, 15, 9, 30, 12, 345678),
        datetime(2026, 10, 20, 18, 0, 0, 999999),
    )
    assert rental.rental_date == datetime(2026, 10, 15, 9, 30, 12)
    assert rental.due_date == datetime(2026, 10, 20, 18, 0, 0)
    assert store.get_rental(rental.id) == rental


def test_unstorable_total_rejects_return_and_keeps_rental_active(store, customer, gown):
    rental = store.create_rental(customer.id, [(gown.id, 5)], "2026-10-12", "2026-10-19")
    store.connection.execute(
        "UPDATE clothing_items SET rental_price = ? WHERE id = ?", (1e18, gown.id)
    )
    store.connection.commit()

    with pytest.raises(ValidationError) as excinfo:
        store.return_rental(rental.id)
    assert excinfo.value.field == "total_price"
    assert store.get_rental(rental.id).status == RentalStatus.ACTIVE

    store.update_item(replace(gown, rental_price=50000))
    assert store.return_rental(rental.id).total_price == 5 * 8 * 50000
