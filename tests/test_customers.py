# tests/test_customers.py
from dataclasses import replace

import pytest

from closet_rental.domain.models import Customer
from closet_rental.services.errors import NotFoundError, ValidationError


def test_create_customer_trims_fields(store):
    created = store.create_customer("  Binh Tran ", "091-333-4444", " 456 Nguyen Hue ")
    assert created.id is not None
    assert created.name == "Binh Tran"
    assert created.address == "456 Nguyen Hue"
    assert store.get_customer(created.id) == created


@pytest.mark.parametrize(
    "name, phone, address, field",
    [
        ("", "091-333-4444", "456 Nguyen Hue", "name"),
        ("Binh Tran", "   ", "456 Nguyen Hue", "phone"),
        ("Binh Tran", "091-333-4444", None, "address"),
    ],
)
def test_create_customer_requires_every_field(store, name, phone, address, field):
    with pytest.raises(ValidationError) as excinfo:
        store.create_customer(name, phone, address)
    assert excinfo.value.field == field
    assert store.list_customers() == []


def test_update_customer(store, customer):
    updated = store.update_customer(replace(customer, phone="090-000-0000"))
    assert updated.phone == "090-000-0000"
    assert store.get_customer(customer.id).phone == "090-000-0000"


def test_update_unknown_customer_is_ignored(store, customer):
    ghost = Customer(id=999, name="Ghost", phone="000", address="Nowhere")
    assert store.update_customer(ghost) is None
    assert store.list_customers() == [customer]


def test_delete_customer_without_rentals(store, customer):
    result = store.delete_customer(customer.id)
    assert result
    assert result.reason is None
    assert store.get_customer(customer.id) is None


def test_delete_unknown_customer(store):
    result = store.delete_customer(999)
    assert not result
    assert result.reason == "Customer not found."


def test_customer_with_active_rental_cannot_be_deleted(store, customer, gown):
    store.create_rental(customer.id, [(gown.id, 1)], "2026-10-15", "2026-10-20")

    assert store.can_delete_customer(customer.id) is False
    result = store.delete_customer(customer.id)
    assert not result
    assert "1 rental on record" in result.reason
    assert store.get_customer(customer.id) == customer


def test_returned_rentals_still_block_deletion(store, customer, gown):
    """Test history is kept even once every rental is closed"""
    for start in ("2026-10-01", "2026-10-10"):
        rental = store.create_rental(customer.id, [(gown.id, 1)], start, "2026-10-15")
        store.return_rental(rental.id)

    result = store.delete_customer(customer.id)
    assert not result
    assert "2 rentals on record" in result.reason


def test_customer_can_be_deleted_after_rentals_are_removed(store, customer, gown):
    rental = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-15", "2026-10-20")
    store.delete_rental(rental.id)
    assert store.can_delete_customer(customer.id) is True
    assert store.delete_customer(customer.id)


def test_customer_history(store, customer, gown, tuxedo):
    older = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-01", "2026-10-05")
    newer = store.create_rental(customer.id, [(tuxedo.id, 1)], "2026-10-16", "2026-10-25")
    store.return_rental(older.id)
    other = store.create_customer("Cam Le", "098-555-6666", "789 Pasteur")
    store.create_rental(other.id, [(gown.id, 1)], "2026-10-16", "2026-10-25")

    history = store.customer_history(customer.id)
    assert history.customer == customer
    assert [rental.id for rental in history.rentals] == [newer.id, older.id]
    assert history.rental_count == 2
    # 2026-10-01 to 2026-10-19 inclusive is 19 days.
    assert history.total_spent == 19 * 50000


def test_history_of_unknown_customer(store):
    with pytest.raises(NotFoundError):
        store.customer_history(404)


def test_search_customers_by_name_or_phone(store, customer):
    other = store.create_customer("Cam Le", "098-555-6666", "789 Pasteur")
    assert store.search_customers("nguyen") == [customer]
    assert store.search_customers("098-555") == [other]
    assert store.search_customers("") == [customer, other]


def test_search_customers_treats_wildcards_literally(store, customer):
    other = store.create_customer("Cam_Le", "098-555-6666", "789 Pasteur")
    assert store.search_customers("_") == [other]
    assert store.search_customers("%") == []
