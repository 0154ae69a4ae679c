# tests/test_reports.py
from datetime import date

import pytest

from closet_rental.domain.models import RevenueGranularity


def _returned(store, customer, item, start, quantity=1):
    rental = store.create_rental(customer.id, [(item.id, quantity)], start, start)
    return store.return_rental(rental.id)


def test_overdue_rentals_sorted_by_due_date(store, customer, gown):
    late = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-10", "2026-10-18")
    later = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-10", "2026-10-15")
    store.create_rental(customer.id, [(gown.id, 1)], "2026-10-10", "2026-10-20")
    closed = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-01", "2026-10-05")
    store.return_rental(closed.id)

    assert [rental.id for rental in store.overdue_rentals()] == [later.id, late.id]


def test_rental_becomes_overdue_as_time_passes(store, customer, gown, clock):
    rental = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-19", "2026-10-21")
    assert store.overdue_rentals() == []

    clock.advance(days=2, minutes=1)
    assert [r.id for r in store.overdue_rentals()] == [rental.id]


def test_popular_items_counts_active_units(store, customer, gown, tuxedo):
    store.create_item("Summer Dress", "M", 30000, 10)
    store.create_rental(customer.id, [(tuxedo.id, 2)], "2026-10-15", "2026-10-20")
    store.create_rental(customer.id, [(gown.id, 1)], "2026-10-15", "2026-10-20")
    store.create_rental(customer.id, [(gown.id, 1)], "2026-10-16", "2026-10-20")
    _returned(store, customer, tuxedo, "2026-10-01", quantity=3)

    ranked = store.popular_items()
    # Equal counts keep catalog order; unrented items are left out.
    assert [(entry.item.id, entry.rented) for entry in ranked] == [
        (gown.id, 2),
        (tuxedo.id, 2),
    ]
    assert [entry.item.id for entry in store.popular_items(1)] == [gown.id]
    assert store.popular_items(0) == []


def test_top_spenders_for_year(store, customer, gown, tuxedo):
    binh = store.create_customer("Binh Tran", "091-333-4444", "456 Nguyen Hue")
    cam = store.create_customer("Cam Le", "098-555-6666", "789 Pasteur")
    dung = store.create_customer("Dung Pham", "093-777-8888", "101 Vo Van Tan")

    first = _returned(store, customer, gown, "2026-10-15")
    second = _returned(store, binh, tuxedo, "2026-10-15")
    _returned(store, cam, gown, "2025-12-30")
    store.create_rental(dung.id, [(gown.id, 1)], "2026-10-15", "2026-10-20")

    spenders = store.top_spenders()
    assert [(s.customer_id, s.total_spent) for s in spenders] == [
        (binh.id, second.total_price),
        (customer.id, first.total_price),
    ]
    assert spenders[0].name == "Binh Tran"
    assert [s.customer_id for s in store.top_spenders(2025)] == [cam.id]
    assert store.top_spenders(2024) == []


def test_top_spenders_ties_and_limit(store, customer, gown):
    binh = store.create_customer("Binh Tran", "091-333-4444", "456 Nguyen Hue")
    _returned(store, binh, gown, "2026-10-15")
    _returned(store, customer, gown, "2026-10-15")
    free = store.create_rental(customer.id, [(gown.id, 1)], "2026-10-15", "2026-10-15", 100)
    store.return_rental(free.id)

    assert [s.customer_id for s in store.top_spenders(2026)] == [customer.id, binh.id]
    assert [s.customer_id for s in store.top_spenders(2026, n=1)] == [customer.id]


def test_monthly_revenue(store, customer, gown):
    october = _returned(store, customer, gown, "2026-10-15")
    september = _returned(store, customer, gown, "2026-09-10")
    _returned(store, customer, gown, "2025-10-31")
    store.create_rental(customer.id, [(gown.id, 1)], "2026-10-16", "2026-10-20")

    buckets = store.revenue_by_bucket(RevenueGranularity.MONTH)
    assert len(buckets) == 12
    assert buckets[0].label == "11/2025"
    assert buckets[-1].label == "10/2026"
    assert buckets[-1].start == date(2026, 10, 1)
    assert buckets[-1].end == date(2026, 11, 1)
    assert buckets[-1].total == october.total_price
    assert buckets[-2].total == september.total_price
    assert sum(bucket.total for bucket in buckets) == (
        october.total_price + september.total_price
    )


def test_weekly_revenue_runs_monday_to_sunday(store, customer, gown):
    this_week = _returned(store, customer, gown, "2026-10-19")
    last_sunday = _returned(store, customer, gown, "2026-10-18")
    last_monday = _returned(store, customer, gown, "2026-10-12")

    buckets = store.revenue_by_bucket("week")
    assert len(buckets) == 12
    assert buckets[-1].start == date(2026, 10, 19)
    assert buckets[0].start == date(2026, 8, 3)
    assert buckets[-1].total == this_week.total_price
    assert buckets[-2].start == date(2026, 10, 12)
    assert buckets[-2].total == last_sunday.total_price + last_monday.total_price


def test_yearly_revenue(store, customer, gown):
    recent = _returned(store, customer, gown, "2026-01-01")
    _returned(store, customer, gown, "2021-12-31")

    buckets = store.revenue_by_bucket(RevenueGranularity.YEAR)
    assert [bucket.label for bucket in buckets] == [
        "2022", "2023", "2024", "2025", "2026",
    ]
    assert [bucket.total for bucket in buckets] == [0, 0, 0, 0, recent.total_price]


def test_unknown_granularity(store):
    with pytest.raises(ValueError):
        store.revenue_by_bucket("fortnight")


def test_dashboard_summary(store, customer, gown, tuxedo):
    store.create_rental(customer.id, [(gown.id, 1)], "2026-10-10", "2026-10-12")
    store.create_rental(customer.id, [(tuxedo.id, 1)], "2026-10-18", "2026-10-25")
    _returned(store, customer, gown, "2026-10-01")

    summary = store.dashboard_summary()
    assert summary.item_kinds == 2
    assert summary.total_stock == 8
    assert summary.active_rentals == 2
    assert summary.overdue_rentals == 1
