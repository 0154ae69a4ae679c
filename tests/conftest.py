# tests/conftest.py
from datetime import datetime, timedelta

import pytest

from closet_rental.config import EngineSettings
from closet_rental.store import RentalStore

# Monday 19 October 2026, mid-morning.
NOW = datetime(2026, 10, 19, 10, 0, 0)


class FakeClock:
    """Clock whose current time the test controls."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def store(clock):
    """In-memory store that trusts callers on availability"""
    rental_store = RentalStore.init(EngineSettings(), clock=clock)
    yield rental_store
    rental_store.close()


@pytest.fixture
def strict_store(clock):
    """In-memory store that rejects over-allocated check-outs"""
    rental_store = RentalStore.init(
        EngineSettings(enforce_availability=True), clock=clock
    )
    yield rental_store
    rental_store.close()


@pytest.fixture
def gown(store):
    return store.create_item("Evening Gown", "M", 50000, 5)


@pytest.fixture
def tuxedo(store):
    return store.create_item("Tuxedo", "L", 75000, 3)


@pytest.fixture
def customer(store):
    return store.create_customer("An Nguyen", "090-111-2222", "123 Le Loi, District 1")
