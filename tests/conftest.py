"""
Shared test fixtures for the Brewhouse test suite.
"""

import random

import pytest

from brewhouse.schemas import Category, MenuItem
from brewhouse.services.storage import MemoryBlobStore
from brewhouse.storefront import Storefront

ADMIN_SECRET = "letmein"

# 2024-04-05 12:00:00 UTC
START_MS = 1_712_318_400_000


class FakeClock:
    """Epoch-ms clock that only moves when told to."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


# ============================================================================
# Menu items
# ============================================================================

@pytest.fixture
def item_a() -> MenuItem:
    return MenuItem(
        id="a",
        name="Caramel Macchiato",
        description="Espresso over vanilla milk.",
        price=5.50,
        category=Category.HOT_COFFEE,
        image="a.jpg",
    )


@pytest.fixture
def item_b() -> MenuItem:
    return MenuItem(
        id="b",
        name="Earl Grey Tea",
        description="Black tea with bergamot.",
        price=3.50,
        category=Category.TEA,
        image="b.jpg",
    )


@pytest.fixture
def item_c() -> MenuItem:
    return MenuItem(
        id="c",
        name="Butter Croissant",
        description="Flaky and golden.",
        price=2.25,
        category=Category.BAKERY,
    )


# ============================================================================
# Core
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def storefront(store, clock) -> Storefront:
    sf = Storefront(
        store,
        admin_secret=ADMIN_SECRET,
        cloud_order_probability=1.0,
        clock=clock,
        rng=random.Random(7),
    )
    sf.load()
    return sf
