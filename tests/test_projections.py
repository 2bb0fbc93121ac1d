"""
Tracking-screen projections.
"""

from datetime import datetime

import pytest

from brewhouse.ordering.cart import Cart
from brewhouse.ordering.ledger import OrderLedger
from brewhouse.ordering.projections import order_view, relative_time, short_number
from brewhouse.schemas import OrderStatus, PaymentMethod

from tests.conftest import START_MS

MINUTE = 60_000
HOUR = 60 * MINUTE


class TestRelativeTime:

    @pytest.mark.parametrize(
        "elapsed, expected",
        [
            (0, "Just now"),
            (59_999, "Just now"),
            (MINUTE, "1 min ago"),
            (5 * MINUTE + 30_000, "5 mins ago"),
            (59 * MINUTE, "59 mins ago"),
            (HOUR, "1 hour ago"),
            (23 * HOUR, "23 hours ago"),
        ],
    )
    def test_recent(self, elapsed, expected):
        assert relative_time(START_MS, now=START_MS + elapsed) == expected

    def test_older_than_a_day_shows_date(self):
        expected = datetime.fromtimestamp(START_MS / 1000).strftime("%m/%d/%Y")
        assert relative_time(START_MS, now=START_MS + 25 * HOUR) == expected

    def test_future_stamp_is_just_now(self):
        assert relative_time(START_MS + 5 * MINUTE, now=START_MS) == "Just now"


class TestShortNumber:

    def test_last_four_digits(self):
        assert short_number("ORD-1712345678901") == "8901"

    def test_short_ids(self):
        assert short_number("ORD-42") == "42"


class TestOrderView:

    def test_view_of_a_ready_order(self, clock, item_a):
        ledger = OrderLedger(clock=clock)
        cart = Cart()
        cart.add(item_a)
        order = ledger.create_order(cart.snapshot(), PaymentMethod.CASH)
        ledger.update_status(order.id, OrderStatus.READY)

        view = order_view(ledger.get(order.id), now=START_MS + 3 * MINUTE)
        assert view.stage_index == 2
        assert view.stage_label == "Awaiting Your Arrival"
        assert view.relative_time == "3 mins ago"
        assert view.short_number == str(START_MS)[-4:]
        assert view.is_terminal is False

    def test_view_of_a_cancelled_order(self, clock, item_a):
        ledger = OrderLedger(clock=clock)
        cart = Cart()
        cart.add(item_a)
        order = ledger.create_order(cart.snapshot(), PaymentMethod.ONLINE)
        ledger.update_status(order.id, OrderStatus.CANCELLED)

        view = order_view(ledger.get(order.id), now=START_MS)
        assert view.stage_index is None
        assert view.is_terminal is True
