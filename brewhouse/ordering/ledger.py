"""
Order ledger.

The ledger is the single source of truth for orders. It keeps them
most-recent-first, creates them from cart snapshots, and applies status
and payment-status changes. Orders are never removed; cancelling is a
status.

Unknown order ids are not errors: mutators report whether they applied
by returning a bool, and leave the ledger untouched otherwise.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, NamedTuple, Optional

from brewhouse.ordering import status as status_engine
from brewhouse.ordering.clock import Clock, TimestampIds, now_ms
from brewhouse.schemas import (
    CartItem,
    Order,
    OrderSource,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    default_payment_status,
)

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX = "ORD-"


class EmptyCartError(ValueError):
    """Raised when checkout is attempted with nothing in the cart."""


class LedgerPartition(NamedTuple):
    """Open orders and finished orders, each most-recent-first."""
    active: list[Order]
    historical: list[Order]


def format_time_of_day(created_at: int) -> str:
    """Local wall-clock time of an epoch-ms stamp, e.g. ``09:41:07 AM``."""
    return datetime.fromtimestamp(created_at / 1000).strftime("%I:%M:%S %p")


class OrderLedger:
    """
    Owns the list of orders.

    Args:
        orders: Initial orders, most-recent-first
        on_change: Called after every applied mutation (persistence hook)
        clock: Returns the current time in epoch milliseconds
        id_factory: Produces an order id from a creation stamp
    """

    def __init__(
        self,
        orders: Iterable[Order] = (),
        on_change: Optional[Callable[[], None]] = None,
        clock: Clock = now_ms,
        id_factory: Optional[Callable[[int], str]] = None,
    ) -> None:
        self._orders: list[Order] = list(orders)
        self._on_change = on_change
        self._clock = clock
        if id_factory is None:
            id_factory = TimestampIds(prefix=ORDER_ID_PREFIX, clock=clock)
        self._next_id = id_factory
        self._seed_ids()

    def __len__(self) -> int:
        return len(self._orders)

    def __iter__(self):
        return iter(tuple(self._orders))

    def _seed_ids(self) -> None:
        seed = getattr(self._next_id, "seed", None)
        if seed is not None:
            seed(order.id for order in self._orders)

    def _apply(self, orders: list[Order]) -> None:
        """
        Install ``orders`` and run the change hook.

        If the hook raises (the write did not happen) the previous list is
        put back before the error propagates, so a failed save leaves the
        ledger as it was.
        """
        previous = self._orders
        self._orders = orders
        if self._on_change is None:
            return
        try:
            self._on_change()
        except Exception:
            self._orders = previous
            logger.error("Ledger change was not persisted; rolled back")
            raise

    def _index_of(self, order_id: str) -> Optional[int]:
        for index, order in enumerate(self._orders):
            if order.id == order_id:
                return index
        return None

    # =========================================================================
    # READS
    # =========================================================================

    def orders(self) -> tuple[Order, ...]:
        return tuple(self._orders)

    def get(self, order_id: str) -> Optional[Order]:
        index = self._index_of(order_id)
        return None if index is None else self._orders[index]

    def partition(self) -> LedgerPartition:
        active: list[Order] = []
        historical: list[Order] = []
        for order in self._orders:
            if status_engine.is_active(order.status):
                active.append(order)
            else:
                historical.append(order)
        return LedgerPartition(active=active, historical=historical)

    def active_count(self) -> int:
        return sum(1 for order in self._orders if status_engine.is_active(order.status))

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def create_order(
        self,
        cart_snapshot: Iterable[CartItem],
        payment_method: PaymentMethod,
        source: OrderSource = OrderSource.LOCAL,
    ) -> Order:
        """
        Create a pending order from a cart snapshot and put it first.

        The caller owns the cart and clears it once this returns.

        Raises:
            EmptyCartError: If the snapshot has no items
        """
        items = tuple(cart_snapshot)
        if not items:
            raise EmptyCartError("Cannot create an order from an empty cart")

        payment_method = PaymentMethod(payment_method)
        created_at = self._clock()
        order = Order(
            id=self._next_id(created_at),
            created_at=created_at,
            date=format_time_of_day(created_at),
            items=items,
            total=round(sum(item.price * item.quantity for item in items), 2),
            status=OrderStatus.PENDING,
            payment_method=payment_method,
            payment_status=default_payment_status(payment_method),
            source=OrderSource(source),
        )
        self._apply([order, *self._orders])
        logger.info(
            f"Order {order.id} created ({order.source.value}) - "
            f"{len(items)} line(s), ${order.total:.2f}, {payment_method.value}"
        )
        return order

    def update_status(self, order_id: str, new_status: OrderStatus) -> bool:
        """
        Move an order to ``new_status`` if the status engine allows it.

        Returns False when the id is unknown or the order is already
        completed or cancelled.
        """
        new_status = OrderStatus(new_status)
        index = self._index_of(order_id)
        if index is None:
            logger.debug(f"Status update ignored: unknown order {order_id}")
            return False

        current = self._orders[index]
        if not status_engine.can_transition(current.status, new_status):
            logger.warning(
                f"Status update refused: {order_id} is {current.status.value}, "
                f"cannot become {new_status.value}"
            )
            return False

        orders = list(self._orders)
        orders[index] = current.model_copy(update={"status": new_status})
        self._apply(orders)
        logger.info(f"Order {order_id}: {current.status.value} -> {new_status.value}")
        return True

    def update_payment_status(self, order_id: str, new_status: PaymentStatus) -> bool:
        """Overwrite an order's payment status. Returns False for unknown ids."""
        new_status = PaymentStatus(new_status)
        index = self._index_of(order_id)
        if index is None:
            logger.debug(f"Payment update ignored: unknown order {order_id}")
            return False

        current = self._orders[index]
        orders = list(self._orders)
        orders[index] = current.model_copy(update={"payment_status": new_status})
        self._apply(orders)
        logger.info(f"Order {order_id}: payment marked {new_status.value}")
        return True

    def merge(self, incoming: Iterable[Order]) -> int:
        """
        Fold externally-originated orders into the ledger.

        Ids already present are skipped. The result stays most-recent-first
        by creation time; orders with equal stamps keep their relative order.

        Returns:
            Number of orders added
        """
        known = {order.id for order in self._orders}
        added: list[Order] = []
        for order in incoming:
            if order.id in known:
                continue
            known.add(order.id)
            added.append(order)

        if not added:
            return 0

        merged = added + self._orders
        merged.sort(key=lambda o: o.created_at, reverse=True)
        self._apply(merged)
        self._seed_ids()
        logger.info(f"Merged {len(added)} external order(s) into the ledger")
        return len(added)

    def replace_all(self, orders: Iterable[Order]) -> None:
        """Swap in a loaded history without firing the change hook."""
        self._orders = list(orders)
        self._seed_ids()
