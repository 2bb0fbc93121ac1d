"""
Storefront

Owns the catalog, cart, order ledger, staff access gate and cloud sync,
and connects them to the blob store:

    - load() reads the menu, order_history and cloud_config blobs once at
      startup, falling back to defaults when a blob is missing or corrupt
    - every applied catalog, ledger or cloud mutation rewrites its blob

All mutations are plain synchronous method calls. The API runs them from
one event loop, which makes the storefront the single writer of its state.
"""

import random
from typing import Optional

from pydantic import ValidationError

from brewhouse.core.config import Settings, get_logger
from brewhouse.ordering.access import AccessGate
from brewhouse.ordering.cart import Cart
from brewhouse.ordering.catalog import INITIAL_MENU, CatalogStore
from brewhouse.ordering.clock import Clock, now_ms
from brewhouse.ordering.cloud import CloudSync
from brewhouse.ordering.ledger import OrderLedger
from brewhouse.schemas import (
    CloudConfig,
    MenuList,
    Order,
    OrderList,
    OrderSource,
    PaymentMethod,
)
from brewhouse.services.storage import (
    BaseBlobStore,
    CLOUD_CONFIG_KEY,
    MENU_KEY,
    ORDER_HISTORY_KEY,
)

logger = get_logger(__name__)


class Storefront:
    """
    The storefront's state and its persistence wiring.

    Args:
        store: Blob store holding the persisted state
        admin_secret: Access key for the staff gate
        cloud_order_probability: Chance that a cloud tick injects an order
        clock: Returns the current time in epoch milliseconds
        rng: Random source for the simulated cloud feed
    """

    def __init__(
        self,
        store: BaseBlobStore,
        admin_secret: str = "admin",
        cloud_order_probability: float = 0.3,
        clock: Clock = now_ms,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.catalog = CatalogStore(INITIAL_MENU, on_change=self.save_menu)
        self.cart = Cart()
        self.ledger = OrderLedger(on_change=self.save_orders, clock=clock)
        self.gate = AccessGate(admin_secret)
        self.cloud = CloudSync(
            self.catalog,
            self.ledger,
            order_probability=cloud_order_probability,
            on_change=self.save_cloud_config,
            rng=rng,
            clock=clock,
        )

    @classmethod
    def from_settings(cls, store: BaseBlobStore, settings: Settings) -> "Storefront":
        storefront = cls(
            store,
            admin_secret=settings.admin_secret,
            cloud_order_probability=settings.cloud_order_probability,
        )
        storefront.load()
        return storefront

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def load(self) -> None:
        """Read all three blobs into the stores (startup only)."""
        menu = self._read(MENU_KEY, MenuList.validate_json)
        self.catalog.replace_all(INITIAL_MENU if menu is None else menu)

        orders = self._read(ORDER_HISTORY_KEY, OrderList.validate_json)
        self.ledger.replace_all(orders or [])

        config = self._read(CLOUD_CONFIG_KEY, CloudConfig.model_validate_json)
        self.cloud.replace_config(config or CloudConfig())

        logger.info(
            f"Storefront loaded from {self.store.provider_name}: "
            f"{len(self.catalog)} menu item(s), {len(self.ledger)} order(s), "
            f"cloud sync {'on' if self.cloud.enabled else 'off'}"
        )

    def _read(self, key: str, parse):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return parse(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupt {key} blob ({e.error_count()} error(s)); using defaults")
            return None

    def save_menu(self) -> None:
        self.store.put(MENU_KEY, MenuList.dump_json(list(self.catalog.items()), by_alias=True).decode())

    def save_orders(self) -> None:
        self.store.put(
            ORDER_HISTORY_KEY,
            OrderList.dump_json(list(self.ledger.orders()), by_alias=True, exclude_none=True).decode(),
        )

    def save_cloud_config(self) -> None:
        self.store.put(CLOUD_CONFIG_KEY, self.cloud.config.model_dump_json(by_alias=True, exclude_none=True))

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    def checkout(self, payment_method: PaymentMethod) -> Order:
        """
        Turn the cart into a local order and empty the cart.

        The cart is cleared only after the order has been written. If the
        write fails the ledger is rolled back and the cart keeps its lines,
        so retrying places exactly one order.

        Raises:
            EmptyCartError: If the cart is empty (cart and ledger untouched)
        """
        order = self.ledger.create_order(
            self.cart.snapshot(),
            payment_method,
            source=OrderSource.LOCAL,
        )
        self.cart.clear()
        return order
