"""
Simulated cloud order feed.

There is no remote service behind this: when cloud sync is enabled, each
timer tick may fabricate an order from the current menu and push it
through the ledger tagged ``source=cloud``, so local and remote orders
share one most-recent-first history.

Ticks are driven from the application's event loop, the same loop that
serves requests, so they never interleave with another mutation.
"""

import asyncio
import logging
import random
from typing import Callable, Iterable, Optional

from brewhouse.ordering.catalog import CatalogStore
from brewhouse.ordering.clock import Clock, now_ms
from brewhouse.ordering.ledger import OrderLedger
from brewhouse.schemas import CartItem, CloudConfig, Order, OrderSource, PaymentMethod

logger = logging.getLogger(__name__)

MAX_LINES = 3
MAX_QUANTITY = 2


class CloudSync:
    """
    Holds the cloud configuration and injects simulated remote orders.

    Args:
        catalog: Menu to draw items from
        ledger: Ledger that receives injected orders
        config: Initial configuration (disabled by default)
        order_probability: Chance that one tick injects an order
        on_change: Called after the configuration changes
        rng: Random source
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(
        self,
        catalog: CatalogStore,
        ledger: OrderLedger,
        config: Optional[CloudConfig] = None,
        order_probability: float = 0.3,
        on_change: Optional[Callable[[], None]] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = now_ms,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._config = config or CloudConfig()
        self.order_probability = order_probability
        self._on_change = on_change
        self._rng = rng or random.Random()
        self._clock = clock

    @property
    def config(self) -> CloudConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def _apply(self, config: CloudConfig) -> None:
        """Install ``config`` and run the change hook, restoring the old one if it raises."""
        previous = self._config
        self._config = config
        if self._on_change is None:
            return
        try:
            self._on_change()
        except Exception:
            self._config = previous
            logger.error("Cloud configuration change was not persisted; rolled back")
            raise

    def configure(self, config: CloudConfig) -> CloudConfig:
        """Replace the configuration, keeping the last sync stamp."""
        if config.last_sync is None and self._config.last_sync is not None:
            config = config.model_copy(update={"last_sync": self._config.last_sync})
        self._apply(config)
        logger.info(
            f"Cloud sync {'enabled' if config.enabled else 'disabled'}"
            + (f" ({config.project_url})" if config.project_url else "")
        )
        return config

    def replace_config(self, config: CloudConfig) -> None:
        """Swap in a loaded configuration without firing the change hook."""
        self._config = config

    def inject_simulated_order(self) -> Optional[Order]:
        """
        Fabricate one remote order from the current menu.

        Returns:
            The new order, or None when sync is disabled or the menu is empty
        """
        if not self.enabled:
            return None

        menu = self._catalog.items()
        if not menu:
            logger.debug("Cloud: menu empty, nothing to inject")
            return None

        picks = self._rng.sample(menu, k=self._rng.randint(1, min(MAX_LINES, len(menu))))
        lines = [
            CartItem.from_menu_item(item, quantity=self._rng.randint(1, MAX_QUANTITY))
            for item in picks
        ]
        method = self._rng.choice(list(PaymentMethod))
        order = self._ledger.create_order(lines, method, source=OrderSource.CLOUD)
        logger.info(f"Cloud: injected remote order {order.id}")
        return order

    def import_orders(self, orders: Iterable[Order]) -> int:
        """
        Merge order records pulled from the cloud into the ledger.

        Records without a provenance tag are marked ``cloud``. Ids already in
        the ledger are skipped.

        Returns:
            Number of orders added
        """
        tagged = [
            order if order.source is not None else order.model_copy(update={"source": OrderSource.CLOUD})
            for order in orders
        ]
        return self._ledger.merge(tagged)

    def tick(self) -> Optional[Order]:
        """
        One timer callback: stamp the sync time and maybe inject an order.
        """
        if not self.enabled:
            return None

        self._apply(self._config.model_copy(update={"last_sync": self._clock()}))

        if self._rng.random() < self.order_probability:
            return self.inject_simulated_order()
        return None


async def run_sync_loop(cloud: CloudSync, interval: float) -> None:
    """
    Call ``cloud.tick()`` every ``interval`` seconds until cancelled.

    A failing tick is logged and the loop carries on with the next one.
    """
    logger.info(f"Cloud sync loop started (every {interval:g}s)")
    try:
        while True:
            await asyncio.sleep(interval)
            try:
                cloud.tick()
            except Exception:
                logger.exception("Cloud sync tick failed")
    finally:
        logger.info("Cloud sync loop stopped")
