"""
Ordering core: catalog, cart, order ledger, status engine, staff access
gate and the simulated cloud feed.
"""

from brewhouse.ordering.access import AccessGate
from brewhouse.ordering.cart import Cart
from brewhouse.ordering.catalog import CatalogStore, INITIAL_MENU
from brewhouse.ordering.cloud import CloudSync
from brewhouse.ordering.ledger import EmptyCartError, LedgerPartition, OrderLedger

__all__ = [
    "AccessGate",
    "Cart",
    "CatalogStore",
    "INITIAL_MENU",
    "CloudSync",
    "EmptyCartError",
    "LedgerPartition",
    "OrderLedger",
]
