"""
Cart aggregator.

Holds at most one entry per menu item id, in the order items were first
added. Entries are immutable CartItem values; quantity changes replace them.
"""

import logging
from typing import Optional

from brewhouse.schemas import CartItem, MenuItem

logger = logging.getLogger(__name__)


class Cart:
    """The customer's current selection."""

    def __init__(self) -> None:
        self._entries: dict[str, CartItem] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._entries

    def get(self, item_id: str) -> Optional[CartItem]:
        return self._entries.get(item_id)

    def add(self, item: MenuItem) -> CartItem:
        """Add one unit of ``item``, merging with an existing entry."""
        existing = self._entries.get(item.id)
        if existing is None:
            entry = CartItem.from_menu_item(item)
        else:
            entry = existing.model_copy(update={"quantity": existing.quantity + 1})
        self._entries[item.id] = entry
        logger.debug(f"Cart: {entry.name} x{entry.quantity}")
        return entry

    def remove(self, item_id: str) -> bool:
        return self._entries.pop(item_id, None) is not None

    def adjust_quantity(self, item_id: str, delta: int) -> Optional[CartItem]:
        """Change a quantity by ``delta``, never going below 1."""
        existing = self._entries.get(item_id)
        if existing is None:
            return None
        entry = existing.model_copy(update={"quantity": max(1, existing.quantity + delta)})
        self._entries[item_id] = entry
        return entry

    def total(self) -> float:
        return round(sum(e.price * e.quantity for e in self._entries.values()), 2)

    def item_count(self) -> int:
        return sum(e.quantity for e in self._entries.values())

    def is_empty(self) -> bool:
        return not self._entries

    def snapshot(self) -> tuple[CartItem, ...]:
        return tuple(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()
