"""
Catalog store: the shop's menu.

Plain CRUD over MenuItem records. New items go to the front of the menu.
Orders hold their own copies of items, so nothing here can reach back
into order history.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from brewhouse.ordering.clock import TimestampIds
from brewhouse.schemas import Category, MenuItem

logger = logging.getLogger(__name__)

DEFAULT_IMAGE = (
    "https://images.unsplash.com/photo-1541167760496-162955ed8a9f"
    "?auto=format&fit=crop&q=80&w=400"
)

INITIAL_MENU: tuple[MenuItem, ...] = (
    MenuItem(
        id="1",
        name="Caramel Macchiato",
        description="Freshly steamed milk with vanilla-flavored syrup marked with espresso.",
        price=5.50,
        category=Category.HOT_COFFEE,
        image="https://images.unsplash.com/photo-1485808191679-5f86510681a2?auto=format&fit=crop&q=80&w=400",
    ),
    MenuItem(
        id="2",
        name="Cold Brew",
        description="Handcrafted in small batches daily, slow-steeped in cool water for 20 hours.",
        price=4.75,
        category=Category.ICE_COFFEE,
        image="https://images.unsplash.com/photo-1517701604599-bb29b56509d1?auto=format&fit=crop&q=80&w=400",
    ),
    MenuItem(
        id="3",
        name="Earl Grey Tea",
        description="A bright blend of fine black teas, fragrant with citrusy bergamot.",
        price=3.50,
        category=Category.TEA,
        image="https://images.unsplash.com/photo-1544787210-2211d4d70404?auto=format&fit=crop&q=80&w=400",
    ),
    MenuItem(
        id="4",
        name="Iced Matcha Latte",
        description="Smooth and creamy matcha sweetened just right and served over ice.",
        price=6.25,
        category=Category.ICE_COFFEE,
        image="https://images.unsplash.com/photo-1536304993881-ff6e9eefa2a6?auto=format&fit=crop&q=80&w=400",
    ),
)


class CatalogStore:
    """
    Owns the menu.

    Args:
        items: Initial menu, in display order
        on_change: Called after every applied mutation (persistence hook)
        id_factory: Produces ids for new items
    """

    def __init__(
        self,
        items: Iterable[MenuItem] = (),
        on_change: Optional[Callable[[], None]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._items: list[MenuItem] = list(items)
        self._on_change = on_change
        if id_factory is None:
            ids = TimestampIds()
            ids.seed(item.id for item in self._items)
            id_factory = ids
        self._next_id = id_factory

    def __len__(self) -> int:
        return len(self._items)

    def _apply(self, items: list[MenuItem]) -> None:
        """Install ``items`` and run the change hook, restoring the old menu if it raises."""
        previous = self._items
        self._items = items
        if self._on_change is None:
            return
        try:
            self._on_change()
        except Exception:
            self._items = previous
            logger.error("Menu change was not persisted; rolled back")
            raise

    def items(self, category: Optional[Category] = None) -> tuple[MenuItem, ...]:
        if category is None:
            return tuple(self._items)
        return tuple(item for item in self._items if item.category == category)

    def get(self, item_id: str) -> Optional[MenuItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add(
        self,
        name: str,
        description: str,
        price: float,
        category: Category,
        image: Optional[str] = None,
    ) -> MenuItem:
        item = MenuItem(
            id=self._next_id(),
            name=name,
            description=description,
            price=price,
            category=category,
            image=image or DEFAULT_IMAGE,
        )
        self._apply([item, *self._items])
        logger.info(f"Menu item added: {item.name} ({item.id})")
        return item

    def update(self, item_id: str, **changes: Any) -> Optional[MenuItem]:
        """
        Replace fields of an existing item.

        ``None`` values are ignored. Returns the new record, or None when the
        id is unknown.
        """
        for index, item in enumerate(self._items):
            if item.id != item_id:
                continue
            fields = {k: v for k, v in changes.items() if v is not None and k != "id"}
            updated = MenuItem.model_validate({**item.model_dump(), **fields})
            items = list(self._items)
            items[index] = updated
            self._apply(items)
            logger.info(f"Menu item updated: {updated.name} ({item_id})")
            return updated
        return None

    def delete(self, item_id: str) -> bool:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                self._apply(self._items[:index] + self._items[index + 1:])
                logger.info(f"Menu item retired: {item.name} ({item_id})")
                return True
        return False

    def replace_all(self, items: Iterable[MenuItem]) -> None:
        """Swap in a loaded menu without firing the change hook."""
        self._items = list(items)
        seed = getattr(self._next_id, "seed", None)
        if seed is not None:
            seed(item.id for item in self._items)
