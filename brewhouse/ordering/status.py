"""
Order status engine.

The transition table is permissive: while an order is open,
staff may jump straight to any fulfillment stage (skipping stages is
allowed) or cancel it. Completed and cancelled orders are terminal.
"""

from typing import Optional

from brewhouse.schemas import OrderStatus

STAGES: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

_OPEN_TARGETS = frozenset(STAGES) | {OrderStatus.CANCELLED}

TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: _OPEN_TARGETS,
    OrderStatus.PREPARING: _OPEN_TARGETS,
    OrderStatus.READY: _OPEN_TARGETS,
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

STAGE_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Order Received",
    OrderStatus.PREPARING: "Brewing Artistry",
    OrderStatus.READY: "Awaiting Your Arrival",
    OrderStatus.COMPLETED: "Completed",
    OrderStatus.CANCELLED: "Cancelled",
}


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def is_active(status: OrderStatus) -> bool:
    return status not in TERMINAL_STATUSES


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Return True if an order in ``current`` may be moved to ``target``."""
    return target in TRANSITIONS[current]


def stage_index(status: OrderStatus) -> Optional[int]:
    """
    Position of ``status`` on the progress bar.

    Cancelled orders are not on the bar and return None.
    """
    try:
        return STAGES.index(status)
    except ValueError:
        return None


def stage_label(status: OrderStatus) -> str:
    return STAGE_LABELS[status]
