"""Read-only views used by the order tracking and dashboard screens."""

from datetime import datetime
from typing import Optional

from brewhouse.ordering import status as status_engine
from brewhouse.ordering.clock import now_ms
from brewhouse.schemas import Order, OrderView


def relative_time(timestamp: int, now: Optional[int] = None) -> str:
    """
    Humanize an epoch-ms stamp: "Just now", "5 mins ago", "2 hours ago",
    or the calendar date once a day has passed.
    """
    now = now_ms() if now is None else now
    minutes = max(0, now - timestamp) // 60000
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min{'s' if minutes > 1 else ''} ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    return datetime.fromtimestamp(timestamp / 1000).strftime("%m/%d/%Y")


def short_number(order_id: str) -> str:
    """Last four digits of the order's numeric part (ORD-1712345678901 -> 8901)."""
    numeric = order_id.rsplit("-", 1)[-1]
    return numeric[-4:]


def order_view(order: Order, now: Optional[int] = None) -> OrderView:
    return OrderView(
        order=order,
        short_number=short_number(order.id),
        stage_index=status_engine.stage_index(order.status),
        stage_label=status_engine.stage_label(order.status),
        relative_time=relative_time(order.created_at, now),
        is_terminal=status_engine.is_terminal(order.status),
    )
