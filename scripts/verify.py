"""
Order History Verification Script

Checks the persisted order_history blob for integrity after a simulation.
Reads the store selected by STORAGE_BACKEND / DATABASE_URL.
Run from project root: python scripts/verify.py

Version: 1.0.0
"""

import sys
from collections import Counter
from datetime import datetime

from pydantic import ValidationError

from brewhouse.core.config import get_settings
from brewhouse.schemas import OrderList, OrderSource, OrderStatus, PaymentMethod, PaymentStatus
from brewhouse.services.storage import ORDER_HISTORY_KEY, get_blob_store


def verify_orders() -> bool:
    """Verify order history integrity. Returns True when no problem was found."""
    settings = get_settings()
    store = get_blob_store()

    print("=" * 60)
    print("🔍 ORDER HISTORY VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🗄️  Store: {store.provider_name} ({settings.database_url})")
    print("=" * 60)

    raw = store.get(ORDER_HISTORY_KEY)
    if raw is None:
        print("\n❌ No order history found!")
        print("   Run the simulation first: python scripts/simulate.py")
        return False

    try:
        orders = OrderList.validate_json(raw)
        print("\n✅ Order history parsed successfully!")
    except ValidationError as e:
        print(f"\n❌ Order history is corrupt ({e.error_count()} error(s)):")
        for error in e.errors()[:5]:
            print(f"   {'.'.join(str(p) for p in error['loc'])}: {error['msg']}")
        return False

    problems = 0

    # Statistics
    statuses = Counter(o.status for o in orders)
    print("\n📊 STATISTICS:")
    print(f"   Total Orders: {len(orders)}")
    for status in OrderStatus:
        print(f"   {status.value.title():<10} {statuses.get(status, 0)}")
    print(f"   Cloud: {sum(1 for o in orders if o.source == OrderSource.CLOUD)}")

    # Duplicate ids
    duplicates = [order_id for order_id, n in Counter(o.id for o in orders).items() if n > 1]
    if duplicates:
        problems += len(duplicates)
        print(f"\n⚠️ {len(duplicates)} duplicate order IDs found: {duplicates[:5]}")
    else:
        print("\n✅ No duplicate order IDs")

    # Most-recent-first
    out_of_order = sum(1 for newer, older in zip(orders, orders[1:]) if newer.created_at < older.created_at)
    if out_of_order:
        problems += out_of_order
        print(f"⚠️ {out_of_order} order(s) out of most-recent-first sequence")
    else:
        print("✅ History is most-recent-first")

    # Totals match their items
    mismatched = [o.id for o in orders if abs(o.total - sum(i.price * i.quantity for i in o.items)) > 0.005]
    if mismatched:
        problems += len(mismatched)
        print(f"⚠️ {len(mismatched)} order total(s) differ from their items: {mismatched[:5]}")
    else:
        print("✅ Every total matches its line items")

    # Online orders start paid
    unpaid_online = [
        o.id for o in orders
        if o.payment_method == PaymentMethod.ONLINE and o.payment_status == PaymentStatus.UNPAID
    ]
    if unpaid_online:
        print(f"ℹ️  {len(unpaid_online)} online order(s) marked unpaid by staff")

    # Revenue
    revenue = sum(
        o.total for o in orders
        if o.payment_status == PaymentStatus.PAID and o.status != OrderStatus.CANCELLED
    )
    print("\n💰 REVENUE:")
    print(f"   Collected: {settings.currency_symbol}{revenue:.2f}")
    if orders:
        print(f"   Average order: {settings.currency_symbol}{sum(o.total for o in orders) / len(orders):.2f}")

    # Sample data
    print("\n📋 RECENT ORDERS:")
    print("-" * 60)
    for order in orders[:5]:
        print(
            f"   {order.id:<20} {order.date:<12} {order.status.value:<10} "
            f"{order.payment_status.value:<7} {settings.currency_symbol}{order.total:.2f}"
        )

    print("\n" + "=" * 60)
    if problems:
        print(f"❌ VERIFICATION FOUND {problems} PROBLEM(S)")
    else:
        print("✅ VERIFICATION COMPLETE")
    print("=" * 60)

    return problems == 0


if __name__ == "__main__":
    sys.exit(0 if verify_orders() else 1)
