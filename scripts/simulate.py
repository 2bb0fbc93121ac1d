"""
Rush-Hour Simulation Script

Drives a running storefront through a burst of traffic: customers filling
the cart and checking out, staff moving orders through the fulfillment
stages concurrently, and forced cloud syncs landing in between.
Run from project root (server on port 8001): python scripts/simulate.py

Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any, Optional

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 30
ADMIN_SECRET = "admin"

STATUS_PATHS = [
    ["ready", "completed"],
    ["preparing", "ready", "completed"],
    ["preparing", "cancelled"],
    ["completed"],
]


# =============================================================================
# CUSTOMER FLOW
# =============================================================================

async def place_order(
    client: httpx.AsyncClient,
    menu: list[dict[str, Any]],
    order_num: int,
) -> dict[str, Any]:
    """Fill the cart with 1-4 random items and check out."""
    picks = random.sample(menu, k=random.randint(1, min(4, len(menu))))
    method = random.choice(["cash", "online"])
    start_time = time.time()

    try:
        await client.delete("/api/cart")
        for item in picks:
            for _ in range(random.randint(1, 3)):
                response = await client.post("/api/cart/items", json={"item_id": item["id"]})
                response.raise_for_status()

        response = await client.post("/api/checkout", json={"payment_method": method})
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            order = response.json()["order"]
            return {
                "order_num": order_num,
                "success": True,
                "order_id": order["id"],
                "total": order["total"],
                "method": method,
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }


# =============================================================================
# STAFF FLOW
# =============================================================================

async def work_order(client: httpx.AsyncClient, order_id: str) -> dict[str, Any]:
    """Walk one order along a random status path, then try to reopen it."""
    path = random.choice(STATUS_PATHS)
    applied = []

    for status in path:
        await asyncio.sleep(random.uniform(0, 0.05))
        response = await client.patch(f"/api/admin/orders/{order_id}/status", json={"status": status})
        if response.status_code == 200:
            applied.append(status)

    # A finished order must refuse further changes
    reopen = await client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "pending"})

    return {
        "order_id": order_id,
        "path": path,
        "applied": applied,
        "locked": reopen.status_code == 409,
    }


async def force_cloud_syncs(client: httpx.AsyncClient, count: int) -> int:
    """Enable cloud sync and inject ``count`` remote orders."""
    await client.put(
        "/api/admin/cloud",
        json={"enabled": True, "api_key": "sim", "project_url": "https://sim.invalid"},
    )
    injected = 0
    for _ in range(count):
        response = await client.post("/api/admin/cloud/sync")
        if response.status_code == 200 and response.json().get("success"):
            injected += 1
        await asyncio.sleep(0.01)
    return injected


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def preflight(client: httpx.AsyncClient, secret: str) -> Optional[list[dict[str, Any]]]:
    """Check health, log in as staff and fetch the menu."""
    print("\n1️⃣ Health Check...")
    response = await client.get("/health")
    if response.status_code != 200:
        print(f"   ❌ Failed: {response.text}")
        return None
    data = response.json()
    print(f"   ✅ Status: {data.get('status')}")
    print(f"   Storage: {data.get('storage')}")
    print(f"   Descriptions: {data.get('description_service')}")

    print("\n2️⃣ Staff Login...")
    response = await client.post("/api/admin/login", json={"secret": secret})
    if response.status_code != 200:
        print("   ❌ Invalid access key (set --secret to ADMIN_SECRET)")
        return None
    print("   ✅ Staff access granted")

    print("\n3️⃣ Menu...")
    menu = (await client.get("/api/menu")).json()
    if not menu:
        print("   ❌ Menu is empty, nothing to order")
        return None
    print(f"   ✅ {len(menu)} item(s) on the menu")
    return menu


async def run_simulation(
    num_orders: int = TOTAL_ORDERS,
    cloud_syncs: int = 5,
    secret: str = ADMIN_SECRET,
) -> dict[str, Any]:
    """
    Run the rush-hour simulation.

    Checkouts go one at a time (the storefront has a single cart). Every
    placed order is handed to a concurrent staff worker straight away, and
    forced cloud syncs run alongside.

    Args:
        num_orders: Number of customer orders to place
        cloud_syncs: Number of forced cloud syncs
        secret: Staff access key
    """
    print("=" * 70)
    print("☕ RUSH-HOUR SIMULATION")
    print("=" * 70)
    print(f"📋 Orders: {num_orders}")
    print(f"☁️  Cloud syncs: {cloud_syncs}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        menu = await preflight(client, secret)
        if menu is None:
            print("\n❌ Pre-flight checks failed. Fix issues before running simulation.")
            sys.exit(1)

        print("\n🚀 Opening the doors...\n")
        cloud_task = asyncio.create_task(force_cloud_syncs(client, cloud_syncs))

        placed = []
        staff_tasks = []
        for i in range(num_orders):
            result = await place_order(client, menu, i + 1)
            placed.append(result)
            if result["success"]:
                staff_tasks.append(asyncio.create_task(work_order(client, result["order_id"])))

        worked = await asyncio.gather(*staff_tasks)
        injected = await cloud_task
        dashboard = (await client.get("/api/admin/dashboard")).json()

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in placed if r["success"]]
    failed = [r for r in placed if not r["success"]]
    unlocked = [w for w in worked if not w["locked"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Orders placed: {len(successful)}/{num_orders}")
    print(f"❌ Failed checkouts: {len(failed)}/{num_orders}")
    print(f"☁️  Cloud orders injected: {injected}/{cloud_syncs}")
    print(f"🔒 Finished orders that stayed locked: {len(worked) - len(unlocked)}/{len(worked)}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        placed_revenue = sum(r["total"] for r in successful)
        print("\n📈 Checkout Metrics:")
        print(f"   Average cart-to-order: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Order value placed: ${placed_revenue:.2f}")

    print("\n🧾 Dashboard:")
    for key in ("total_orders", "active_orders", "completed_orders", "cancelled_orders", "revenue"):
        print(f"   {key}: {dashboard.get(key)}")

    if failed:
        print("\n⚠️  Failed Checkout Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    if unlocked:
        print("\n⚠️  Orders that accepted a change after finishing:")
        for w in unlocked[:5]:
            print(f"   {w['order_id']}: {' -> '.join(w['applied'])}")

    print("\n" + "=" * 70)
    print("🔍 Next: python scripts/verify.py")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "cloud_injected": injected,
        "total_time": total_time,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rush-Hour Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--cloud-syncs", type=int, default=5, help="Forced cloud syncs")
    parser.add_argument("--secret", default=ADMIN_SECRET, help="Staff access key")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url
    asyncio.run(run_simulation(args.orders, args.cloud_syncs, args.secret))
