"""
Order Simulation Script

Simulates many customers ordering at once against a running API to check
the storefront client's behavior under concurrency.
Run from project root (with `tiffin mock-api` running):

    python scripts/simulate.py --orders 50

Author: Khalil_Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import math
import random
import sys
import time
import uuid
from datetime import datetime
from typing import Any

from tiffin.api import ApiClient
from tiffin.core.config import get_settings
from tiffin.errors import OutOfRange, StorefrontError
from tiffin.schemas import FoodItem, OrderCreate, OrderItemCreate, UserLocation
from tiffin.services.storage import MemorySessionStore, TOKEN_KEY

FIRST_NAMES = ["Asha", "Ravi", "Meera", "Arjun", "Kavya", "Rohan", "Isha", "Vikram", "Neha", "Dev"]
LAST_NAMES = ["Rao", "Sharma", "Iyer", "Patel", "Nair", "Gupta", "Menon", "Singh", "Das", "Joshi"]


def random_location(min_km: float, max_km: float) -> UserLocation:
    """A point between ``min_km`` and ``max_km`` from the restaurant."""
    settings = get_settings()
    distance = random.uniform(min_km, max_km)
    bearing = random.uniform(0, 2 * math.pi)
    d_lat = (distance / 111.32) * math.cos(bearing)
    d_lng = (distance / (111.32 * math.cos(math.radians(settings.restaurant_latitude)))) * math.sin(bearing)
    return UserLocation(
        lat=round(settings.restaurant_latitude + d_lat, 6),
        lng=round(settings.restaurant_longitude + d_lng, 6),
    )


def random_items(menu: list[FoodItem]) -> list[OrderItemCreate]:
    picks = random.sample(menu, k=min(len(menu), random.randint(1, 3)))
    min_items = get_settings().min_order_items
    items = [
        OrderItemCreate(food_id=food.id, quantity=random.randint(1, 3), price=food.price)
        for food in picks
    ]
    shortfall = min_items - sum(item.quantity for item in items)
    if shortfall > 0:
        items[0].quantity += shortfall
    return items


async def simulate_customer(
    base_url: str,
    menu: list[FoodItem],
    order_num: int,
    outside_rate: float,
) -> dict[str, Any]:
    """Register a fresh customer and place one order."""
    store = MemorySessionStore()
    name = f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}"
    email = f"sim-{uuid.uuid4().hex[:10]}@tiffinbuddy.in"
    radius = get_settings().delivery_radius_km
    if random.random() < outside_rate:
        min_km, max_km = radius * 1.1, radius * 2
    else:
        min_km, max_km = 0.0, radius * 0.9
    start_time = time.time()

    async with ApiClient(base_url, store) as api:
        try:
            auth = await api.register(name, email, "simulated-password")
            store.set(TOKEN_KEY, auth.token)
            order = await api.create_order(
                OrderCreate(items=random_items(menu), user_location=random_location(min_km, max_km)),
                idempotency_key=uuid.uuid4().hex,
            )
            return {
                "order_num": order_num,
                "success": True,
                "order_id": order.id,
                "total": order.total_amount,
                "time": round(time.time() - start_time, 3),
            }
        except OutOfRange as e:
            outcome = {"error": f"out of range: {e.message}", "out_of_range": True}
        except StorefrontError as e:
            outcome = {"error": f"{type(e).__name__}: {e.message}"[:100], "out_of_range": False}

    return {
        "order_num": order_num,
        "success": False,
        "time": round(time.time() - start_time, 3),
        **outcome,
    }


async def run_simulation(base_url: str, num_orders: int, outside_rate: float) -> dict[str, Any]:
    print("=" * 70)
    print("🔥 ORDER SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {base_url}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    try:
        async with ApiClient(base_url, MemorySessionStore()) as api:
            menu = [food for food in await api.list_foods() if food.available]
    except StorefrontError as e:
        print(f"\n❌ Could not load the menu: {e.message}")
        return {"total": num_orders, "successful": 0, "failed": num_orders}
    if not menu:
        print("\n❌ The menu is empty. Start the API with its demo data first.")
        return {"total": num_orders, "successful": 0, "failed": num_orders}

    start_time = time.time()
    results = await asyncio.gather(*[
        simulate_customer(base_url, menu, i + 1, outside_rate) for i in range(num_orders)
    ])
    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    rejected = [r for r in failed if r.get("out_of_range")]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"📍 Outside delivery radius: {len(rejected)}/{num_orders}")
    print(f"❌ Other failures: {len(failed) - len(rejected)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        revenue = sum(r["total"] for r in successful)
        print(f"\n📈 Average Response: {avg_time}s")
        print(f"   💰 Total Revenue: {get_settings().currency_symbol}{revenue:.2f}")

    unexpected = [r for r in failed if not r.get("out_of_range")]
    if unexpected:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for r in unexpected[:5]:
            print(f"   Order #{r['order_num']}: {r['error']}")

    print("=" * 70)
    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Simulation Script")
    parser.add_argument("--orders", type=int, default=50, help="Number of orders")
    parser.add_argument("--base-url", default=None, help="API origin (defaults to API_BASE_URL)")
    parser.add_argument(
        "--outside-rate",
        type=float,
        default=0.2,
        help="Share of customers placed outside the delivery radius",
    )
    args = parser.parse_args()

    summary = asyncio.run(run_simulation(
        args.base_url or get_settings().api_base_url,
        args.orders,
        args.outside_rate,
    ))
    sys.exit(0 if summary["successful"] else 1)
