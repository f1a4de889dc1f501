"""
Store Seeding Simulation Script

Fills the accepted-orders store with random orders concurrently, then runs
a review session against it: filter, edit one order, delete one order and
print the report.
Run from project root: python scripts/simulate.py --orders 30

Author: Khalil Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime, timedelta
from typing import Any

import httpx

from order_review.engine.session import OrderReviewSession
from order_review.schemas import Category
from order_review.services.store.http import HttpOrderStoreClient

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

API_BASE_URL = "http://localhost:3001"

SUPPLIERS = ["Acme Foods", "Beta Spices", "Green Valley Farms", "Ocean Catch",
             "Orchard Fresh", "Prime Meats", "Cool Drinks Co"]
CATEGORIES = [c.value for c in Category]
NOTES = [None, "Keep refrigerated", "Deliver to back door", "Partial delivery", "Check invoice"]


def generate_order() -> dict[str, Any]:
    """Generate a random accepted order payload."""
    ordered = random.randint(1, 50)
    delivery = datetime.now() + timedelta(days=random.randint(-30, 30))
    return {
        "supplierName": random.choice(SUPPLIERS),
        "orderQuantity": ordered,
        "category": random.choice(CATEGORIES),
        "amount": max(0, ordered + random.randint(-5, 5)),
        "deliveryDate": delivery.replace(microsecond=0).isoformat(),
        "specialNote": random.choice(NOTES),
    }


async def seed(client: httpx.AsyncClient, count: int) -> int:
    """Create ``count`` orders concurrently; returns how many succeeded."""
    responses = await asyncio.gather(
        *(client.post("/acceptedOrders", json=generate_order()) for _ in range(count)),
        return_exceptions=True,
    )
    return sum(
        1 for r in responses
        if isinstance(r, httpx.Response) and r.status_code == 201
    )


async def review(client: httpx.AsyncClient) -> None:
    """Walk one review session through filter, edit, delete and export."""
    session = OrderReviewSession(HttpOrderStoreClient(client=client))
    await session.refresh()
    print(f"Loaded {len(session.orders)} accepted orders")

    session.set_category(random.choice(CATEGORIES))
    print(f"Category {session.criteria.category}: {len(session.filtered_view)} orders")

    if session.filtered_view:
        target = session.filtered_view[0]
        session.begin_edit(target.id)
        session.stage_field("amount", target.order_quantity)
        await session.commit_edit()
        print(f"Marked order {target.id} as fully received")

    if len(session.orders) > 1:
        victim = session.orders[-1]
        await session.delete_record(victim.id, confirm=True)
        print(f"Deleted order {victim.id}")

    document = session.export()
    print("\n" + document.to_dataframe().to_string(index=False))


async def main(count: int) -> None:
    print("=" * 60)
    print("ACCEPTED ORDERS SIMULATION")
    print("=" * 60)

    start = time.time()
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        created = await seed(client, count)
        print(f"Seeded {created}/{count} orders in {time.time() - start:.2f}s")
        await review(client)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed and review accepted orders")
    parser.add_argument("--orders", type=int, default=30, help="Orders to create")
    args = parser.parse_args()
    asyncio.run(main(args.orders))
