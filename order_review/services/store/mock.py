"""
Mock Order Store Implementation

In-memory stand-in for the accepted-orders REST store.
Used in development mode (ENV_MODE=development) and in tests.

Behavior:
    - Keeps orders in insertion order, keyed by id
    - Assigns 24-character hex ids to created orders
    - Simulates network latency (configurable, 0-50ms by default)
    - Optional random transport failure rate for testing error handling

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import logging
import random
import uuid
from typing import Iterable, Optional

from order_review.core.exceptions import NotFoundError, TransportError
from order_review.schemas import AcceptedOrder, AcceptedOrderCreate
from order_review.services.store.base import BaseOrderStoreClient

logger = logging.getLogger(__name__)


class MockOrderStoreClient(BaseOrderStoreClient):
    """
    Mock implementation of the order store.

    Attributes:
        failure_rate: Probability of a simulated transport failure (0.0-1.0)
        min_latency: Minimum response time in seconds
        max_latency: Maximum response time in seconds

    Example:
        >>> store = MockOrderStoreClient()
        >>> order = store.create(AcceptedOrderCreate(supplierName="Acme", ...))
        >>> await store.remove(order.id)
    """

    def __init__(
        self,
        orders: Optional[Iterable[AcceptedOrder]] = None,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
    ):
        """
        Initialize the mock order store.

        Args:
            orders: Initial store contents
            failure_rate: Probability of transport failure (default: never)
            min_latency: Minimum response time in seconds
            max_latency: Maximum response time in seconds
        """
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self._orders: dict[str, AcceptedOrder] = {}

        for order in orders or ():
            self._orders[order.id] = order

        logger.info(
            f"MockOrderStoreClient initialized "
            f"(failure_rate={failure_rate:.0%}, orders={len(self._orders)})"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def _simulate_latency(self) -> None:
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))

    def _maybe_fail(self, operation: str) -> None:
        if random.random() < self.failure_rate:
            logger.warning(f"Mock store: simulated transport failure on {operation}")
            raise TransportError(f"Simulated network failure during {operation}")

    def create(self, payload: AcceptedOrderCreate) -> AcceptedOrder:
        """Store a new order under a fresh id (seeding helper)."""
        order = AcceptedOrder(id=uuid.uuid4().hex[:24], **payload.model_dump())
        self._orders[order.id] = order
        return order

    def snapshot(self) -> list[AcceptedOrder]:
        """Current store contents, without latency or failures."""
        return list(self._orders.values())

    async def fetch_all(self) -> list[AcceptedOrder]:
        await self._simulate_latency()
        self._maybe_fail("fetch_all")
        return list(self._orders.values())

    async def update(self, order_id: str, order: AcceptedOrder) -> AcceptedOrder:
        await self._simulate_latency()
        self._maybe_fail("update")

        if order_id not in self._orders:
            raise NotFoundError(order_id)

        stored = order.model_copy(update={"id": order_id})
        self._orders[order_id] = stored
        logger.debug(f"Mock store: replaced order {order_id}")
        return stored

    async def remove(self, order_id: str) -> None:
        await self._simulate_latency()
        self._maybe_fail("remove")

        if self._orders.pop(order_id, None) is None:
            raise NotFoundError(order_id)
        logger.debug(f"Mock store: removed order {order_id}")

    async def health_check(self) -> bool:
        return True
