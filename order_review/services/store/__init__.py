"""
Order Store Client Factory

Provides a single entry point for obtaining an order store client.
Automatically selects the mock or HTTP store based on ENV_MODE.

Usage:
    from order_review.services.store import get_order_store_client

    store = get_order_store_client()
    orders = await store.fetch_all()

Environment Switching:
    - ENV_MODE=development → MockOrderStoreClient (in-memory)
    - ENV_MODE=staging / production → HttpOrderStoreClient

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from order_review.core.config import get_settings
from order_review.services.store.base import BaseOrderStoreClient
from order_review.services.store.mock import MockOrderStoreClient
from order_review.services.store.http import HttpOrderStoreClient

logger = logging.getLogger(__name__)


@lru_cache()
def get_order_store_client() -> BaseOrderStoreClient:
    """
    Get the configured order store client.

    Returns:
        BaseOrderStoreClient: MockOrderStoreClient in development,
        HttpOrderStoreClient otherwise
    """
    settings = get_settings()

    if settings.use_real_services:
        logger.info(
            f"Order Store: Using HttpOrderStoreClient "
            f"({settings.env_mode.value} mode)"
        )
        return HttpOrderStoreClient()

    logger.info("Order Store: Using MockOrderStoreClient (development mode)")
    return MockOrderStoreClient(
        failure_rate=settings.mock_store_failure_rate,
        min_latency=settings.mock_store_min_latency,
        max_latency=settings.mock_store_max_latency,
    )


def reset_order_store_client() -> None:
    """
    Clear the cached store client.

    Useful for testing or when configuration changes at runtime.
    """
    get_order_store_client.cache_clear()
    logger.debug("Order store client cache cleared")


__all__ = [
    "get_order_store_client",
    "reset_order_store_client",
    "BaseOrderStoreClient",
    "MockOrderStoreClient",
    "HttpOrderStoreClient",
]
