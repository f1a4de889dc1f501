"""
Order Store Client Abstract Base Class

Defines the interface contract for every accepted-orders store client.
Both MockOrderStoreClient and HttpOrderStoreClient implement these methods,
so a review session works identically against either.

Contract:
    - fetch_all raises TransportError on network/parse failure
    - update performs a full-document replace; NotFoundError if the id is gone
    - remove is not idempotent; repeating it raises NotFoundError
    - no retries; retry policy belongs to the caller

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod

from order_review.schemas import AcceptedOrder


class BaseOrderStoreClient(ABC):
    """
    Abstract base class for accepted-order store clients.

    Example:
        >>> store = get_order_store_client()
        >>> orders = await store.fetch_all()
        >>> updated = await store.update(orders[0].id, orders[0])
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the store provider.

        Returns:
            str: Provider name (e.g., "mock", "http")
        """
        pass

    @abstractmethod
    async def fetch_all(self) -> list[AcceptedOrder]:
        """
        Fetch the full accepted-order collection.

        Returns:
            list[AcceptedOrder]: Every stored order, in store order

        Raises:
            TransportError: Network or payload parse failure
        """
        pass

    @abstractmethod
    async def update(self, order_id: str, order: AcceptedOrder) -> AcceptedOrder:
        """
        Replace the stored order matching ``order_id`` with ``order``.

        The complete record is sent, unmodified fields included.

        Args:
            order_id: Identifier of the record to replace
            order: Full replacement document

        Returns:
            AcceptedOrder: The record as stored after the replace

        Raises:
            NotFoundError: No record with ``order_id`` exists
            TransportError: Any other failure
        """
        pass

    @abstractmethod
    async def remove(self, order_id: str) -> None:
        """
        Delete the stored order matching ``order_id``.

        Raises:
            NotFoundError: No record with ``order_id`` exists
            TransportError: Any other failure
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the store.

        Returns:
            bool: True if the store is reachable
        """
        pass

    async def close(self) -> None:
        """Release any underlying connections."""
        return None
