"""
HTTP Order Store Implementation

Production client for the accepted-orders REST store.
Used when ENV_MODE=production or ENV_MODE=staging.

Endpoints:
    - GET    /acceptedOrders        -> array of accepted orders
    - PUT    /acceptedOrders/{id}   -> full-document replace
    - DELETE /acceptedOrders/{id}   -> empty body on success

Uses ``httpx.AsyncClient`` for non-blocking HTTP. Payloads are validated
into AcceptedOrder models; anything unparseable is a TransportError.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from order_review.core.config import get_settings
from order_review.core.exceptions import NotFoundError, TransportError
from order_review.schemas import AcceptedOrder
from order_review.services.store.base import BaseOrderStoreClient

logger = logging.getLogger(__name__)

COLLECTION_PATH = "/acceptedOrders"

_order_list_adapter = TypeAdapter(list[AcceptedOrder])


class HttpOrderStoreClient(BaseOrderStoreClient):
    """
    REST implementation of the order store client.

    Configuration:
        ORDER_STORE_BASE_URL and ORDER_STORE_TIMEOUT, unless overridden.

    Example:
        >>> store = HttpOrderStoreClient(base_url="http://localhost:3001")
        >>> orders = await store.fetch_all()
        >>> await store.close()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the HTTP store client.

        Args:
            base_url: Store root URL (default: settings.order_store_base_url)
            timeout: Request timeout in seconds (default: settings)
            client: Pre-built AsyncClient; its own base_url is used as is
        """
        settings = get_settings()
        self.base_url = (base_url or settings.order_store_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.order_store_timeout
        self._http = client
        self._owns_client = client is None

        logger.info(f"HttpOrderStoreClient initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "http"

    # ==================================================================
    # HTTP plumbing
    # ==================================================================

    async def _client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
            self._owns_client = True
        return self._http

    async def close(self) -> None:
        if self._owns_client and self._http and not self._http.is_closed:
            await self._http.aclose()

    @staticmethod
    def _order_path(order_id: str) -> str:
        return f"{COLLECTION_PATH}/{quote(order_id, safe='')}"

    async def _request(
        self,
        method: str,
        path: str,
        order_id: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        client = await self._client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.debug(f"{method} {path} transport failure: {e}")
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code == 404 and order_id is not None:
            raise NotFoundError(order_id)
        if response.is_error:
            raise TransportError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from store: {e}") from e

    # ==================================================================
    # Store operations
    # ==================================================================

    async def fetch_all(self) -> list[AcceptedOrder]:
        response = await self._request("GET", COLLECTION_PATH)
        try:
            orders = _order_list_adapter.validate_python(self._json(response))
        except ValidationError as e:
            raise TransportError(f"Malformed accepted-order collection: {e}") from e

        logger.debug(f"Fetched {len(orders)} accepted orders")
        return orders

    async def update(self, order_id: str, order: AcceptedOrder) -> AcceptedOrder:
        document = order.to_document()
        document["_id"] = order_id

        response = await self._request(
            "PUT", self._order_path(order_id), order_id=order_id, json=document
        )
        try:
            return AcceptedOrder.model_validate(self._json(response))
        except ValidationError as e:
            raise TransportError(f"Malformed accepted order {order_id}: {e}") from e

    async def remove(self, order_id: str) -> None:
        await self._request("DELETE", self._order_path(order_id), order_id=order_id)
        logger.debug(f"Removed accepted order {order_id}")

    async def health_check(self) -> bool:
        try:
            await self._request("GET", "/health")
            return True
        except TransportError:
            return False
