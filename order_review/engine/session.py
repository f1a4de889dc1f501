"""
Order Review Session

Holds the authoritative accepted-order collection for one review view,
together with the filter criteria, the single edit buffer and the filtered
view. A session is created when the view opens and discarded when it closes.

Every mutating operation updates the authoritative collection first and then
calls ``_recompute()``; the filtered view is never changed any other way.

Store calls are awaited. Completions of independently issued calls may
arrive in any order, so each completion looks its target id up again before
applying effects and never resurrects a record removed in the meantime.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional, Union

from order_review.core.exceptions import EditStateError, NotFoundError, TransportError
from order_review.engine.derived import ReviewRow, derive_rows
from order_review.engine.editing import EditBuffer
from order_review.engine.exporter import ReportDocument, export_report
from order_review.engine.filters import apply_filters
from order_review.schemas import AcceptedOrder, FilterCriteria
from order_review.services.store.base import BaseOrderStoreClient

logger = logging.getLogger(__name__)

OrderId = Union[str, int]
Confirmation = Union[bool, Callable[[AcceptedOrder], bool]]


class OrderReviewSession:
    """
    Review state for one accepted-orders view.

    Example:
        >>> session = OrderReviewSession(get_order_store_client())
        >>> await session.refresh()
        >>> session.set_category("Spices")
        >>> session.begin_edit(session.filtered_view[0].id)
        >>> session.stage_field("amount", 8)
        >>> await session.commit_edit()
        >>> document = session.export()
    """

    def __init__(
        self,
        store: BaseOrderStoreClient,
        criteria: Optional[FilterCriteria] = None,
    ):
        self._store = store
        self._orders: list[AcceptedOrder] = []
        self._criteria = criteria or FilterCriteria()
        self._filtered: list[AcceptedOrder] = []
        self._edit: Optional[EditBuffer] = None

    # ==================================================================
    # Accessors
    # ==================================================================

    @property
    def orders(self) -> list[AcceptedOrder]:
        """Authoritative collection, in store order."""
        return list(self._orders)

    @property
    def filtered_view(self) -> list[AcceptedOrder]:
        return list(self._filtered)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def edit_buffer(self) -> Optional[EditBuffer]:
        return self._edit

    def get(self, order_id: OrderId) -> Optional[AcceptedOrder]:
        index = self._index_of(str(order_id))
        return None if index is None else self._orders[index]

    def rows(self, now: Optional[datetime] = None) -> list[ReviewRow]:
        """Filtered view with derived fields, all evaluated at one ``now``."""
        return derive_rows(self._filtered, now)

    # ==================================================================
    # Internals
    # ==================================================================

    def _index_of(self, order_id: str) -> Optional[int]:
        for index, order in enumerate(self._orders):
            if order.id == order_id:
                return index
        return None

    def _recompute(self) -> None:
        self._filtered = apply_filters(self._orders, self._criteria)

    # ==================================================================
    # Loading
    # ==================================================================

    def load(self, orders: Iterable[AcceptedOrder]) -> None:
        """
        Replace the authoritative collection wholesale.

        Any pending edit is discarded: every record is clean after a load.

        Raises:
            ValueError: Two orders share an id
        """
        incoming = list(orders)
        seen: set[str] = set()
        for order in incoming:
            if order.id in seen:
                raise ValueError(f"Duplicate accepted order id {order.id}")
            seen.add(order.id)

        self._orders = incoming
        self._edit = None
        self._recompute()
        logger.debug(f"Loaded {len(incoming)} accepted orders")

    async def refresh(self) -> None:
        """
        Fetch the full collection from the store and load it.

        On failure the previous collection is left untouched.
        """
        orders = await self._store.fetch_all()
        try:
            self.load(orders)
        except ValueError as e:
            raise TransportError(str(e)) from e

    # ==================================================================
    # Filter criteria
    # ==================================================================

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self._criteria = criteria
        self._recompute()

    def _update_criteria(self, **changes: Any) -> None:
        values = self._criteria.model_dump()
        values.update(changes)
        self.set_criteria(FilterCriteria(**values))

    def set_category(self, category: Optional[str]) -> None:
        self._update_criteria(category=category or None)

    def set_delivery_date_cutoff(self, cutoff: Union[None, str, date, datetime]) -> None:
        self._update_criteria(delivery_date_cutoff=cutoff or None)

    def set_supplier_search_term(self, term: Optional[str]) -> None:
        self._update_criteria(supplier_search_term=term or None)

    def clear_filters(self) -> None:
        self.set_criteria(FilterCriteria())

    # ==================================================================
    # Edit lifecycle
    # ==================================================================

    def begin_edit(self, order_id: OrderId) -> bool:
        """
        Stage a copy of the order for editing.

        Replaces any edit already in progress. Returns False, changing
        nothing, when the id is not in the collection.
        """
        order = self.get(order_id)
        if order is None:
            logger.debug(f"begin_edit ignored, order {order_id} not loaded")
            return False
        if self._edit is not None and self._edit.order_id != order.id:
            logger.debug(f"Discarding pending edit of order {self._edit.order_id}")
        self._edit = EditBuffer.from_order(order)
        return True

    def stage_field(self, field_name: str, value: Any) -> Any:
        """
        Set one field in the edit buffer.

        Raises:
            EditStateError: No edit in progress
            StagingError: Unknown field or invalid value
        """
        if self._edit is None:
            raise EditStateError("No accepted order is being edited")
        return self._edit.stage(field_name, value)

    def cancel_edit(self) -> None:
        self._edit = None

    async def commit_edit(self) -> AcceptedOrder:
        """
        Send the edit buffer to the store as a full-document replace.

        On failure the buffer and the collection stay as they were and the
        error propagates; nothing is retried.

        Raises:
            EditStateError: No edit in progress
            NotFoundError: The order is gone from the store, or was removed
                from this session while the update was in flight
            TransportError: Any other store failure
        """
        buffer = self._edit
        if buffer is None:
            raise EditStateError("No accepted order is being edited")

        updated = await self._store.update(buffer.order_id, buffer.to_order())
        if updated.id != buffer.order_id:
            updated = updated.model_copy(update={"id": buffer.order_id})

        if self._edit is buffer:
            self._edit = None

        index = self._index_of(buffer.order_id)
        if index is None:
            logger.warning(
                f"Order {buffer.order_id} was removed while its update was in flight"
            )
            raise NotFoundError(buffer.order_id)

        self._orders[index] = updated
        self._recompute()
        logger.debug(f"Committed edit of order {buffer.order_id}")
        return updated

    # ==================================================================
    # Deletion
    # ==================================================================

    async def delete_record(self, order_id: OrderId, confirm: Confirmation) -> bool:
        """
        Delete an order after the caller confirms.

        Args:
            order_id: Order to delete
            confirm: Yes/no answer, or a callable asked with the order

        Returns:
            bool: True if deleted, False if the confirmation was declined

        Raises:
            NotFoundError: The order is not loaded, or already gone from the store
            TransportError: Any other store failure
        """
        order = self.get(order_id)
        if order is None:
            raise NotFoundError(str(order_id))

        approved = confirm(order) if callable(confirm) else bool(confirm)
        if not approved:
            logger.debug(f"Deletion of order {order.id} declined")
            return False

        await self._store.remove(order.id)

        index = self._index_of(order.id)
        if index is not None:
            del self._orders[index]
        if self._edit is not None and self._edit.order_id == order.id:
            self._edit = None
        self._recompute()
        logger.debug(f"Deleted order {order.id}")
        return True

    # ==================================================================
    # Export
    # ==================================================================

    def export(
        self,
        now: Optional[datetime] = None,
        require_non_empty: Optional[bool] = None,
    ) -> ReportDocument:
        """Render the current filtered view into the accepted-orders report."""
        return export_report(self._filtered, now=now, require_non_empty=require_non_empty)
