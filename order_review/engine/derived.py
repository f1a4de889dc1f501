"""
Derived Field Calculator

Values computed from stored order fields and never persisted. The current
instant is always passed in so that one rendering or export pass evaluates
every row against the same ``now``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from order_review.schemas import AcceptedOrder, ExpiryStatus


def compute_difference(order: AcceptedOrder) -> int:
    """Ordered minus received. Positive is a shortfall, negative an overage."""
    return order.order_quantity - order.amount


def compute_expiry_status(order: AcceptedOrder, now: datetime) -> ExpiryStatus:
    """An order due exactly at ``now`` is not yet expired."""
    if now > order.delivery_date:
        return ExpiryStatus.EXPIRED
    return ExpiryStatus.NOT_EXPIRED


@dataclass(frozen=True)
class ReviewRow:
    """An accepted order together with its derived fields."""
    order: AcceptedOrder
    difference: int
    expiry_status: ExpiryStatus


def derive_row(order: AcceptedOrder, now: datetime) -> ReviewRow:
    return ReviewRow(
        order=order,
        difference=compute_difference(order),
        expiry_status=compute_expiry_status(order, now),
    )


def derive_rows(
    orders: Iterable[AcceptedOrder],
    now: Optional[datetime] = None,
) -> list[ReviewRow]:
    """Derive every row of a batch against a single captured ``now``."""
    if now is None:
        now = datetime.now()
    return [derive_row(order, now) for order in orders]
