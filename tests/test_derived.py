from datetime import datetime, timedelta

from conftest import NOW, make_order

from order_review.engine.derived import (
    compute_difference,
    compute_expiry_status,
    derive_rows,
)
from order_review.schemas import ExpiryStatus


def test_difference_shortfall():
    assert compute_difference(make_order(orderQuantity=10, amount=7)) == 3


def test_difference_overage_is_negative():
    assert compute_difference(make_order(orderQuantity=5, amount=8)) == -3


def test_difference_exact():
    assert compute_difference(make_order(orderQuantity=4, amount=4)) == 0


def test_expired_when_delivery_date_before_now():
    order = make_order(deliveryDate=(NOW - timedelta(seconds=1)).isoformat())
    assert compute_expiry_status(order, NOW) == ExpiryStatus.EXPIRED


def test_not_expired_when_due_exactly_now():
    order = make_order(deliveryDate=NOW.isoformat())
    assert compute_expiry_status(order, NOW) == ExpiryStatus.NOT_EXPIRED


def test_not_expired_in_future():
    order = make_order(deliveryDate="2099-01-01")
    assert compute_expiry_status(order, NOW).value == "Not Expired"


def test_derive_rows_uses_one_now_for_the_batch():
    boundary = datetime(2030, 6, 1)
    orders = [
        make_order("a", deliveryDate="2030-06-01"),
        make_order("b", deliveryDate="2030-05-31"),
    ]

    rows = derive_rows(orders, now=boundary)

    assert [row.order.id for row in rows] == ["a", "b"]
    assert [row.expiry_status for row in rows] == [
        ExpiryStatus.NOT_EXPIRED,
        ExpiryStatus.EXPIRED,
    ]


def test_offset_delivery_date_is_made_naive():
    order = make_order(deliveryDate="2024-01-01T00:00:00.000Z")
    assert order.delivery_date.tzinfo is None
