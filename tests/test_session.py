import asyncio
from datetime import datetime

import pytest
from conftest import NOW, make_order

from order_review.core.exceptions import (
    EditStateError,
    NotFoundError,
    StagingError,
    TransportError,
)
from order_review.engine.editing import EditBuffer
from order_review.engine.session import OrderReviewSession
from order_review.services.store.mock import MockOrderStoreClient


def ids(orders):
    return [order.id for order in orders]


class GatedStore(MockOrderStoreClient):
    """Mock store whose updates wait until the test opens the gate."""

    def __init__(self, orders):
        super().__init__(orders)
        self.gate = asyncio.Event()

    async def update(self, order_id, order):
        await self.gate.wait()
        return await super().update(order_id, order)


# =============================================================================
# LOADING AND FILTERING
# =============================================================================

async def test_refresh_loads_collection(session):
    assert ids(session.orders) == ["1", "2"]
    assert ids(session.filtered_view) == ["1", "2"]


async def test_refresh_failure_keeps_previous_state(session, store):
    store.failure_rate = 1.0
    with pytest.raises(TransportError):
        await session.refresh()
    assert ids(session.orders) == ["1", "2"]


def test_load_rejects_duplicate_ids(store):
    review = OrderReviewSession(store)
    with pytest.raises(ValueError):
        review.load([make_order("1"), make_order("1")])
    assert review.orders == []


async def test_load_discards_pending_edit(session, sample_orders):
    session.begin_edit("1")
    session.load(sample_orders)
    assert session.edit_buffer is None


async def test_category_filter_scenario(session):
    session.set_category("Spices")
    assert ids(session.filtered_view) == ["2"]

    document = session.export(now=NOW)
    assert len(document) == 1
    row = document.rows[0]
    assert row[0] == "Beta"
    assert row[6] == -3
    assert row[7] == "Not Expired"


async def test_setters_recompute_view(session):
    session.set_supplier_search_term("AC")
    assert ids(session.filtered_view) == ["1"]

    session.set_delivery_date_cutoff("2023-12-31")
    assert session.filtered_view == []

    session.set_delivery_date_cutoff(None)
    assert ids(session.filtered_view) == ["1"]

    session.clear_filters()
    assert ids(session.filtered_view) == ["1", "2"]
    assert session.criteria.is_empty


async def test_rows_share_one_now(session):
    rows = session.rows(now=datetime(2050, 1, 1))
    assert [row.expiry_status.value for row in rows] == ["Expired", "Not Expired"]
    assert [row.difference for row in rows] == [0, -3]


# =============================================================================
# EDIT LIFECYCLE
# =============================================================================

async def test_begin_edit_unknown_id_is_a_no_op(session):
    assert session.begin_edit("missing") is False
    assert session.edit_buffer is None


async def test_begin_edit_last_begin_wins(session):
    session.begin_edit("1")
    session.stage_field("amount", 3)
    session.begin_edit("2")

    buffer = session.edit_buffer
    assert buffer.order_id == "2"
    assert buffer.values["amount"] == 8


async def test_stage_field_only_touches_buffer(session):
    session.begin_edit("1")
    session.stage_field("supplierName", "Acme Wholesale")

    assert session.edit_buffer.values["supplier_name"] == "Acme Wholesale"
    assert session.edit_buffer.is_dirty
    assert session.get("1").supplier_name == "Acme"


async def test_stage_field_coerces_form_strings(session):
    session.begin_edit("1")
    assert session.stage_field("orderQuantity", "12") == 12
    assert session.stage_field("deliveryDate", "2024-02-03") == datetime(2024, 2, 3)


@pytest.mark.parametrize(
    "field_name, value",
    [
        ("amount", -1),
        ("orderQuantity", "lots"),
        ("supplierName", "   "),
        ("deliveryDate", "not a date"),
        ("_id", "99"),
    ],
)
async def test_stage_field_rejects_invalid_values(session, field_name, value):
    session.begin_edit("1")
    with pytest.raises(StagingError):
        session.stage_field(field_name, value)


async def test_category_staging_matches_order_model(session):
    session.begin_edit("1")
    assert session.stage_field("category", " Meat ") == " Meat "
    with pytest.raises(StagingError):
        session.stage_field("category", "")


async def test_long_special_note_loads_and_commits(store):
    note = "Call ahead before delivery. " * 40
    await store.update("2", make_order("2", supplierName="Beta", category="Spices",
                                       orderQuantity=5, amount=8,
                                       deliveryDate="2099-01-01", specialNote=note))
    review = OrderReviewSession(store)
    await review.refresh()
    assert review.get("2").special_note == note

    review.begin_edit("1")
    review.stage_field("specialNote", note)
    updated = await review.commit_edit()

    assert updated.special_note == note
    assert store.snapshot()[0].special_note == note


def test_edit_buffer_reports_invalid_document_as_staging_error(sample_orders):
    buffer = EditBuffer.from_order(sample_orders[0])
    buffer.values["amount"] = -1

    with pytest.raises(StagingError):
        buffer.to_order()


async def test_stage_field_requires_edit(session):
    with pytest.raises(EditStateError):
        session.stage_field("amount", 1)


async def test_commit_edit_replaces_record(session, store):
    session.begin_edit("2")
    session.stage_field("amount", 5)
    session.stage_field("specialNote", "Counted twice")

    updated = await session.commit_edit()

    assert updated.amount == 5
    assert session.edit_buffer is None
    assert [o.id for o in session.orders].count("2") == 1
    assert session.get("2").special_note == "Counted twice"
    assert session.get("2").supplier_name == "Beta"
    assert store.snapshot()[1].amount == 5
    assert session.rows(now=NOW)[1].difference == 0


async def test_committed_record_drops_out_of_view(session):
    session.set_category("Spices")
    session.begin_edit("2")
    session.stage_field("category", "Fruits")

    await session.commit_edit()

    assert session.filtered_view == []
    assert session.get("2").category == "Fruits"


async def test_commit_on_deleted_id_raises_not_found(session, store):
    session.begin_edit("1")
    session.stage_field("amount", 1)
    await store.remove("1")

    with pytest.raises(NotFoundError):
        await session.commit_edit()

    assert ids(session.orders) == ["1", "2"]
    assert session.get("1").amount == 10
    assert session.edit_buffer.values["amount"] == 1


async def test_commit_transport_failure_keeps_buffer(session, store):
    session.begin_edit("1")
    session.stage_field("amount", 1)
    store.failure_rate = 1.0

    with pytest.raises(TransportError):
        await session.commit_edit()

    assert session.edit_buffer is not None
    assert session.get("1").amount == 10


async def test_commit_without_edit(session):
    with pytest.raises(EditStateError):
        await session.commit_edit()


async def test_cancel_edit_does_not_contact_store(session, store):
    session.begin_edit("1")
    session.stage_field("amount", 2)
    session.cancel_edit()

    assert session.edit_buffer is None
    assert store.snapshot()[0].amount == 10


# =============================================================================
# DELETION
# =============================================================================

async def test_delete_declined_changes_nothing(session, store):
    assert await session.delete_record("1", confirm=False) is False
    assert ids(session.orders) == ["1", "2"]
    assert len(store.snapshot()) == 2


async def test_delete_confirmed_removes_everywhere(session, store):
    asked = []

    def confirm(order):
        asked.append(order.supplier_name)
        return True

    assert await session.delete_record("2", confirm) is True

    assert asked == ["Beta"]
    assert ids(session.orders) == ["1"]
    assert ids(session.filtered_view) == ["1"]
    assert ids(store.snapshot()) == ["1"]


async def test_delete_discards_edit_of_same_record(session):
    session.begin_edit("1")
    await session.delete_record("1", confirm=True)
    assert session.edit_buffer is None


async def test_delete_unknown_id_raises(session):
    with pytest.raises(NotFoundError):
        await session.delete_record("missing", confirm=True)


async def test_delete_of_record_gone_from_store(session, store):
    await store.remove("1")
    with pytest.raises(NotFoundError):
        await session.delete_record("1", confirm=True)
    assert ids(session.orders) == ["1", "2"]


async def test_integer_ids_are_accepted(session):
    assert session.begin_edit(2) is True
    assert await session.delete_record(1, confirm=True) is True
    assert ids(session.orders) == ["2"]


# =============================================================================
# OUT-OF-ORDER COMPLETIONS
# =============================================================================

async def test_delete_completing_before_update_is_not_resurrected(sample_orders):
    store = GatedStore(sample_orders)
    session = OrderReviewSession(store)
    await session.refresh()

    session.begin_edit("1")
    session.stage_field("amount", 4)
    commit = asyncio.create_task(session.commit_edit())
    await asyncio.sleep(0)

    await session.delete_record("1", confirm=True)
    store.gate.set()

    with pytest.raises(NotFoundError):
        await commit
    assert ids(session.orders) == ["2"]


async def test_update_completing_after_local_removal_is_dropped(sample_orders):
    store = GatedStore(sample_orders)
    session = OrderReviewSession(store)
    await session.refresh()

    session.begin_edit("1")
    session.stage_field("amount", 4)
    commit = asyncio.create_task(session.commit_edit())
    await asyncio.sleep(0)

    session.load([order for order in sample_orders if order.id != "1"])
    store.gate.set()

    with pytest.raises(NotFoundError):
        await commit
    assert ids(session.orders) == ["2"]


async def test_begin_edit_during_commit_keeps_new_buffer(sample_orders):
    store = GatedStore(sample_orders)
    session = OrderReviewSession(store)
    await session.refresh()

    session.begin_edit("1")
    session.stage_field("amount", 4)
    commit = asyncio.create_task(session.commit_edit())
    await asyncio.sleep(0)

    session.begin_edit("2")
    store.gate.set()
    await commit

    assert session.get("1").amount == 4
    assert session.edit_buffer.order_id == "2"
