import io
from datetime import datetime

import pandas as pd
import pytest
from conftest import NOW, make_order

from order_review.core.exceptions import EmptyReportError
from order_review.engine.exporter import REPORT_COLUMNS, SHEET_NAME, export_report


def test_header_is_fixed():
    assert REPORT_COLUMNS == (
        "Supplier Name",
        "Order Quantity",
        "Category",
        "Amount",
        "Delivery Date",
        "Special Note",
        "Difference",
        "Expiry Status",
    )


def test_rows_carry_derived_fields(sample_orders):
    document = export_report(sample_orders, now=NOW, date_format="%Y-%m-%d")

    assert document.headers == REPORT_COLUMNS
    assert document.rows == [
        ("Acme", 10, "Meat", 10, "2024-01-01", "", 0, "Expired"),
        ("Beta", 5, "Spices", 8, "2099-01-01", "Keep dry", -3, "Not Expired"),
    ]
    assert document.generated_at == NOW


def test_delivery_date_uses_configured_locale_format():
    order = make_order(deliveryDate="2024-03-09T17:45:00")
    document = export_report([order], now=NOW)
    assert document.rows[0][4] == datetime(2024, 3, 9).strftime("%x")


def test_empty_view_gives_header_only_document():
    document = export_report([], now=NOW, require_non_empty=False)
    assert document.is_empty
    assert list(document.to_dataframe().columns) == list(REPORT_COLUMNS)


def test_empty_view_rejected_when_policy_requires_rows():
    with pytest.raises(EmptyReportError):
        export_report([], now=NOW, require_non_empty=True)


def test_input_is_not_mutated(sample_orders):
    before = [order.to_document() for order in sample_orders]
    export_report(sample_orders, now=NOW)
    assert [order.to_document() for order in sample_orders] == before


def test_same_now_for_every_row():
    orders = [
        make_order("a", deliveryDate="2030-06-01T00:00:00"),
        make_order("b", deliveryDate="2030-06-01T00:00:00"),
    ]
    document = export_report(orders, now=datetime(2030, 6, 1))
    assert {row[7] for row in document.rows} == {"Not Expired"}


def test_excel_encoding_keeps_column_order(sample_orders):
    document = export_report(sample_orders, now=NOW)
    frame = pd.read_excel(io.BytesIO(document.to_excel_bytes()), sheet_name=SHEET_NAME)

    assert list(frame.columns) == list(REPORT_COLUMNS)
    assert frame["Difference"].tolist() == [0, -3]


def test_csv_encoding_starts_with_header(sample_orders):
    text = export_report(sample_orders, now=NOW).to_csv_bytes().decode("utf-8")
    assert text.splitlines()[0] == ",".join(REPORT_COLUMNS)


def test_long_special_note_is_exported_whole():
    note = "Deliver through the loading bay. " * 40
    document = export_report([make_order("1", specialNote=note)], now=NOW)

    assert len(note) > 1000
    assert document.rows[0][5] == note
