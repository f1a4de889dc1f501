"""
Report Exporter

Renders a filtered view into the fixed eight-column accepted-orders report.
The column order and content are the compatibility contract; the workbook
and CSV encodings are produced with pandas.
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

import pandas as pd

from order_review.core.config import get_settings
from order_review.core.exceptions import EmptyReportError
from order_review.engine.derived import derive_rows
from order_review.schemas import AcceptedOrder, ReportFormat

logger = logging.getLogger(__name__)

REPORT_COLUMNS = (
    "Supplier Name",
    "Order Quantity",
    "Category",
    "Amount",
    "Delivery Date",
    "Special Note",
    "Difference",
    "Expiry Status",
)

SHEET_NAME = "Accepted Orders"


@dataclass
class ReportDocument:
    """A header row plus one row per exported order."""
    rows: list[tuple[Any, ...]]
    generated_at: datetime
    headers: tuple[str, ...] = field(default=REPORT_COLUMNS)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=list(self.headers))

    def to_excel_bytes(self) -> bytes:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            self.to_dataframe().to_excel(writer, sheet_name=SHEET_NAME, index=False)
        return buffer.getvalue()

    def to_csv_bytes(self) -> bytes:
        return self.to_dataframe().to_csv(index=False).encode("utf-8")

    def render(self, report_format: ReportFormat = ReportFormat.XLSX) -> bytes:
        if report_format == ReportFormat.CSV:
            return self.to_csv_bytes()
        return self.to_excel_bytes()


def format_delivery_date(value: datetime, date_format: Optional[str] = None) -> str:
    """Date-only rendering in the configured (locale by default) format."""
    if date_format is None:
        date_format = get_settings().report_date_format
    return value.strftime(date_format)


def export_report(
    filtered_view: Sequence[AcceptedOrder],
    now: Optional[datetime] = None,
    require_non_empty: Optional[bool] = None,
    date_format: Optional[str] = None,
) -> ReportDocument:
    """
    Build the report for ``filtered_view``.

    Args:
        filtered_view: Orders to export, in display order
        now: Instant used for every Expiry Status cell (defaults to the
            current time, captured once)
        require_non_empty: Raise EmptyReportError for an empty view instead
            of returning a header-only document (defaults to settings)
        date_format: strftime pattern for the Delivery Date column

    Returns:
        ReportDocument: Rows in the same order as ``filtered_view``
    """
    settings = get_settings()
    if now is None:
        now = datetime.now()
    if require_non_empty is None:
        require_non_empty = settings.report_require_non_empty
    if date_format is None:
        date_format = settings.report_date_format

    if require_non_empty and not filtered_view:
        raise EmptyReportError("No accepted orders match the current filters")

    rows = [
        (
            row.order.supplier_name,
            row.order.order_quantity,
            row.order.category,
            row.order.amount,
            format_delivery_date(row.order.delivery_date, date_format),
            row.order.special_note or "",
            row.difference,
            row.expiry_status.value,
        )
        for row in derive_rows(filtered_view, now)
    ]

    logger.debug(f"Report built with {len(rows)} rows (now={now.isoformat()})")
    return ReportDocument(rows=rows, generated_at=now)
