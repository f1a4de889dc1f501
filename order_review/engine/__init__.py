"""
Order review engine: derived fields, filters, the review session and the
report exporter.
"""

from order_review.engine.derived import (
    ReviewRow,
    compute_difference,
    compute_expiry_status,
    derive_rows,
)
from order_review.engine.editing import EDITABLE_FIELDS, EditBuffer, FieldSpec
from order_review.engine.exporter import REPORT_COLUMNS, ReportDocument, export_report
from order_review.engine.filters import apply_filters
from order_review.engine.session import OrderReviewSession

__all__ = [
    "ReviewRow",
    "compute_difference",
    "compute_expiry_status",
    "derive_rows",
    "EDITABLE_FIELDS",
    "EditBuffer",
    "FieldSpec",
    "REPORT_COLUMNS",
    "ReportDocument",
    "export_report",
    "apply_filters",
    "OrderReviewSession",
]
