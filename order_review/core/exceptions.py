"""
Review Engine Exceptions

Typed failures raised by the order store clients and the review session.
None of them is fatal: every failure path leaves the authoritative
collection in its last-known-good state.
"""

from typing import Optional


class OrderReviewError(Exception):
    """Base class for every review engine failure."""


class TransportError(OrderReviewError):
    """Network or payload parse failure on a store call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(OrderReviewError):
    """The targeted order is no longer present in the store."""

    def __init__(self, order_id: str):
        super().__init__(f"Accepted order {order_id} not found")
        self.order_id = order_id


class EmptyReportError(OrderReviewError):
    """Export refused because the filtered view is empty."""


class StagingError(OrderReviewError, ValueError):
    """A staged value was rejected by its field validator."""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"Invalid value for {field_name}: {message}")
        self.field_name = field_name


class EditStateError(OrderReviewError):
    """An edit operation was requested with no pending edit buffer."""
