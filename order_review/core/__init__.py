"""
Core module initialization.
Exports configuration, logging utilities and engine exceptions.
"""

from order_review.core.config import get_settings, setup_logging, Settings, EnvironmentMode
from order_review.core.exceptions import (
    OrderReviewError,
    TransportError,
    NotFoundError,
    EmptyReportError,
    StagingError,
    EditStateError,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "OrderReviewError",
    "TransportError",
    "NotFoundError",
    "EmptyReportError",
    "StagingError",
    "EditStateError",
]
