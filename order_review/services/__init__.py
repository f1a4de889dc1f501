"""
                        Services Module

Order store clients (mock and HTTP) and report file management.

Services:
    - store: accepted-orders store clients behind a factory
    - report_manager: lock-guarded report file writing
"""

from order_review.services.report_manager import ReportManager

__all__ = ["ReportManager"]
