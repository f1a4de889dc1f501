"""
Celery Tasks
Background export of accepted-order reports.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Optional

from order_review.celery_worker import celery_app
from order_review.core.exceptions import OrderReviewError
from order_review.engine.session import OrderReviewSession
from order_review.schemas import FilterCriteria
from order_review.services.report_manager import ReportManager
from order_review.services.store import get_order_store_client
from order_review.services.store.base import BaseOrderStoreClient

logger = logging.getLogger(__name__)


async def build_and_save_report(
    store: BaseOrderStoreClient,
    criteria: FilterCriteria,
    manager: ReportManager,
    name: Optional[str] = None,
) -> dict[str, Any]:
    """
    Load the collection, filter it and save the report workbook.

    The store is closed afterwards; each task runs in its own event loop and
    connections must not outlive it.
    """
    session = OrderReviewSession(store, criteria=criteria)
    try:
        await session.refresh()
    finally:
        await store.close()
    document = session.export()
    return manager.save_report(document, name=name)


@celery_app.task(bind=True)
def export_accepted_orders_report(
    self,
    criteria: Optional[dict] = None,
    name: Optional[str] = None,
) -> dict:
    """
    Export the filtered accepted-order report to the data directory.
    This task runs asynchronously via Celery worker.

    Args:
        criteria: FilterCriteria fields (wire or attribute names)
        name: Report file name without extension

    Returns:
        dict: Result of the export operation
    """
    task_id = self.request.id
    logger.info(f"Task {task_id}: Exporting accepted-order report")
    start_time = time.time()

    filters = FilterCriteria.model_validate(criteria or {})
    try:
        result = asyncio.run(
            build_and_save_report(get_order_store_client(), filters, ReportManager(), name)
        )
    except OrderReviewError as e:
        elapsed = round(time.time() - start_time, 3)
        logger.error(f"Task {task_id}: Report export failed after {elapsed}s - {e}")
        return {
            "success": False,
            "message": str(e),
            "task_id": task_id,
            "processing_time_seconds": elapsed,
        }

    elapsed = round(time.time() - start_time, 3)
    result["task_id"] = task_id
    result["processing_time_seconds"] = elapsed

    if result["success"]:
        logger.info(f"Task {task_id}: Report saved in {elapsed}s")
    else:
        logger.warning(f"Task {task_id}: Report not saved - {result['message']}")

    return result


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        'status': 'healthy',
        'worker': 'celery',
        'timestamp': datetime.now().isoformat()
    }
