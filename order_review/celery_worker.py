"""
Celery Worker Configuration
Report export worker for the accepted-orders service. Redis carries both
the export job queue and the job results polled by the back office.

Start with: celery -A order_review.celery_worker worker --loglevel=info
"""

from celery import Celery

from order_review.core.config import get_settings

settings = get_settings()

celery_app = Celery(
    'order_review_worker',
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=['order_review.tasks']  # export_accepted_orders_report lives here
)

celery_app.conf.update(
    # Criteria and export results travel as plain JSON dicts
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,

    # Each export loads the whole collection; keep a worker to one at a time
    worker_prefetch_multiplier=1,
    worker_concurrency=2,

    # Export results (path, row count) are only polled shortly after queueing
    result_expires=3600,

    # A lost export is rerun; saving the workbook twice is harmless
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    broker_connection_retry_on_startup=True,
)


if __name__ == '__main__':
    celery_app.start()
