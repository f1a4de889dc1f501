"""
FastAPI Application Entry Point

Accepted-orders REST store and report download service.

Endpoints:
    - GET    /acceptedOrders: List every accepted order
    - POST   /acceptedOrders: Store a newly accepted order
    - GET    /acceptedOrders/{id}: Get one accepted order
    - PUT    /acceptedOrders/{id}: Full-document replace
    - DELETE /acceptedOrders/{id}: Delete an accepted order
    - GET    /acceptedOrders/report: Download the filtered report (xlsx/csv)
    - POST   /acceptedOrders/report/jobs: Queue a background report export
    - GET    /categories: Categories offered by the filter drop-down
    - GET    /health: System health check

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

import redis
from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from order_review.core.config import get_settings, setup_logging
from order_review.core.exceptions import EmptyReportError
from order_review.database import engine, get_db, init_db
from order_review.engine.exporter import export_report
from order_review.engine.filters import apply_filters
from order_review.models import AcceptedOrderRecord
from order_review.schemas import (
    AcceptedOrder,
    AcceptedOrderBase,
    AcceptedOrderCreate,
    AcceptedOrderReplace,
    CategoryListResponse,
    ErrorResponse,
    FilterCriteria,
    HealthResponse,
    ReportFormat,
    ReportJobResponse,
)
from order_review.tasks import export_accepted_orders_report

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

REPORT_MEDIA_TYPES = {
    ReportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ReportFormat.CSV: "text/csv",
}


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("Database initialized")

    yield  # Application runs

    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Accepted supplier orders store with filtered report downloads "
        "for the restaurant back office."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

async def load_record(db: AsyncSession, order_id: str) -> AcceptedOrderRecord:
    """Fetch one stored order or raise 404."""
    record = await db.get(AcceptedOrderRecord, order_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Accepted order {order_id} not found")
    return record


async def load_all_orders(db: AsyncSession) -> list[AcceptedOrder]:
    """Every stored order, in insertion order."""
    result = await db.execute(
        select(AcceptedOrderRecord).order_by(
            AcceptedOrderRecord.created_at, AcceptedOrderRecord.id
        )
    )
    return [
        AcceptedOrder.model_validate(record.to_document())
        for record in result.scalars().all()
    ]


def apply_payload(record: AcceptedOrderRecord, payload: AcceptedOrderBase) -> None:
    """Overwrite every document field; fields absent from the payload become empty."""
    record.supplier_name = payload.supplier_name
    record.order_quantity = payload.order_quantity
    record.category = payload.category
    record.amount = payload.amount
    record.delivery_date = payload.delivery_date
    record.special_note = payload.special_note


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "accepted_orders": "/acceptedOrders",
        "report": "/acceptedOrders/report",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify all system components are operational."""

    db_status = "healthy"
    try:
        await db.execute(select(func.count(AcceptedOrderRecord.id)))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    redis_status = "healthy"
    try:
        r = redis.Redis.from_url(settings.redis_url, socket_timeout=2)
        r.ping()
        r.close()
    except Exception as e:
        redis_status = f"unhealthy: {str(e)}"
        logger.error(f"Redis health check failed: {e}")

    overall = "operational" if all(
        s == "healthy" for s in [db_status, redis_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        redis=redis_status,
        timestamp=datetime.now(),
    )


@app.get(
    "/categories",
    response_model=CategoryListResponse,
    tags=["Accepted Orders"],
)
async def list_categories() -> CategoryListResponse:
    """Categories offered by the filter drop-down."""
    return CategoryListResponse(categories=settings.order_categories_list)


# =============================================================================
# REPORT ENDPOINTS
# =============================================================================

@app.get(
    "/acceptedOrders/report",
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    tags=["Reports"],
    summary="Download Accepted Orders Report",
)
async def download_report(
    category: Optional[str] = Query(None),
    delivery_date_cutoff: Optional[str] = Query(None, alias="deliveryDateCutoff"),
    search: Optional[str] = Query(None),
    report_format: ReportFormat = Query(ReportFormat.XLSX, alias="format"),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Render the filtered accepted orders as a downloadable report.

    Columns: Supplier Name, Order Quantity, Category, Amount, Delivery Date,
    Special Note, Difference, Expiry Status.
    """
    try:
        criteria = FilterCriteria(
            category=category,
            delivery_date_cutoff=delivery_date_cutoff,
            supplier_search_term=search,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid filter: {e.errors()[0]['msg']}")

    orders = await load_all_orders(db)
    view = apply_filters(orders, criteria)

    try:
        document = export_report(view)
    except EmptyReportError as e:
        raise HTTPException(status_code=404, detail=str(e))

    filename = f"{settings.report_filename}.{report_format.value}"
    logger.info(f"Report download: {len(document)} of {len(orders)} orders ({filename})")

    return Response(
        content=document.render(report_format),
        media_type=REPORT_MEDIA_TYPES[report_format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post(
    "/acceptedOrders/report/jobs",
    response_model=ReportJobResponse,
    status_code=202,
    tags=["Reports"],
    summary="Queue Background Report Export",
)
async def queue_report_export(criteria: FilterCriteria) -> ReportJobResponse:
    """Queue a Celery export of the filtered report into the data directory."""
    task = export_accepted_orders_report.delay(criteria.model_dump(mode="json"))
    logger.info(f"Queued report export task {task.id}")

    return ReportJobResponse(
        success=True,
        message="Report export queued",
        task_id=task.id,
    )


# =============================================================================
# ACCEPTED ORDER ENDPOINTS
# =============================================================================

@app.get(
    "/acceptedOrders",
    response_model=List[AcceptedOrder],
    tags=["Accepted Orders"],
    summary="List Accepted Orders",
)
async def list_accepted_orders(
    db: AsyncSession = Depends(get_db),
) -> List[AcceptedOrder]:
    """Retrieve the full accepted-order collection."""
    return await load_all_orders(db)


@app.post(
    "/acceptedOrders",
    response_model=AcceptedOrder,
    status_code=201,
    tags=["Accepted Orders"],
    summary="Store Accepted Order",
)
async def create_accepted_order(
    payload: AcceptedOrderCreate,
    db: AsyncSession = Depends(get_db),
) -> AcceptedOrder:
    """Store a newly accepted order under a store-assigned id."""
    record = AcceptedOrderRecord()
    apply_payload(record, payload)

    db.add(record)
    await db.commit()
    await db.refresh(record)

    logger.info(f"Accepted order {record.id} stored ({record.supplier_name})")
    return AcceptedOrder.model_validate(record.to_document())


@app.get(
    "/acceptedOrders/{order_id}",
    response_model=AcceptedOrder,
    responses={404: {"model": ErrorResponse}},
    tags=["Accepted Orders"],
)
async def get_accepted_order(
    order_id: str,
    db: AsyncSession = Depends(get_db),
) -> AcceptedOrder:
    """Get a specific accepted order by ID."""
    record = await load_record(db, order_id)
    return AcceptedOrder.model_validate(record.to_document())


@app.put(
    "/acceptedOrders/{order_id}",
    response_model=AcceptedOrder,
    responses={404: {"model": ErrorResponse}},
    tags=["Accepted Orders"],
    summary="Replace Accepted Order",
)
async def replace_accepted_order(
    order_id: str,
    payload: AcceptedOrderReplace,
    db: AsyncSession = Depends(get_db),
) -> AcceptedOrder:
    """
    Replace every field of an accepted order.

    This is a full-document replace: a field missing from the body is
    cleared, never kept. The id in the URL wins over any ``_id`` in the body.
    """
    record = await load_record(db, order_id)
    apply_payload(record, payload)

    await db.commit()
    await db.refresh(record)

    logger.info(f"Accepted order {order_id} replaced")
    return AcceptedOrder.model_validate(record.to_document())


@app.delete(
    "/acceptedOrders/{order_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse}},
    tags=["Accepted Orders"],
    summary="Delete Accepted Order",
)
async def delete_accepted_order(
    order_id: str,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete an accepted order. Repeating the call yields 404."""
    record = await load_record(db, order_id)
    await db.delete(record)
    await db.commit()

    logger.info(f"Accepted order {order_id} deleted")
    return Response(status_code=204)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
