"""
Shared fixtures: sample accepted orders, a mock store, a loaded review
session and an ASGI client for the store server on in-memory SQLite.
"""

import os

os.environ.setdefault("ENV_MODE", "development")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from order_review.database import Base, get_db
from order_review.engine.session import OrderReviewSession
from order_review.main import app
from order_review.schemas import AcceptedOrder
from order_review.services.store.mock import MockOrderStoreClient

NOW = datetime(2025, 1, 1, 12, 0, 0)


def make_order(order_id="1", **overrides) -> AcceptedOrder:
    document = {
        "_id": order_id,
        "supplierName": "Acme",
        "orderQuantity": 10,
        "category": "Meat",
        "amount": 10,
        "deliveryDate": "2024-01-01",
        "specialNote": None,
    }
    document.update(overrides)
    return AcceptedOrder.model_validate(document)


@pytest.fixture
def sample_orders() -> list[AcceptedOrder]:
    return [
        make_order("1", supplierName="Acme", category="Meat", orderQuantity=10,
                   amount=10, deliveryDate="2024-01-01"),
        make_order("2", supplierName="Beta", category="Spices", orderQuantity=5,
                   amount=8, deliveryDate="2099-01-01", specialNote="Keep dry"),
    ]


@pytest.fixture
def store(sample_orders) -> MockOrderStoreClient:
    return MockOrderStoreClient(sample_orders)


@pytest.fixture
async def session(store) -> OrderReviewSession:
    review = OrderReviewSession(store)
    await review.refresh()
    return review


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def api_client(db_engine):
    session_maker = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_maker() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client
    app.dependency_overrides.clear()
