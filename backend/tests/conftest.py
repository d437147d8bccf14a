"""
Pytest configuration and shared fixtures for the storefront tests.

Provides a throwaway SQLite database per test, an httpx client bound to the
FastAPI app, admin credentials, and small data factories.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
import pytest_asyncio
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config import settings

# ── Test Configuration ───────────────────────────────────────────────
# Set test-only values for settings that would normally come from .env
TEST_ADMIN_SECRET = "test-admin-secret"
settings.admin_secret = TEST_ADMIN_SECRET
settings.jwt_secret = "test-jwt-secret-for-pytest-only"

from main import app  # noqa: E402
from database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from middleware.auth import issue_admin_token  # noqa: E402
from middleware.rate_limit import limiter  # noqa: E402

import db_models  # noqa: E402,F401


BUYER = {
    "buyerName": "Asha Farms Co-op",
    "contact": "asha@example.com",
    "address": "12 Market Road, Pune",
}


# ── Database Fixtures ────────────────────────────────────────────────


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """
    Fresh SQLite file per test.

    A file (not :memory:) so that concurrent requests each get their own
    connection, the way they would against the real database.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for calling services directly and for arranging test data."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client talking to the app in-process.

    Overrides get_db so every request opens its own session on the test DB.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    limiter.reset()
    yield
    limiter.reset()


# ── Auth Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def admin_token() -> str:
    return issue_admin_token()


@pytest.fixture
def admin_headers(admin_token) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest.fixture
def make_product(db_session):
    """Factory: await make_product("Tomatoes", 3.0) -> committed Product."""
    from services import catalog_service

    async def _make(name: str = "Tomatoes", price: float = 3.0):
        product = await catalog_service.create_product(db_session, name=name, price=price)
        await db_session.commit()
        return product

    return _make


@pytest.fixture
def make_order(db_session):
    """Factory: await make_order(product, quantity=2, session_id="S1") -> committed Order."""
    from services import order_service

    async def _make(product, quantity: int = 1, session_id: str | None = None, buyer: dict | None = None):
        buyer = buyer or BUYER
        order = await order_service.create_order(
            db_session,
            product_id=product.id,
            quantity=quantity,
            buyer_name=buyer["buyerName"],
            contact=buyer["contact"],
            address=buyer["address"],
            checkout_session_id=session_id,
        )
        await db_session.commit()
        return order

    return _make


@pytest.fixture
def buyer() -> dict:
    """Buyer details as the storefront sends them (camelCase)."""
    return dict(BUYER)
