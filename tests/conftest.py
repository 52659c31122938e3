# tests/conftest.py
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import os
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret-key-0123456789")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")

from shopcart.main import app
from shopcart.db.session import Base, SessionLocal, engine as sync_engine
from shopcart.db.session_async import AsyncSessionLocal
from shopcart.models.cart import Cart
from shopcart.models.product import Product
from shopcart.services.session_binding import CartSessionBinding

NOW = datetime(2025, 10, 20, 12, 0, 0, tzinfo=timezone.utc)


# ---------- Fixtures ----------
@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create the SQLite tables once per test session."""
    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with sync_engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Short-lived sync session for setup in sync tests."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest_asyncio.fixture(scope="function")
async def client():
    """AsyncClient bound to the app; its cookie jar carries the cart session."""
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def async_db_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def session_store() -> dict:
    return {}


@pytest.fixture
def binding(session_store: dict) -> CartSessionBinding:
    return CartSessionBinding(session_store)


@pytest_asyncio.fixture
async def product_factory(async_db_session: AsyncSession):
    async def _create(name: str = "Sample Product", price: str = "99.99") -> Product:
        product = Product(name=name, price=Decimal(price))
        async_db_session.add(product)
        await async_db_session.commit()
        return product

    return _create


@pytest_asyncio.fixture
async def cart_factory(async_db_session: AsyncSession):
    """Persist a bare cart with explicit lifecycle timestamps."""

    async def _create(*, last_interaction_at: datetime = NOW, abandoned_at: datetime | None = None) -> Cart:
        cart = Cart(
            total_price=Decimal("0.00"),
            last_interaction_at=last_interaction_at,
            abandoned_at=abandoned_at,
            items=[],
        )
        async_db_session.add(cart)
        await async_db_session.commit()
        return cart

    return _create
