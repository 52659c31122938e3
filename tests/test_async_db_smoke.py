# tests/test_async_db_smoke.py
import pytest
from sqlalchemy import text

from shopcart.db.session_async import AsyncSessionLocal, run_in_transaction


@pytest.mark.asyncio
async def test_async_engine_executes_simple_query() -> None:
    async with AsyncSessionLocal() as session:
        result = await session.execute(text("SELECT 1"))
        assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_run_in_transaction_returns_operation_value() -> None:
    async def _operation(session):
        result = await session.execute(text("SELECT 1"))
        return result.scalar_one()

    value = await run_in_transaction(_operation)
    assert value == 1


@pytest.mark.asyncio
async def test_run_in_transaction_rolls_back_on_error() -> None:
    async def _operation(session):
        await session.execute(
            text("INSERT INTO products (id, name, price, created_at) VALUES (:id, 'Ghost', 1, '2025-01-01 00:00:00')"),
            {"id": "0" * 32},
        )
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await run_in_transaction(_operation)

    async with AsyncSessionLocal() as session:
        count = await session.execute(text("SELECT COUNT(*) FROM products"))
        assert count.scalar_one() == 0


@pytest.mark.asyncio
async def test_sqlite_foreign_keys_are_enforced() -> None:
    async with AsyncSessionLocal() as session:
        result = await session.execute(text("PRAGMA foreign_keys"))
        assert result.scalar_one() == 1
