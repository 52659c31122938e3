# tests/test_seed_scripts.py
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from scripts import seed_dev_products
from shopcart.models.product import Product


@pytest.mark.asyncio
async def test_seed_dev_products_populates_catalog(async_db_session):
    await seed_dev_products.main()

    total = (await async_db_session.execute(select(func.count(Product.id)))).scalar_one()
    assert total == len(seed_dev_products.PRODUCT_SEEDS)

    phone = (
        await async_db_session.execute(select(Product).where(Product.name == "iPhone 15"))
    ).scalar_one()
    assert phone.price == Decimal("999.99")


@pytest.mark.asyncio
async def test_seed_dev_products_is_idempotent(async_db_session, product_factory):
    await product_factory("iPhone 15", "1.00")

    await seed_dev_products.main()
    await seed_dev_products.main()

    total = (await async_db_session.execute(select(func.count(Product.id)))).scalar_one()
    assert total == len(seed_dev_products.PRODUCT_SEEDS)

    price = (
        await async_db_session.execute(select(Product.price).where(Product.name == "iPhone 15"))
    ).scalar_one()
    assert price == Decimal("1.00")
