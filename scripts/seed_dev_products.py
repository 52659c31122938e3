"""Seed script for populating development catalogue data."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.core.logging import setup_logging
from shopcart.db.session_async import AsyncSessionLocal
from shopcart.models.product import Product
from shopcart.schemas.product import ProductCreate
from shopcart.services import catalog_service

logger = logging.getLogger("scripts.seed_dev_products")


@dataclass(frozen=True, slots=True)
class ProductSeed:
    name: str
    price: Decimal


PRODUCT_SEEDS: Sequence[ProductSeed] = (
    ProductSeed("iPhone 15", Decimal("999.99")),
    ProductSeed("Samsung Galaxy", Decimal("799.99")),
    ProductSeed("USB-C Charger", Decimal("29.90")),
    ProductSeed("Phone Case", Decimal("14.50")),
    ProductSeed("Wireless Earbuds", Decimal("149.00")),
)


async def seed_products(db: AsyncSession, seeds: Sequence[ProductSeed] = PRODUCT_SEEDS) -> list[Product]:
    """Insert missing products by name; existing ones are left untouched."""
    result = await db.execute(select(Product.name))
    existing = set(result.scalars().all())

    created: list[Product] = []
    for seed in seeds:
        if seed.name in existing:
            logger.info("Product already present: %s", seed.name)
            continue
        product = await catalog_service.create_product(db, ProductCreate(name=seed.name, price=seed.price))
        created.append(product)
        logger.info("Product created: %s", seed.name)
    return created


async def main() -> None:
    setup_logging()
    async with AsyncSessionLocal() as session:
        created = await seed_products(session)
        await session.commit()
    logger.info("Seeded %d products", len(created))


if __name__ == "__main__":
    asyncio.run(main())
