# shopcart/services/catalog_service.py
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.core.logging import get_logger
from shopcart.models.product import Product
from shopcart.schemas.product import ProductCreate, ProductUpdate
from shopcart.services import cart_repository

logger = get_logger("shopcart.catalog")


def _as_uuid(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


async def find_product(db: AsyncSession, product_id) -> Product | None:
    """Look a product up by id; malformed ids simply do not resolve."""
    product_uuid = _as_uuid(product_id)
    if product_uuid is None:
        return None
    return await db.get(Product, product_uuid)


async def list_products(db: AsyncSession, *, limit: int = 50, offset: int = 0) -> list[Product]:
    result = await db.execute(
        select(Product).order_by(Product.name, Product.id).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def create_product(db: AsyncSession, payload: ProductCreate) -> Product:
    product = Product(name=payload.name, price=cart_repository.to_money(payload.price))
    db.add(product)
    await db.flush()
    return product


async def update_product(db: AsyncSession, product: Product, payload: ProductUpdate) -> Product:
    data = payload.model_dump(exclude_unset=True)
    price_changed = False

    if data.get("name") is not None:
        product.name = data["name"]
    if data.get("price") is not None:
        new_price = cart_repository.to_money(data["price"])
        price_changed = new_price != Decimal(str(product.price))
        product.price = new_price

    await db.flush()
    if price_changed:
        touched = await cart_repository.recompute_carts_with_product(db, product.id)
        logger.bind(product_id=product.id).info(
            "Product price changed", extra={"price": str(product.price), "carts_recomputed": touched}
        )
    return product
