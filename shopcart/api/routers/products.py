from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.db.session_async import commit, get_async_db
from shopcart.schemas.product import ProductCreate, ProductRead, ProductUpdate
from shopcart.services import catalog_service
from shopcart.services.exceptions import ResourceNotFoundError

router = APIRouter(prefix="/products", tags=["products"])


async def _get_or_404(db: AsyncSession, product_id: str):
    product = await catalog_service.find_product(db, product_id)
    if product is None:
        raise ResourceNotFoundError("Product not found")
    return product


@router.get("", response_model=List[ProductRead])
async def list_products(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    return await catalog_service.list_products(db, limit=limit, offset=offset)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, db: AsyncSession = Depends(get_async_db)):
    product = await catalog_service.create_product(db, payload)
    await commit(db)
    return product


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: str, db: AsyncSession = Depends(get_async_db)):
    return await _get_or_404(db, product_id)


@router.patch("/{product_id}", response_model=ProductRead)
async def update_product(product_id: str, payload: ProductUpdate, db: AsyncSession = Depends(get_async_db)):
    product = await _get_or_404(db, product_id)
    product = await catalog_service.update_product(db, product, payload)
    await commit(db)
    return product
