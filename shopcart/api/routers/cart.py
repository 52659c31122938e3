from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.api.deps import get_cart_binding
from shopcart.api.error_handlers import raise_for_error
from shopcart.db.session_async import commit, get_async_db, rollback
from shopcart.models.cart import Cart
from shopcart.schemas.cart import CartItemPayload, CartRead, project_cart
from shopcart.services import cart_service
from shopcart.services.result import Result
from shopcart.services.session_binding import CartSessionBinding

router = APIRouter(prefix="/cart", tags=["cart"])


async def _respond(db: AsyncSession, result: Result[Cart]) -> CartRead:
    if result.is_failure:
        await rollback(db)
        raise_for_error(result.error)
    await commit(db)
    return project_cart(result.value)


@router.get("", response_model=CartRead)
async def show_cart(
    db: AsyncSession = Depends(get_async_db),
    binding: CartSessionBinding = Depends(get_cart_binding),
):
    result = await cart_service.get_cart(db, binding)
    return project_cart(result.value)


@router.post("", response_model=CartRead)
async def add_product(
    payload: CartItemPayload,
    db: AsyncSession = Depends(get_async_db),
    binding: CartSessionBinding = Depends(get_cart_binding),
):
    result = await cart_service.add_item(db, binding, payload.product_id, payload.quantity)
    return await _respond(db, result)


@router.post("/add_item", response_model=CartRead)
async def change_quantity(
    payload: CartItemPayload,
    db: AsyncSession = Depends(get_async_db),
    binding: CartSessionBinding = Depends(get_cart_binding),
):
    """Shift a product's quantity by ``quantity`` (negative values decrease it)."""
    result = await cart_service.set_item_quantity(db, binding, payload.product_id, payload.quantity)
    return await _respond(db, result)


@router.delete("/{product_id}", response_model=CartRead)
async def remove_product(
    product_id: str,
    db: AsyncSession = Depends(get_async_db),
    binding: CartSessionBinding = Depends(get_cart_binding),
):
    result = await cart_service.remove_item(db, binding, product_id)
    return await _respond(db, result)
