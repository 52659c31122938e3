# shopcart/services/cart_resolver.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.core.logging import get_logger
from shopcart.models.cart import Cart
from shopcart.services import cart_repository
from shopcart.services.session_binding import CartSessionBinding

logger = get_logger("shopcart.cart")


async def resolve(db: AsyncSession, binding: CartSessionBinding, *, for_update: bool = False) -> Cart | None:
    """Return the session's cart, or None if it has none or the cart was swept."""
    cart_id = binding.get_bound_cart_id()
    if cart_id is None:
        return None
    return await cart_repository.get_cart(db, cart_id, for_update=for_update)


async def resolve_or_create(
    db: AsyncSession,
    binding: CartSessionBinding,
    *,
    now: datetime,
    for_update: bool = True,
) -> Cart:
    cart = await resolve(db, binding, for_update=for_update)
    if cart is not None:
        return cart

    stale_id = binding.get_bound_cart_id()
    cart = await cart_repository.create_cart(db, now=now)
    binding.bind_cart_id(cart.id)
    logger.bind(cart_id=cart.id).info("Cart created", extra={"replaced_cart_id": stale_id})
    return cart
