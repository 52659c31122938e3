# shopcart/services/cart_repository.py
"""Persistence for carts and their items.

Nothing here commits: every function works inside the caller's transaction,
so an item change and the total it implies land together or not at all.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.models.cart import Cart, CartItem
from shopcart.models.product import Product

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(product: Product, quantity: int) -> Decimal:
    return to_money(to_money(product.price) * quantity)


async def get_cart(db: AsyncSession, cart_id: uuid.UUID, *, for_update: bool = False) -> Cart | None:
    """Load a cart with its items and their products, bypassing the identity map."""
    stmt = select(Cart).where(Cart.id == cart_id).execution_options(populate_existing=True)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalars().first()


async def create_cart(db: AsyncSession, *, now: datetime) -> Cart:
    cart = Cart(total_price=ZERO, last_interaction_at=now, abandoned_at=None, items=[])
    db.add(cart)
    await db.flush()
    return cart


def find_item(cart: Cart, product_id: uuid.UUID) -> CartItem | None:
    return next((item for item in cart.items if item.product_id == product_id), None)


def add_item(cart: Cart, product: Product, quantity: int) -> CartItem:
    item = CartItem(
        product_id=product.id,
        product=product,
        quantity=quantity,
        line_total=line_total(product, quantity),
    )
    cart.items.append(item)
    return item


def set_item_quantity(item: CartItem, quantity: int) -> CartItem:
    if quantity <= 0:
        raise ValueError("Cart items must keep a positive quantity; delete the item instead.")
    item.quantity = quantity
    item.line_total = line_total(item.product, quantity)
    return item


async def delete_item(db: AsyncSession, cart: Cart, item: CartItem) -> None:
    cart.items.remove(item)
    await db.flush()


def touch(cart: Cart, now: datetime) -> None:
    """Record an interaction; an abandoned cart that is used again is active again."""
    cart.last_interaction_at = now
    cart.abandoned_at = None


def mark_abandoned(cart: Cart, now: datetime) -> None:
    cart.abandoned_at = now


async def recompute_total(db: AsyncSession, cart: Cart) -> Decimal:
    """Recalculate every line total and the cart total from stored quantities and prices."""
    await db.flush()
    result = await db.execute(
        select(CartItem)
        .where(CartItem.cart_id == cart.id)
        .execution_options(populate_existing=True)
    )
    total = ZERO
    for item in result.scalars().all():
        item.line_total = line_total(item.product, item.quantity)
        total += item.line_total
    cart.total_price = to_money(total)
    await db.flush()
    return cart.total_price


async def destroy_cart(db: AsyncSession, cart: Cart) -> None:
    await db.delete(cart)
    await db.flush()


async def list_inactive_cart_ids(
    db: AsyncSession,
    *,
    as_of: datetime,
    threshold: timedelta,
) -> list[uuid.UUID]:
    """Carts not yet abandoned whose last interaction is at or before ``as_of - threshold``."""
    stmt = (
        select(Cart.id)
        .where(Cart.abandoned_at.is_(None))
        .where(Cart.last_interaction_at <= as_of - threshold)
        .order_by(Cart.last_interaction_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_expired_cart_ids(
    db: AsyncSession,
    *,
    as_of: datetime,
    threshold: timedelta,
) -> list[uuid.UUID]:
    """Abandoned carts whose abandonment is at or before ``as_of - threshold``."""
    stmt = (
        select(Cart.id)
        .where(Cart.abandoned_at.is_not(None))
        .where(Cart.abandoned_at <= as_of - threshold)
        .order_by(Cart.abandoned_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def recompute_carts_with_product(db: AsyncSession, product_id: uuid.UUID) -> int:
    """Refresh totals of every cart holding ``product_id``; returns how many were touched."""
    await db.flush()
    result = await db.execute(
        select(CartItem.cart_id).where(CartItem.product_id == product_id).distinct()
    )
    cart_ids = list(result.scalars().all())
    for cart_id in cart_ids:
        cart = await get_cart(db, cart_id, for_update=True)
        if cart is not None:
            await recompute_total(db, cart)
    return len(cart_ids)
