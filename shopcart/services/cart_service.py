# shopcart/services/cart_service.py
"""Cart mutation engine.

Every operation returns a ``Result``: the reloaded cart on success or a typed
``CartError``. Validation happens before anything is written, and existence
checks run in a fixed order per operation so the reported error is
deterministic. Operations flush but never commit; the caller owns the
transaction and commits only on success.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.core.logging import get_logger
from shopcart.core.metrics import record_cart_operation
from shopcart.models.cart import Cart
from shopcart.services import cart_repository, cart_resolver, catalog_service
from shopcart.services.result import CartError, CartErrorKind, Result
from shopcart.services.session_binding import CartSessionBinding
from shopcart.utils.clock import utcnow

MINIMUM_QUANTITY = 1
# Keeps quantity × the largest catalogue price (Numeric(10,2)) inside a line total (Numeric(18,2)).
MAXIMUM_QUANTITY = 10_000
TOO_MANY_MESSAGE = f"Quantity must not exceed {MAXIMUM_QUANTITY}"

logger = get_logger("shopcart.cart")

ProductId = uuid.UUID | str


def _reject(operation: str, kind: CartErrorKind, message: str | None = None, **context) -> Result[Cart]:
    record_cart_operation(operation, kind.value)
    logger.bind(operation=operation).info("Cart operation rejected", extra={"error": kind.value, **context})
    return Result.failure(CartError.of(kind, message))


async def _commit_changes(db: AsyncSession, operation: str, cart: Cart, now: datetime) -> Result[Cart]:
    cart_repository.touch(cart, now)
    await cart_repository.recompute_total(db, cart)
    reloaded = await cart_repository.get_cart(db, cart.id)
    record_cart_operation(operation, "ok")
    logger.bind(operation=operation, cart_id=cart.id).info(
        "Cart updated",
        extra={"items": len(reloaded.items), "total_price": str(reloaded.total_price)},
    )
    return Result.success(reloaded)


async def get_cart(db: AsyncSession, binding: CartSessionBinding) -> Result[Cart | None]:
    """Read-only: the session's cart, or None when there is none."""
    cart = await cart_resolver.resolve(db, binding)
    return Result.success(cart)


async def add_item(
    db: AsyncSession,
    binding: CartSessionBinding,
    product_id: ProductId,
    quantity: int,
    *,
    now: datetime | None = None,
) -> Result[Cart]:
    """Add ``quantity`` units of a product, merging into an existing line."""
    if quantity < MINIMUM_QUANTITY:
        return _reject("add_item", CartErrorKind.INVALID_QUANTITY, product_id=product_id, quantity=quantity)
    if quantity > MAXIMUM_QUANTITY:
        return _reject(
            "add_item", CartErrorKind.INVALID_QUANTITY, TOO_MANY_MESSAGE, product_id=product_id, quantity=quantity
        )

    product = await catalog_service.find_product(db, product_id)
    if product is None:
        return _reject("add_item", CartErrorKind.PRODUCT_NOT_FOUND, product_id=product_id)

    now = now or utcnow()
    cart = await cart_resolver.resolve_or_create(db, binding, now=now)

    item = cart_repository.find_item(cart, product.id)
    # Only an existing line can push the total past the cap, so nothing was created for this call.
    if item is not None and item.quantity + quantity > MAXIMUM_QUANTITY:
        return _reject(
            "add_item",
            CartErrorKind.INVALID_QUANTITY,
            TOO_MANY_MESSAGE,
            cart_id=cart.id,
            product_id=product.id,
            quantity=item.quantity + quantity,
        )
    if item is not None:
        cart_repository.set_item_quantity(item, item.quantity + quantity)
    else:
        cart_repository.add_item(cart, product, quantity)

    return await _commit_changes(db, "add_item", cart, now)


async def set_item_quantity(
    db: AsyncSession,
    binding: CartSessionBinding,
    product_id: ProductId,
    delta: int,
    *,
    now: datetime | None = None,
) -> Result[Cart]:
    """Shift a line's quantity by ``delta``.

    A line that would end at zero or below is removed; a missing line is
    treated as quantity 0, so a positive delta creates it.
    """
    if delta == 0:
        return _reject("set_item_quantity", CartErrorKind.INVALID_QUANTITY, product_id=product_id, quantity=delta)
    if delta > MAXIMUM_QUANTITY:
        return _reject(
            "set_item_quantity",
            CartErrorKind.INVALID_QUANTITY,
            TOO_MANY_MESSAGE,
            product_id=product_id,
            quantity=delta,
        )

    product = await catalog_service.find_product(db, product_id)
    if product is None:
        return _reject("set_item_quantity", CartErrorKind.PRODUCT_NOT_FOUND, product_id=product_id)

    now = now or utcnow()
    cart = await cart_resolver.resolve_or_create(db, binding, now=now)

    item = cart_repository.find_item(cart, product.id)
    new_quantity = (item.quantity if item is not None else 0) + delta
    if new_quantity > MAXIMUM_QUANTITY:
        return _reject(
            "set_item_quantity",
            CartErrorKind.INVALID_QUANTITY,
            TOO_MANY_MESSAGE,
            cart_id=cart.id,
            product_id=product.id,
            quantity=new_quantity,
        )

    if new_quantity <= 0:
        if item is not None:
            await cart_repository.delete_item(db, cart, item)
    elif item is None:
        cart_repository.add_item(cart, product, new_quantity)
    else:
        cart_repository.set_item_quantity(item, new_quantity)

    return await _commit_changes(db, "set_item_quantity", cart, now)


async def remove_item(
    db: AsyncSession,
    binding: CartSessionBinding,
    product_id: ProductId,
    *,
    now: datetime | None = None,
) -> Result[Cart]:
    cart = await cart_resolver.resolve(db, binding, for_update=True)
    if cart is None:
        return _reject("remove_item", CartErrorKind.CART_NOT_FOUND, product_id=product_id)

    if cart.is_empty:
        return _reject("remove_item", CartErrorKind.EMPTY_CART, cart_id=cart.id, product_id=product_id)

    product = await catalog_service.find_product(db, product_id)
    if product is None:
        return _reject("remove_item", CartErrorKind.PRODUCT_NOT_FOUND, cart_id=cart.id, product_id=product_id)

    item = cart_repository.find_item(cart, product.id)
    if item is None:
        return _reject("remove_item", CartErrorKind.PRODUCT_NOT_IN_CART, cart_id=cart.id, product_id=product_id)

    await cart_repository.delete_item(db, cart, item)
    return await _commit_changes(db, "remove_item", cart, now or utcnow())
