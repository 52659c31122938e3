# shopcart/schemas/cart.py
from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from shopcart.models.cart import Cart, CartItem


class CartItemPayload(BaseModel):
    # Quantity rules live in the cart service so they surface as cart errors.
    product_id: str = Field(..., min_length=1, max_length=64)
    quantity: int


class CartItemRead(BaseModel):
    product_id: UUID
    name: str
    quantity: int
    unit_price: float
    line_total: float


class CartRead(BaseModel):
    id: UUID | None
    items: List[CartItemRead] = Field(default_factory=list)
    total_price: float = 0.0


def _project_item(item: CartItem) -> CartItemRead:
    return CartItemRead(
        product_id=item.product_id,
        name=item.product.name,
        quantity=item.quantity,
        unit_price=float(item.product.price),
        line_total=float(item.line_total),
    )


def project_cart(cart: Cart | None) -> CartRead:
    """JSON-ready view of a cart; an absent cart projects to an empty one."""
    if cart is None:
        return CartRead(id=None, items=[], total_price=0.0)
    return CartRead(
        id=cart.id,
        items=[_project_item(item) for item in cart.items],
        total_price=float(cart.total_price or 0),
    )
