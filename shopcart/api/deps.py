# shopcart/api/deps.py
from fastapi import Request

from shopcart.services.session_binding import CartSessionBinding


def get_cart_binding(request: Request) -> CartSessionBinding:
    """Bind the cart to the signed session cookie handled by SessionMiddleware."""
    return CartSessionBinding(request.session)
