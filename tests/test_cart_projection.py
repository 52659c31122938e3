# tests/test_cart_projection.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from shopcart.models.cart import Cart, CartItem
from shopcart.models.product import Product
from shopcart.schemas.cart import project_cart


def test_absent_cart_projects_to_empty_shape():
    assert project_cart(None).model_dump() == {"id": None, "items": [], "total_price": 0.0}


def test_cart_projection_lists_lines():
    product = Product(id=uuid.uuid4(), name="iPhone 15", price=Decimal("999.99"))
    item = CartItem(product_id=product.id, product=product, quantity=2, line_total=Decimal("1999.98"))
    cart = Cart(
        id=uuid.uuid4(),
        total_price=Decimal("1999.98"),
        last_interaction_at=datetime.now(timezone.utc),
        items=[item],
    )

    projected = project_cart(cart).model_dump()

    assert projected["id"] == cart.id
    assert projected["total_price"] == 1999.98
    assert projected["items"] == [
        {
            "product_id": product.id,
            "name": "iPhone 15",
            "quantity": 2,
            "unit_price": 999.99,
            "line_total": 1999.98,
        }
    ]
