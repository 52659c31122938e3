# shopcart/models/cart.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopcart.db.session import Base
from shopcart.db.types import GUID, UTCDateTime
from shopcart.models.product import Product
from shopcart.utils.clock import utcnow


class Cart(Base):
    __tablename__ = "carts"
    __table_args__ = (
        CheckConstraint("total_price >= 0", name="ck_carts_total_price_non_negative"),
        Index("ix_carts_abandoned_at_last_interaction_at", "abandoned_at", "last_interaction_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4, nullable=False)
    # Derived from the items; only cart_repository.recompute_total writes it.
    total_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0.00"), nullable=False)
    last_interaction_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    abandoned_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow, nullable=False)

    items: Mapped[list["CartItem"]] = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="CartItem.created_at",
    )

    @property
    def is_abandoned(self) -> bool:
        return self.abandoned_at is not None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def is_inactive(self, as_of: datetime, threshold: timedelta) -> bool:
        return not self.is_abandoned and self.last_interaction_at <= as_of - threshold

    def should_be_removed(self, as_of: datetime, threshold: timedelta) -> bool:
        return self.is_abandoned and self.abandoned_at <= as_of - threshold


class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
        CheckConstraint("line_total >= 0", name="ck_cart_items_line_total_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4, nullable=False)
    cart_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    line_total: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow, nullable=False)

    cart = relationship("Cart", back_populates="items")
    product: Mapped[Product] = relationship(Product, lazy="joined")
