"""products, carts and cart items

Revision ID: 3b7c1d2e4f50
Revises:
Create Date: 2025-10-20 09:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

from shopcart.db.types import GUID, UTCDateTime

# revision identifiers, used by Alembic.
revision: str = "3b7c1d2e4f50"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", GUID(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    op.create_table(
        "carts",
        sa.Column("id", GUID(), primary_key=True, nullable=False),
        sa.Column("total_price", sa.Numeric(18, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("last_interaction_at", UTCDateTime(), nullable=False),
        sa.Column("abandoned_at", UTCDateTime(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.CheckConstraint("total_price >= 0", name="ck_carts_total_price_non_negative"),
    )
    # Both sweep scans filter on these columns.
    op.create_index(
        "ix_carts_abandoned_at_last_interaction_at",
        "carts",
        ["abandoned_at", "last_interaction_at"],
        unique=False,
    )

    op.create_table(
        "cart_items",
        sa.Column("id", GUID(), primary_key=True, nullable=False),
        sa.Column("cart_id", GUID(), nullable=False),
        sa.Column("product_id", GUID(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("line_total", sa.Numeric(18, 2), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(["cart_id"], ["carts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        sa.CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
        sa.CheckConstraint("line_total >= 0", name="ck_cart_items_line_total_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("cart_items")
    op.drop_index("ix_carts_abandoned_at_last_interaction_at", table_name="carts")
    op.drop_table("carts")
    op.drop_table("products")
