# tests/test_cart_tasks.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select

from shopcart.models.cart import Cart
from shopcart.tasks.carts import sweep_carts_task

NOW = datetime(2025, 10, 20, 12, 0, 0, tzinfo=timezone.utc)


def _cart(db_session, **timestamps) -> Cart:
    cart = Cart(total_price=Decimal("0.00"), items=[], **timestamps)
    db_session.add(cart)
    db_session.commit()
    return cart


def test_sweep_task_runs_both_phases(db_session):
    inactive = _cart(db_session, last_interaction_at=NOW - timedelta(hours=4))
    old = _cart(db_session, last_interaction_at=NOW - timedelta(days=9), abandoned_at=NOW - timedelta(days=8))

    report = sweep_carts_task.apply(kwargs={"as_of": NOW.isoformat()}).get()

    assert report["abandoned"]["processed"] == 1
    assert report["purged"]["processed"] == 1
    db_session.expire_all()
    remaining = db_session.execute(select(Cart.id, Cart.abandoned_at)).all()
    assert remaining == [(inactive.id, NOW)]
    assert old.id not in {row.id for row in remaining}


def test_sweep_task_accepts_naive_timestamp(db_session):
    _cart(db_session, last_interaction_at=NOW - timedelta(hours=4))

    report = sweep_carts_task.apply(kwargs={"as_of": NOW.replace(tzinfo=None).isoformat()}).get()

    assert report["abandoned"]["processed"] == 1
    assert report["as_of"] == NOW.isoformat()
