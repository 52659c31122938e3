# shopcart/services/cart_sweeper.py
"""Lifecycle sweep: inactive carts become abandoned, old abandoned carts go away.

Each phase first collects candidate ids as of a fixed timestamp, then handles
every cart in its own transaction. The row is locked and the predicate
re-checked before acting, so a cart touched since the scan is left alone. A
failure on one cart is logged and counted; the rest of the batch still runs.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from functools import partial
from typing import Any, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from shopcart.core.config import settings
from shopcart.core.logging import get_logger
from shopcart.core.metrics import record_sweep
from shopcart.db.session_async import AsyncSessionLocal, SessionFactory, run_in_transaction
from shopcart.services import cart_repository
from shopcart.utils.clock import utcnow

logger = get_logger("shopcart.sweeper")

ABANDON_PHASE = "abandon"
PURGE_PHASE = "purge"


@dataclass(slots=True)
class SweepPhaseReport:
    phase: str
    processed: int = 0
    skipped: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SweepReport:
    as_of: datetime
    abandoned: SweepPhaseReport
    purged: SweepPhaseReport

    def as_dict(self) -> dict[str, Any]:
        return {
            "as_of": self.as_of.isoformat(),
            "abandoned": self.abandoned.as_dict(),
            "purged": self.purged.as_dict(),
        }


async def _mark_one(db: AsyncSession, *, cart_id: uuid.UUID, as_of: datetime, threshold: timedelta) -> bool:
    cart = await cart_repository.get_cart(db, cart_id, for_update=True)
    if cart is None or not cart.is_inactive(as_of, threshold):
        return False
    cart_repository.mark_abandoned(cart, as_of)
    await db.flush()
    logger.bind(cart_id=cart_id, phase=ABANDON_PHASE).info("Cart %s marked as abandoned", cart_id)
    return True


async def _purge_one(db: AsyncSession, *, cart_id: uuid.UUID, as_of: datetime, threshold: timedelta) -> bool:
    cart = await cart_repository.get_cart(db, cart_id, for_update=True)
    if cart is None or not cart.should_be_removed(as_of, threshold):
        return False
    logger.bind(cart_id=cart_id, phase=PURGE_PHASE).info("Removing abandoned cart %s", cart_id)
    await cart_repository.destroy_cart(db, cart)
    return True


async def _run_phase(
    report: SweepPhaseReport,
    cart_ids: list[uuid.UUID],
    handler: Callable[..., Awaitable[bool]],
    session_factory: SessionFactory,
    **kwargs: Any,
) -> SweepPhaseReport:
    for cart_id in cart_ids:
        try:
            done = await run_in_transaction(partial(handler, cart_id=cart_id, **kwargs), session_factory)
        except Exception:
            report.failed += 1
            logger.bind(cart_id=cart_id, phase=report.phase).exception("Sweep failed for cart %s", cart_id)
            continue
        if done:
            report.processed += 1
        else:
            report.skipped += 1

    record_sweep(report.phase, "ok", report.processed)
    record_sweep(report.phase, "failed", report.failed)
    return report


async def mark_abandoned_carts(
    *,
    as_of: datetime,
    threshold: timedelta | None = None,
    session_factory: SessionFactory = AsyncSessionLocal,
) -> SweepPhaseReport:
    if threshold is None:
        threshold = settings.inactivity_threshold
    async with session_factory() as db:
        cart_ids = await cart_repository.list_inactive_cart_ids(db, as_of=as_of, threshold=threshold)

    report = await _run_phase(
        SweepPhaseReport(ABANDON_PHASE),
        cart_ids,
        _mark_one,
        session_factory,
        as_of=as_of,
        threshold=threshold,
    )
    logger.bind(phase=ABANDON_PHASE).info("Marked %d carts as abandoned", report.processed, extra=report.as_dict())
    return report


async def purge_abandoned_carts(
    *,
    as_of: datetime,
    threshold: timedelta | None = None,
    session_factory: SessionFactory = AsyncSessionLocal,
) -> SweepPhaseReport:
    if threshold is None:
        threshold = settings.removal_threshold
    async with session_factory() as db:
        cart_ids = await cart_repository.list_expired_cart_ids(db, as_of=as_of, threshold=threshold)

    report = await _run_phase(
        SweepPhaseReport(PURGE_PHASE),
        cart_ids,
        _purge_one,
        session_factory,
        as_of=as_of,
        threshold=threshold,
    )
    logger.bind(phase=PURGE_PHASE).info("Removed %d old abandoned carts", report.processed, extra=report.as_dict())
    return report


async def run_sweep(
    *,
    as_of: datetime | None = None,
    session_factory: SessionFactory = AsyncSessionLocal,
) -> SweepReport:
    """Run both phases in order against the same timestamp."""
    as_of = as_of or utcnow()
    abandoned = await mark_abandoned_carts(as_of=as_of, session_factory=session_factory)
    purged = await purge_abandoned_carts(as_of=as_of, session_factory=session_factory)
    return SweepReport(as_of=as_of, abandoned=abandoned, purged=purged)
