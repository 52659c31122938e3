from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from shopcart.core.celery_app import celery_app
from shopcart.services import cart_sweeper


def _parse_as_of(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


async def _sweep(as_of: datetime | None) -> dict:
    report = await cart_sweeper.run_sweep(as_of=as_of)
    return report.as_dict()


def _run(func, *args, **kwargs):
    return asyncio.run(func(*args, **kwargs))


@celery_app.task(name="carts.sweep")
def sweep_carts_task(as_of: str | None = None) -> dict:
    """Periodic lifecycle sweep; ``as_of`` (ISO-8601) pins the clock for replays."""
    return _run(_sweep, _parse_as_of(as_of))
