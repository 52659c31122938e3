# shopcart/services/session_binding.py
from __future__ import annotations

import uuid
from collections.abc import MutableMapping
from typing import Any

CART_ID_KEY = "cart_id"


class CartSessionBinding:
    """Associates a shopper session with at most one cart id.

    Wraps whatever key-value store carries the session (``request.session``
    under Starlette's SessionMiddleware, a plain dict in tests). Values are
    stored as strings so the store can be serialised as JSON.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def get_bound_cart_id(self) -> uuid.UUID | None:
        raw = self._session.get(CART_ID_KEY)
        if not raw:
            return None
        try:
            return uuid.UUID(str(raw))
        except ValueError:
            return None

    def bind_cart_id(self, cart_id: uuid.UUID) -> None:
        self._session[CART_ID_KEY] = str(cart_id)

    def unbind_cart_id(self) -> None:
        self._session.pop(CART_ID_KEY, None)
