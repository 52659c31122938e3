# shopcart/services/result.py
"""Success/failure envelope returned by every cart operation.

Expected domain outcomes (a missing product, an invalid quantity...) are
values, not exceptions: callers branch on ``is_success`` and read either
``value`` or ``error``. Reading the wrong side is a programming error and
raises ``ResultAccessError``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class CartErrorKind(str, enum.Enum):
    CART_NOT_FOUND = "cart_not_found"
    PRODUCT_NOT_FOUND = "product_not_found"
    PRODUCT_NOT_IN_CART = "product_not_in_cart"
    INVALID_QUANTITY = "invalid_quantity"
    EMPTY_CART = "empty_cart"


DEFAULT_MESSAGES: dict[CartErrorKind, str] = {
    CartErrorKind.CART_NOT_FOUND: "Cart not found",
    CartErrorKind.PRODUCT_NOT_FOUND: "Product not found",
    CartErrorKind.PRODUCT_NOT_IN_CART: "Product not found in cart",
    CartErrorKind.INVALID_QUANTITY: "Quantity must be greater than 0",
    CartErrorKind.EMPTY_CART: "Cart is empty",
}


@dataclass(frozen=True, slots=True)
class CartError:
    kind: CartErrorKind
    message: str

    @classmethod
    def of(cls, kind: CartErrorKind, message: str | None = None) -> "CartError":
        return cls(kind=kind, message=message or DEFAULT_MESSAGES[kind])


class ResultAccessError(RuntimeError):
    """Raised when a Result is read on the side it does not carry."""


class Result(Generic[T]):
    __slots__ = ("_ok", "_value", "_error")

    def __init__(self, *, ok: bool, value: T | None = None, error: CartError | None = None) -> None:
        self._ok = ok
        self._value = value
        self._error = error

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: CartError | CartErrorKind) -> "Result[T]":
        if isinstance(error, CartErrorKind):
            error = CartError.of(error)
        return cls(ok=False, error=error)

    @property
    def is_success(self) -> bool:
        return self._ok

    @property
    def is_failure(self) -> bool:
        return not self._ok

    @property
    def value(self) -> T:
        if not self._ok:
            raise ResultAccessError("Cannot access value on failure result")
        return self._value  # type: ignore[return-value]

    @property
    def error(self) -> CartError:
        if self._ok:
            raise ResultAccessError("Cannot access error on success result")
        return self._error  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self._ok:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error!r})"
