from __future__ import annotations

from typing import NoReturn

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shopcart.services.exceptions import DomainValidationError, ResourceNotFoundError
from shopcart.services.result import CartError, CartErrorKind

_UNPROCESSABLE_KINDS = frozenset({CartErrorKind.INVALID_QUANTITY})


def raise_for_error(error: CartError) -> NoReturn:
    """Translate a failed cart result into the boundary's exception vocabulary."""
    if error.kind in _UNPROCESSABLE_KINDS:
        raise DomainValidationError(error.message)
    raise ResourceNotFoundError(error.message)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ResourceNotFoundError)
    async def handle_not_found(_: Request, exc: ResourceNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(DomainValidationError)
    async def handle_validation(_: Request, exc: DomainValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})
