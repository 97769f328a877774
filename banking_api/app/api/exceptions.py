from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import BankingError, ConcurrencyConflictError, ErrorKind


logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_AMOUNT: 400,
    ErrorKind.INVALID_BALANCE: 400,
    ErrorKind.NOT_FOUND: 400,
    ErrorKind.INSUFFICIENT_FUNDS: 400,
    ErrorKind.SAME_ACCOUNT: 400,
    ErrorKind.CONCURRENCY_CONFLICT: 409,
    ErrorKind.UNKNOWN: 500,
}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BankingError)
    async def banking_error_handler(request: Request, exc: BankingError) -> JSONResponse:
        content = {"detail": str(exc), "kind": exc.kind.value}
        if isinstance(exc, ConcurrencyConflictError) and exc.transaction_id is not None:
            content["transaction_id"] = str(exc.transaction_id)
        return JSONResponse(status_code=STATUS_BY_KIND[exc.kind], content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_errors(exc), "kind": "invalid_request"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed", extra={"path": request.url.path})
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "kind": ErrorKind.UNKNOWN.value},
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
