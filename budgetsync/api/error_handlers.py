from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from budgetsync.api.schemas.common import err
from budgetsync.domain.errors import DomainError
from budgetsync.logger import current_request_id, get_logger

_HTTP_CODES = {404: "not_found", 405: "method_not_allowed", 422: "validation_error"}


def _error_response(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=err(request_id=current_request_id(), code=code, message=message, details=details),
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        get_logger().bind(path=request.url.path).info(f"{exc.code}: {exc.message}")
        return _error_response(exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(HTTPException)
    async def _http_error_handler(_: Request, exc: HTTPException) -> JSONResponse:
        code = _HTTP_CODES.get(exc.status_code, "http_error")
        return _error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(422, "validation_error", "request validation failed", exc.errors())

    @app.exception_handler(Exception)
    async def _generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        get_logger().bind(path=request.url.path).opt(exception=exc).error("unhandled error")
        return _error_response(500, "internal_error", "internal server error")
