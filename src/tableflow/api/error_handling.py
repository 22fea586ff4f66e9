from __future__ import annotations

from typing import Any, TypeVar, cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tableflow.api.middleware.request_id import get_request_id
from tableflow.application.errors import ErrorKind
from tableflow.application.result import OperationError, OperationResult

T = TypeVar("T")

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAVAILABLE: 422,
    ErrorKind.INTERNAL: 500,
}


class OperationFailedError(Exception):
    def __init__(self, error: OperationError) -> None:
        super().__init__(error.message)
        self.error = error


def unwrap_or_raise(result: OperationResult[T]) -> T:
    if result.success:
        return cast(T, result.data)
    if result.error is None:
        raise RuntimeError("failed result without error")
    raise OperationFailedError(result.error)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


async def _operation_failed_handler(_: Request, exc: Exception) -> JSONResponse:
    error = cast(OperationFailedError, exc).error
    return _error_response(
        status_code=STATUS_BY_KIND.get(error.kind, 500),
        code=error.code,
        message=error.message,
        details=dict(error.details),
    )


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": _jsonable_errors(validation_exc.errors())},
    )


def _jsonable_errors(errors: Any) -> list[dict[str, Any]]:
    # pydantic may put exception objects under "ctx".
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OperationFailedError, _operation_failed_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
