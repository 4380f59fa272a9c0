"""
Stable JSON envelope for every ``/api/v1`` response and the exception
handlers that map engine errors onto it.

    success: {"success": true,  "data": ..., "meta": {"timestamp", "request_id"}}
    failure: {"success": false, "error": {"code", "message", "details"}, "meta": {...}}
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from asyncpg.exceptions import (
    CheckViolationError,
    ExclusionViolationError,
    ForeignKeyViolationError,
    NotNullViolationError,
    UniqueViolationError,
)
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from SISFO.app_logger import get_logger
from SISFO.errors import SISFOError

log = get_logger("api")

REQUEST_ID_HEADER = "X-Request-ID"


def request_id(request: Request) -> str:
    rid = getattr(request.state, "request_id", None)
    if not rid:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = rid
    return rid


def _meta(request: Request) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id(request),
    }


def success(request: Request, data: Any = None, status_code: int = status.HTTP_200_OK,
            meta: Optional[dict[str, Any]] = None) -> JSONResponse:
    body_meta = _meta(request)
    if meta:
        body_meta.update(meta)
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data), "meta": body_meta},
    )


def failure(request: Request, status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message, "details": jsonable_encoder(details)},
            "meta": _meta(request),
        },
    )


def status_for_message(message: str) -> int:
    """Fallback mapping for untyped errors: conflict and already published are 409."""
    low = message.lower()
    if "conflict" in low or "already published" in low:
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _integrity_status(exc: IntegrityError) -> tuple[int, str, str]:
    orig = getattr(exc, "orig", None)
    # asyncpg errors arrive wrapped by SQLAlchemy's adapter; the driver error is its __cause__
    driver_exc = getattr(orig, "__cause__", None) or orig
    if isinstance(driver_exc, (UniqueViolationError, ExclusionViolationError)):
        return status.HTTP_409_CONFLICT, "4009", "conflict: unique constraint violation"
    if isinstance(driver_exc, ForeignKeyViolationError):
        return status.HTTP_400_BAD_REQUEST, "4001", "referenced record does not exist"
    if isinstance(driver_exc, (NotNullViolationError, CheckViolationError)):
        return status.HTTP_400_BAD_REQUEST, "4001", "constraint violation"

    low = str(orig or exc).lower()
    if "unique constraint" in low or "duplicate key" in low or "exclusion constraint" in low:
        return status.HTTP_409_CONFLICT, "4009", "conflict: unique constraint violation"
    if "foreign key" in low:
        return status.HTTP_400_BAD_REQUEST, "4001", "referenced record does not exist"
    return status.HTTP_400_BAD_REQUEST, "4001", "constraint violation"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SISFOError)
    async def sisfo_error_handler(request: Request, exc: SISFOError):
        if exc.status_code >= 500:
            log.error(
                "%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message,
                exc_info=exc.cause,
            )
        return failure(request, exc.status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details: dict[str, str] = {}
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
            details[".".join(loc) or "request"] = err.get("msg", "invalid value")
        return failure(request, status.HTTP_400_BAD_REQUEST, "4001", "invalid request", details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = {404: "4004", 405: "4005", 409: "4009"}.get(exc.status_code, str(exc.status_code))
        return failure(request, exc.status_code, code, str(exc.detail))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        status_code, code, message = _integrity_status(exc)
        log.warning(
            "IntegrityError on %s %s -> %s: %s",
            request.method, request.url.path, status_code, str(getattr(exc, "orig", exc)),
        )
        return failure(request, status_code, code, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        message = str(exc) or type(exc).__name__
        status_code = status_for_message(message)
        if status_code == status.HTTP_409_CONFLICT:
            return failure(request, status_code, "4009", message)
        log.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return failure(request, status_code, "5001", "internal server error")


__all__ = ["success", "failure", "request_id", "register_exception_handlers", "REQUEST_ID_HEADER"]
