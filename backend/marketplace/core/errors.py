"""
Exception handlers that render every failure in the API's error envelope:

    {"success": false, "message": "...", "errors": [{"param": ..., "msg": ...}]}

Services keep raising HTTPException; only the response shape is decided here.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.core.logging import get_logger
from marketplace.schemas.common import ErrorDetail, ErrorResponse

logger = get_logger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def _param_from_loc(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def _clean_msg(msg: str) -> str:
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX):]
    return msg


def _envelope(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _envelope(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        ErrorDetail(param=_param_from_loc(tuple(err.get("loc", ()))), msg=_clean_msg(err.get("msg", "")))
        for err in exc.errors()
    ]
    logger.info("request_validation_failed", fields=[e.param for e in errors])
    return _envelope(422, "Validation failed", errors=errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", error=str(exc), exc_type=type(exc).__name__)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
