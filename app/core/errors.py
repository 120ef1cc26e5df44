"""
Error codes and JSON error responses.

Every failure leaves the API as {"error": {"message", "code", "details"?}}.
"""

from enum import Enum
from typing import Any, Dict, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    AUTH_ERROR = "AUTH_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    CONFIG_ERROR = "CONFIG_ERROR"
    MISSING_CONFIG = "MISSING_CONFIG"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_STATUS_BY_CODE = {
    ErrorCode.AUTH_ERROR: 401,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.CONFIG_ERROR: 400,
    ErrorCode.MISSING_CONFIG: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.UPSTREAM_ERROR: 502,
}


def status_for_code(code: ErrorCode) -> int:
    return _STATUS_BY_CODE.get(code, 500)


def code_for_status(status_code: int) -> ErrorCode:
    """Best-effort error code for a plain HTTP status."""
    if status_code in (401, 403):
        return ErrorCode.AUTH_ERROR
    if status_code == 404:
        return ErrorCode.NOT_FOUND
    if status_code == 429:
        return ErrorCode.RATE_LIMIT
    if status_code in (400, 409, 422):
        return ErrorCode.INVALID_INPUT
    if status_code in (502, 503, 504):
        return ErrorCode.UPSTREAM_ERROR
    return ErrorCode.UNKNOWN_ERROR


def code_for_upstream_status(status_code: Optional[int]) -> ErrorCode:
    """Map an LLM provider HTTP status to the code we report to clients."""
    if status_code in (401, 403):
        return ErrorCode.AUTH_ERROR
    if status_code == 429:
        return ErrorCode.RATE_LIMIT
    return ErrorCode.UPSTREAM_ERROR


class ApiError(Exception):
    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code or status_for_code(code)
        self.details = details


class UpstreamError(Exception):
    """A call to an LLM provider failed or returned something unusable."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.message = message
        self.status_code = status_code

    @property
    def code(self) -> ErrorCode:
        return code_for_upstream_status(self.status_code)

    def to_api_error(self) -> ApiError:
        code = self.code
        # Provider auth/quota problems are still upstream failures from the caller's point of view
        status_code = 429 if code == ErrorCode.RATE_LIMIT else 502
        return ApiError(self.message, code, status_code=status_code)


def error_body(message: str, code: ErrorCode, details: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"message": message, "code": code.value}
    if details is not None and not settings.is_production:
        error["details"] = details
    return {"error": error}


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.code.value, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.code, exc.details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    details = None if isinstance(exc.detail, str) else exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, code_for_status(exc.status_code), details),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(
        status_code=400,
        content=error_body(message, ErrorCode.INVALID_INPUT, [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors
        ]),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content=error_body(
            "Rate limit exceeded. Please wait a few minutes before trying again.",
            ErrorCode.RATE_LIMIT,
            str(exc.detail),
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content=error_body("Internal server error", ErrorCode.UNKNOWN_ERROR))
    return JSONResponse(status_code=500, content=error_body(str(exc), ErrorCode.UNKNOWN_ERROR))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
