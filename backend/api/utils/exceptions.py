"""Translate domain exceptions into the response envelope"""
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas.errors import ErrorCode, envelope
from tradingmind.utils.errors import TradingMindError

logger = logging.getLogger(__name__)


def _respond(code: int, message: str, data=None) -> JSONResponse:
    # Errors travel in the envelope code; the HTTP status stays 200
    return JSONResponse(status_code=status.HTTP_200_OK, content=envelope(code, message, data))


async def trading_mind_exception_handler(request: Request, exc: TradingMindError):
    """Handle domain exceptions with their own envelope code"""
    if exc.code >= ErrorCode.INTERNAL_ERROR:
        logger.error(f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}")
    return _respond(exc.code, exc.message, exc.details or None)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid parameter: {field}" if field else "Invalid request parameters"
    return _respond(ErrorCode.BAD_REQUEST, message, None)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and method mismatches keep their real HTTP status"""
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(exc.status_code, str(exc.detail), None),
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    return _respond(ErrorCode.RATE_LIMITED, "Too many requests, please try again later", None)


async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all for unexpected errors"""
    logger.exception("Unhandled exception")
    return _respond(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred", None)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(TradingMindError, trading_mind_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
