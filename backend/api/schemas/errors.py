"""Response envelope and envelope codes"""
from pydantic import BaseModel
from typing import Any, Optional


class ApiResponse(BaseModel):
    """Every endpoint answers {code, message, data}, with HTTP 200 for handled errors"""
    code: int
    message: str
    data: Optional[Any] = None


class ErrorCode:
    """Envelope codes carried in ApiResponse.code"""

    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    RATE_LIMITED = 429
    INTERNAL_ERROR = 500


def envelope(code: int, message: str, data: Any = None) -> dict:
    return ApiResponse(code=code, message=message, data=data).model_dump()


def ok(data: Any = None, message: str = "Success") -> dict:
    return envelope(ErrorCode.OK, message, data)
