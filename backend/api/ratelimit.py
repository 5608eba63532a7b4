"""Rate limiting configuration for unauthenticated endpoints"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from typing import Optional

from api.config import settings


def get_rate_limit_key(request: Optional[Request] = None) -> str:
    """Get key for rate limiting (handles SlowAPI's no-arg calls during init)"""
    if request is None:
        return "default"
    return get_remote_address(request)


limiter = Limiter(key_func=get_rate_limit_key, enabled=settings.RATE_LIMIT_ENABLED)
