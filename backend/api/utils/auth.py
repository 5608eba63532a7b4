"""Authentication utilities: JWT issuance and the bearer-token gate"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt

from api.config import settings
from tradingmind.utils.errors import (
    TokenExpiredError,
    TokenInvalidError,
    UnauthenticatedError,
    UnexpectedError,
)


class TokenStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of decoding a bearer token; user_id is set only when VALID"""
    status: TokenStatus
    user_id: Optional[int] = None
    reason: str = ""

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token carrying the user id"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "user_id": user_id,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenVerification:
    """Decode and verify JWT token without raising"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        return TokenVerification(TokenStatus.EXPIRED, reason="token expired")
    except JWTError as e:
        return TokenVerification(TokenStatus.MALFORMED, reason=str(e))
    except Exception as e:  # noqa: BLE001
        return TokenVerification(TokenStatus.UNKNOWN, reason=f"{e.__class__.__name__}: {e}")

    user_id = payload.get("user_id")
    if user_id is None:
        return TokenVerification(TokenStatus.MALFORMED, reason="user_id claim missing")
    try:
        return TokenVerification(TokenStatus.VALID, user_id=int(user_id))
    except (TypeError, ValueError):
        return TokenVerification(TokenStatus.MALFORMED, reason="user_id claim is not an integer")


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token from an Authorization header; the 'Bearer ' prefix is optional"""
    if not authorization:
        return None
    token = authorization[7:] if authorization.startswith("Bearer ") else authorization
    token = token.strip()
    return token or None


async def get_current_user_id(request: Request) -> int:
    """
    Auth gate dependency.

    Resolves the bearer token to a user id and stores it on request.state.
    No server-side session exists; logging out is the client discarding
    its token.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise UnauthenticatedError("Please log in first (no token provided)")

    result = decode_access_token(token)
    if result.status is TokenStatus.EXPIRED:
        raise TokenExpiredError("Login has expired, please log in again")
    if result.status is TokenStatus.MALFORMED:
        raise TokenInvalidError("Invalid token, please log in again")
    if result.status is TokenStatus.UNKNOWN:
        raise UnexpectedError(f"Authentication failed: {result.reason}")

    request.state.user_id = result.user_id
    return result.user_id
