"""
Custom exceptions for Trading Mind.

Provides domain-specific exceptions with clear error messages and
support for structured error handling. Every exception carries the
envelope code the API answers with.
"""

from typing import Optional, Dict, Any


class TradingMindError(Exception):
    """Base exception for all Trading Mind errors."""

    code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(TradingMindError):
    """Data validation failed."""
    code = 400


class MissingFieldError(ValidationError):
    """A required field is missing or blank."""
    pass


class InvalidPhoneError(ValidationError):
    """Phone number does not match the mainland mobile pattern."""
    pass


class InvalidDateError(ValidationError):
    """Date is not a real calendar date in YYYY-MM-DD form."""
    pass


class InvalidKindError(ValidationError):
    """Check-in kind is not one of the accepted values."""
    pass


class PasswordValidationError(ValidationError):
    """Password does not meet requirements."""
    pass


class VerificationCodeError(ValidationError):
    """Invalid or expired verification code."""
    pass


# ============================================================================
# Record Errors
# ============================================================================

class NotFoundError(TradingMindError):
    """Requested record or sub-item does not exist."""
    code = 404


class ConflictError(TradingMindError):
    """Attempted to create a record that violates a uniqueness rule."""
    code = 400


class DuplicateUserError(ConflictError):
    """Username or phone already registered."""
    pass


class DuplicateCheckInError(ConflictError):
    """A check-in already exists for this user and date."""
    pass


class ConcurrentCreateError(ConflictError):
    """Another request created the same per-user document first."""
    pass


# ============================================================================
# Authentication Errors
# ============================================================================

class AuthenticationError(TradingMindError):
    """Authentication failed."""
    code = 401


class UnauthenticatedError(AuthenticationError):
    """No credentials were supplied."""
    pass


class TokenExpiredError(AuthenticationError):
    """Bearer token has expired."""
    pass


class TokenInvalidError(AuthenticationError):
    """Bearer token is malformed or its signature does not verify."""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Invalid phone or password."""
    pass


class WrongOldPasswordError(AuthenticationError):
    """Current password supplied to a password change is wrong."""
    pass


# ============================================================================
# Unexpected Errors
# ============================================================================

class UnexpectedError(TradingMindError):
    """Storage failure or other unexpected condition."""
    code = 500
