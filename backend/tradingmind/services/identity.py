"""
Identity service: registration, login and profile changes.

Passwords are hashed here, explicitly, before the user row is written;
plaintext never reaches the repository or the logs.
"""

import secrets
from typing import Optional

from sqlalchemy.orm import Session
from loguru import logger

from tradingmind.config import settings
from tradingmind.db.models import User
from tradingmind.db.repositories import UserRepository
from tradingmind.log_config import mask_phone
from tradingmind.services.sms import SMSService
from tradingmind.utils.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidPhoneError,
    MissingFieldError,
    NotFoundError,
    PasswordValidationError,
    ValidationError,
    VerificationCodeError,
    WrongOldPasswordError,
)
from tradingmind.utils.security import hash_password, is_valid_phone, pwd_context, verify_password

GENERATED_NAME_PREFIX = "trader"


class IdentityService:
    """User accounts backed by UserRepository."""

    def __init__(self, db: Session, sms: Optional[SMSService] = None):
        self.db = db
        self.users = UserRepository(db)
        self.sms = sms

    # ------------------------------------------------------------------
    # validation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_phone(phone: str) -> None:
        if not is_valid_phone(phone):
            raise InvalidPhoneError("Please enter a valid phone number")

    @staticmethod
    def _check_username(username: str) -> None:
        if not settings.username_min_length <= len(username) <= settings.username_max_length:
            raise ValidationError(
                f"Username must be {settings.username_min_length}-{settings.username_max_length} characters"
            )

    @staticmethod
    def _check_password(password: str) -> None:
        if len(password) < settings.password_min_length:
            raise PasswordValidationError(
                f"Password must be at least {settings.password_min_length} characters"
            )

    def _consume_code(self, phone: str, code: Optional[str]) -> None:
        if self.sms is None:
            raise VerificationCodeError("SMS verification is not available")
        result = self.sms.verify_code(phone, code or "")
        if not result["success"]:
            raise VerificationCodeError(result["message"])

    def _generate_username(self) -> str:
        """Unique display name such as trader_3f9a1c."""
        while True:
            candidate = f"{GENERATED_NAME_PREFIX}_{secrets.token_hex(3)}"
            if self.users.get_by_username(candidate) is None:
                return candidate

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------

    def register(
        self,
        username: Optional[str],
        phone: Optional[str],
        password: Optional[str],
        code: Optional[str] = None,
    ) -> User:
        """Create an account. With SMS verification enabled a valid code is required."""
        username = (username or "").strip()
        phone = (phone or "").strip()
        password = password or ""

        if not username or not phone or not password:
            raise MissingFieldError("Username, phone number and password are required")
        if settings.require_sms_verification and not code:
            raise MissingFieldError("Verification code is required")

        self._check_phone(phone)
        self._check_username(username)
        self._check_password(password)

        if settings.require_sms_verification:
            self._consume_code(phone, code)

        user = self.users.create(
            username=username,
            phone=phone,
            password_hash=hash_password(password),
        )
        self.db.commit()
        logger.info(f"Registered user {user.id} ({mask_phone(phone)})")
        return user

    def quick_register(self, phone: Optional[str], code: Optional[str]) -> User:
        """
        Phone-only registration: verify the SMS code, then create the account
        with a generated username and the configured default password.
        """
        phone = (phone or "").strip()
        if not phone or not code:
            raise MissingFieldError("Phone number and verification code are required")
        self._check_phone(phone)

        if self.users.get_by_phone(phone):
            raise DuplicateUserError("Phone number is already registered, please log in", {"field": "phone"})

        self._consume_code(phone, code)

        user = self.users.create(
            username=self._generate_username(),
            phone=phone,
            password_hash=hash_password(settings.default_password),
        )
        self.db.commit()
        logger.info(f"Quick-registered user {user.id} ({mask_phone(phone)})")
        return user

    def login(self, phone: Optional[str], password: Optional[str]) -> User:
        """Check credentials. Unknown phone and wrong password fail identically."""
        phone = (phone or "").strip()
        if not phone or not password:
            raise MissingFieldError("Phone number and password are required")

        user = self.users.get_by_phone(phone)
        if user is None:
            # Spend the same hashing time as a real comparison
            pwd_context.dummy_verify()
            raise InvalidCredentialsError("Incorrect phone number or password")

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Incorrect phone number or password")

        return user

    def get_profile(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def change_username(self, user_id: int, new_username: Optional[str]) -> User:
        new_username = (new_username or "").strip()
        if not new_username:
            raise MissingFieldError("Username is required")
        self._check_username(new_username)

        user = self.get_profile(user_id)
        if new_username == user.username:
            return user

        taken = self.users.get_by_username(new_username)
        if taken is not None:
            raise DuplicateUserError("Username is already taken", {"field": "username"})

        user = self.users.update(user_id, username=new_username)
        self.db.commit()
        return user

    def change_password(
        self,
        user_id: int,
        old_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        if not old_password or not new_password:
            raise MissingFieldError("Old and new passwords are required")

        user = self.get_profile(user_id)
        if not verify_password(old_password, user.password_hash):
            raise WrongOldPasswordError("Current password is incorrect")

        self._check_password(new_password)

        self.users.update(user_id, password_hash=hash_password(new_password))
        self.db.commit()
        logger.info(f"Password changed for user {user_id}")
