"""Password hashing and credential validation helpers."""

import re

from passlib.context import CryptContext

from tradingmind.config import settings

PHONE_PATTERN = re.compile(r"^1[3-9]\d{9}$")

# bcrypt with a fixed cost factor; verify() compares digests in constant time
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password"""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised hash format
        return False


def is_valid_phone(phone: str) -> bool:
    return bool(phone) and bool(PHONE_PATTERN.match(phone))
