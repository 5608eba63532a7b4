"""
Verification code storage.

Codes are kept in an explicit phone -> {code, expires_at} store. Expiry is
checked when a code is read: an expired entry is removed and reported as
expired, a matching code is removed on use, a wrong code leaves the entry
in place so the user can retry.

The store lives in process memory. Deployments running more than one
process need a shared store behind the same interface.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from loguru import logger

from tradingmind.log_config import mask_phone


@dataclass
class StoredCode:
    code: str
    expires_at: datetime


@dataclass(frozen=True)
class VerificationResult:
    success: bool
    message: str

    def to_dict(self) -> Dict[str, object]:
        return {"success": self.success, "message": self.message}


class VerificationCodeStore:
    """In-memory keyed store of single-use, time-limited codes."""

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.ttl = ttl
        self._clock = clock
        self._codes: Dict[str, StoredCode] = {}

    def put(self, phone: str, code: str) -> StoredCode:
        """Store a code for phone, replacing any earlier one."""
        entry = StoredCode(code=code, expires_at=self._clock() + self.ttl)
        self._codes[phone] = entry
        return entry

    def peek(self, phone: str) -> Optional[StoredCode]:
        return self._codes.get(phone)

    def verify(self, phone: str, code: str) -> VerificationResult:
        stored = self._codes.get(phone)

        if stored is None:
            return VerificationResult(False, "Please request a verification code first")

        if self._clock() > stored.expires_at:
            self._codes.pop(phone, None)
            logger.info(f"Verification code for {mask_phone(phone)} expired")
            return VerificationResult(False, "Verification code has expired, please request a new one")

        if stored.code != (code or "").strip():
            return VerificationResult(False, "Verification code is incorrect")

        self._codes.pop(phone, None)
        return VerificationResult(True, "Verification succeeded")

    def clear(self) -> None:
        self._codes.clear()

    def __len__(self) -> int:
        return len(self._codes)
