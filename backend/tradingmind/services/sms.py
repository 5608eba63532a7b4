"""
SMS service for sending verification codes using Aliyun Dysmsapi.

In mock mode no request leaves the process: a fixed code is stored and
logged instead, which is what development and tests run with.
"""

import base64
import hashlib
import hmac
import json
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from tradingmind.config import settings as app_settings, Settings
from tradingmind.log_config import mask_phone
from tradingmind.services.verification import VerificationCodeStore
from tradingmind.utils.security import is_valid_phone


def _percent_encode(value: str) -> str:
    """RFC 3986 encoding as required by the Aliyun RPC signature."""
    return quote(str(value), safe="~")


def sign_request(params: Dict[str, str], access_key_secret: str, method: str = "GET") -> str:
    """Aliyun RPC v1 signature: HMAC-SHA1 over the canonicalised query string."""
    canonical = "&".join(
        f"{_percent_encode(key)}={_percent_encode(params[key])}" for key in sorted(params)
    )
    string_to_sign = f"{method}&{_percent_encode('/')}&{_percent_encode(canonical)}"
    digest = hmac.new(
        f"{access_key_secret}&".encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("utf-8")


def generate_code(length: int = 6) -> str:
    """Random numeric code with no leading-zero loss."""
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


class SMSService:
    """Send verification codes and check them against the code store."""

    def __init__(
        self,
        store: Optional[VerificationCodeStore] = None,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or app_settings
        self.store = store or VerificationCodeStore(
            ttl=timedelta(minutes=self.config.verification_code_expiry_minutes)
        )
        self._transport = transport

    @property
    def mock_mode(self) -> bool:
        return self.config.sms_mock_mode

    def _credentials_ready(self) -> bool:
        return all([
            self.config.sms_access_key_id,
            self.config.sms_access_key_secret,
            self.config.sms_sign_name,
            self.config.sms_template_code,
        ])

    def status(self) -> Dict[str, Any]:
        """Configuration summary without secrets."""
        return {
            "mock_mode": self.mock_mode,
            "has_access_key": bool(self.config.sms_access_key_id),
            "has_secret": bool(self.config.sms_access_key_secret),
            "has_sign_name": bool(self.config.sms_sign_name),
            "has_template_code": bool(self.config.sms_template_code),
            "sms_ready": not self.mock_mode and self._credentials_ready(),
        }

    def _build_params(self, phone: str, code: str) -> Dict[str, str]:
        params = {
            "AccessKeyId": self.config.sms_access_key_id,
            "Action": "SendSms",
            "Format": "JSON",
            "PhoneNumbers": phone,
            "SignName": self.config.sms_sign_name,
            "SignatureMethod": "HMAC-SHA1",
            "SignatureNonce": uuid.uuid4().hex,
            "SignatureVersion": "1.0",
            "TemplateCode": self.config.sms_template_code,
            "TemplateParam": json.dumps({self.config.sms_template_param_name: code}),
            "Timestamp": datetime.utcnow().strftime("%Y-%m-%dT%H:%M:%SZ"),
            "Version": "2017-05-25",
        }
        params["Signature"] = sign_request(params, self.config.sms_access_key_secret)
        return params

    async def _dispatch(self, phone: str, code: str) -> Dict[str, Any]:
        """Call the provider. Returns {success, message}."""
        params = self._build_params(phone, code)
        try:
            async with httpx.AsyncClient(
                timeout=self.config.sms_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self.config.sms_endpoint, params=params)
                result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"SMS provider request failed: {e}")
            return {"success": False, "message": "Network error, please try again later"}
        except ValueError:
            logger.error("SMS provider returned a non-JSON response")
            return {"success": False, "message": "Unexpected response from SMS provider"}

        if result.get("Code") == "OK":
            logger.info(f"Verification SMS sent to {mask_phone(phone)}: {result.get('BizId')}")
            return {"success": True, "message": "Verification code sent"}

        logger.warning(f"SMS provider rejected send to {mask_phone(phone)}: {result.get('Code')}")
        return {"success": False, "message": result.get("Message") or "Failed to send verification code"}

    async def send_code(self, phone: str) -> Dict[str, Any]:
        """Issue a code for phone and store it on successful dispatch."""
        if not is_valid_phone(phone):
            return {"success": False, "message": "Please enter a valid phone number"}

        if self.mock_mode:
            code = self.config.sms_mock_code
            self.store.put(phone, code)
            logger.info(f"[mock SMS] verification code issued for {mask_phone(phone)}")
            return {"success": True, "message": f"Verification code sent (test mode: {code})"}

        if not self._credentials_ready():
            logger.error("SMS credentials incomplete; set SMS_ACCESS_KEY_ID, SMS_ACCESS_KEY_SECRET, SMS_SIGN_NAME and SMS_TEMPLATE_CODE")
            return {"success": False, "message": "SMS service is not configured"}

        code = generate_code(self.config.verification_code_length)
        result = await self._dispatch(phone, code)
        if result["success"]:
            self.store.put(phone, code)
        return result

    def verify_code(self, phone: str, code: str) -> Dict[str, Any]:
        """Check and consume a code. Returns {success, message}."""
        return self.store.verify(phone, code).to_dict()


_sms_service: Optional[SMSService] = None


def get_sms_service() -> SMSService:
    """Process-wide SMS service; its code store must outlive single requests."""
    global _sms_service
    if _sms_service is None:
        _sms_service = SMSService()
    return _sms_service
