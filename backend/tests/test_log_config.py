"""Log redaction tests."""

from tradingmind.log_config import PIIRedactor, mask_phone


def test_redacts_credential_fields():
    event = PIIRedactor()(None, "info", {
        "event": "request",
        "phone": "13800138000",
        "new_password": "secret123",
        "verification_code": "123456",
        "Authorization": "Bearer abc",
        "path": "/api/user/login",
        "status": 200,
    })
    assert event["phone"] == "[REDACTED]"
    assert event["new_password"] == "[REDACTED]"
    assert event["verification_code"] == "[REDACTED]"
    assert event["Authorization"] == "[REDACTED]"
    assert event["path"] == "/api/user/login"
    assert event["status"] == 200


def test_mask_phone():
    assert mask_phone("13800138000") == "138****8000"
    assert mask_phone("") == "***"
    assert mask_phone("123") == "***"
