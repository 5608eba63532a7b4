"""Identity service tests against the in-memory database."""

import pytest

from tradingmind.config import settings
from tradingmind.services.identity import IdentityService
from tradingmind.services.sms import SMSService
from tradingmind.services.verification import VerificationCodeStore
from tradingmind.utils.errors import (
    ConflictError,
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidPhoneError,
    MissingFieldError,
    PasswordValidationError,
    ValidationError,
    VerificationCodeError,
    WrongOldPasswordError,
)
from tradingmind.utils.security import verify_password

PHONE = "13800138000"


@pytest.fixture
def sms():
    return SMSService(store=VerificationCodeStore())


@pytest.fixture
def service(db_session, sms):
    return IdentityService(db_session, sms=sms)


class TestRegister:

    def test_password_is_hashed(self, service):
        user = service.register("trader1", PHONE, "secret123")
        assert user.id is not None
        assert user.password_hash != "secret123"
        assert verify_password("secret123", user.password_hash)

    def test_inputs_are_trimmed(self, service):
        user = service.register("  trader1 ", f" {PHONE} ", "secret123")
        assert user.username == "trader1"
        assert user.phone == PHONE

    @pytest.mark.parametrize("username,phone,password", [
        ("", PHONE, "secret123"),
        ("trader1", "", "secret123"),
        ("trader1", PHONE, ""),
        (None, None, None),
    ])
    def test_missing_fields(self, service, username, phone, password):
        with pytest.raises(MissingFieldError):
            service.register(username, phone, password)

    @pytest.mark.parametrize("phone", ["12800138000", "1380013800", "138001380001", "phone"])
    def test_invalid_phone(self, service, phone):
        with pytest.raises(InvalidPhoneError):
            service.register("trader1", phone, "secret123")

    @pytest.mark.parametrize("username", ["a", "x" * 21])
    def test_username_length(self, service, username):
        with pytest.raises(ValidationError):
            service.register(username, PHONE, "secret123")

    def test_username_bounds_accepted(self, service):
        assert service.register("ab", PHONE, "secret123").username == "ab"
        assert service.register("y" * 20, "13900139000", "secret123").username == "y" * 20

    def test_short_password(self, service):
        with pytest.raises(PasswordValidationError):
            service.register("trader1", PHONE, "12345")

    def test_duplicate_phone(self, service):
        service.register("trader1", PHONE, "secret123")
        with pytest.raises(DuplicateUserError) as exc:
            service.register("trader2", PHONE, "secret123")
        assert isinstance(exc.value, ConflictError)
        assert exc.value.details == {"field": "phone"}

    def test_duplicate_username(self, service):
        service.register("trader1", PHONE, "secret123")
        with pytest.raises(DuplicateUserError) as exc:
            service.register("trader1", "13900139000", "secret123")
        assert exc.value.details == {"field": "username"}

    def test_code_required_when_enabled(self, service, sms, monkeypatch):
        monkeypatch.setattr(settings, "require_sms_verification", True)
        with pytest.raises(MissingFieldError):
            service.register("trader1", PHONE, "secret123")

        with pytest.raises(VerificationCodeError):
            service.register("trader1", PHONE, "secret123", code="123456")

        sms.store.put(PHONE, "123456")
        user = service.register("trader1", PHONE, "secret123", code="123456")
        assert user.id is not None
        assert sms.store.peek(PHONE) is None


class TestQuickRegister:

    def test_generated_username_and_default_password(self, service, sms):
        sms.store.put(PHONE, "123456")
        user = service.quick_register(PHONE, "123456")
        assert user.username.startswith("trader_")
        assert verify_password(settings.default_password, user.password_hash)

    def test_wrong_code(self, service, sms):
        sms.store.put(PHONE, "123456")
        with pytest.raises(VerificationCodeError):
            service.quick_register(PHONE, "000000")

    def test_existing_phone_keeps_code(self, service, sms):
        service.register("trader1", PHONE, "secret123")
        sms.store.put(PHONE, "123456")
        with pytest.raises(DuplicateUserError):
            service.quick_register(PHONE, "123456")
        assert sms.store.peek(PHONE) is not None


class TestLogin:

    def test_success(self, service):
        created = service.register("trader1", PHONE, "secret123")
        assert service.login(PHONE, "secret123").id == created.id

    def test_unknown_phone_and_wrong_password_look_the_same(self, service):
        service.register("trader1", PHONE, "secret123")
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            service.login(PHONE, "nope123")
        with pytest.raises(InvalidCredentialsError) as unknown_phone:
            service.login("13900139000", "secret123")
        assert wrong_password.value.message == unknown_phone.value.message

    def test_missing_fields(self, service):
        with pytest.raises(MissingFieldError):
            service.login(PHONE, "")


class TestProfile:

    def test_change_username(self, service):
        user = service.register("trader1", PHONE, "secret123")
        assert service.change_username(user.id, " renamed ").username == "renamed"
        assert service.get_profile(user.id).username == "renamed"

    def test_change_username_taken(self, service):
        user = service.register("trader1", PHONE, "secret123")
        service.register("trader2", "13900139000", "secret123")
        with pytest.raises(DuplicateUserError):
            service.change_username(user.id, "trader2")

    def test_change_password(self, service):
        user = service.register("trader1", PHONE, "secret123")
        service.change_password(user.id, "secret123", "newpass1")
        assert service.login(PHONE, "newpass1").id == user.id
        with pytest.raises(InvalidCredentialsError):
            service.login(PHONE, "secret123")

    def test_change_password_wrong_old(self, service):
        user = service.register("trader1", PHONE, "secret123")
        with pytest.raises(WrongOldPasswordError):
            service.change_password(user.id, "wrong12", "newpass1")

    def test_change_password_too_short(self, service):
        user = service.register("trader1", PHONE, "secret123")
        with pytest.raises(PasswordValidationError):
            service.change_password(user.id, "secret123", "123")
