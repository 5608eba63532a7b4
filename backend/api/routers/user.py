"""User router: verification codes, registration, login and profile"""
from fastapi import APIRouter, Depends, Request

from api.config import settings
from api.dependencies import get_identity_service
from api.ratelimit import limiter
from api.schemas.auth import (
    PasswordUpdate,
    QuickRegister,
    SendCodeRequest,
    UserLogin,
    UserRegister,
    UsernameUpdate,
    user_payload,
)
from api.schemas.errors import ok
from api.utils.auth import create_access_token, get_current_user_id
from tradingmind.services.identity import IdentityService
from tradingmind.services.sms import SMSService, get_sms_service
from tradingmind.utils.errors import MissingFieldError, ValidationError

router = APIRouter(prefix="/api/user", tags=["user"])


def _session_payload(user) -> dict:
    return {"user": user_payload(user), "token": create_access_token(user.id)}


@router.post("/send-code")
@limiter.limit(settings.SEND_CODE_RATE_LIMIT)
async def send_code(
    request: Request,
    body: SendCodeRequest,
    sms: SMSService = Depends(get_sms_service),
):
    """Send a verification code (rate limited: 3 per minute)"""
    phone = (body.phone or "").strip()
    if not phone:
        raise MissingFieldError("Phone number is required")

    result = await sms.send_code(phone)
    if not result["success"]:
        raise ValidationError(result["message"])
    return ok(message=result["message"])


@router.post("/register")
@limiter.limit(settings.REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    body: UserRegister,
    service: IdentityService = Depends(get_identity_service),
):
    """Register and log in (rate limited: 5 per minute)"""
    user = service.register(body.username, body.phone, body.password, body.code)
    return ok(_session_payload(user), "Registration successful")


@router.post("/quick-register")
@limiter.limit(settings.REGISTER_RATE_LIMIT)
async def quick_register(
    request: Request,
    body: QuickRegister,
    service: IdentityService = Depends(get_identity_service),
):
    """Register with phone and SMS code only"""
    user = service.quick_register(body.phone, body.code)
    return ok(_session_payload(user), "Registration successful")


@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: UserLogin,
    service: IdentityService = Depends(get_identity_service),
):
    """Login with phone and password (rate limited: 10 per minute)"""
    user = service.login(body.phone, body.password)
    return ok(_session_payload(user), "Login successful")


@router.post("/logout")
async def logout(user_id: int = Depends(get_current_user_id)):
    """Tokens are stateless; the client discards its copy"""
    return ok(message="Logged out")


@router.get("/info")
async def info(
    user_id: int = Depends(get_current_user_id),
    service: IdentityService = Depends(get_identity_service),
):
    user = service.get_profile(user_id)
    return ok(user_payload(user, include_created=True))


@router.put("/username")
async def update_username(
    body: UsernameUpdate,
    user_id: int = Depends(get_current_user_id),
    service: IdentityService = Depends(get_identity_service),
):
    user = service.change_username(user_id, body.username)
    return ok(user_payload(user), "Username updated")


@router.put("/password")
async def update_password(
    body: PasswordUpdate,
    user_id: int = Depends(get_current_user_id),
    service: IdentityService = Depends(get_identity_service),
):
    service.change_password(user_id, body.old_password, body.new_password)
    return ok(message="Password updated")
