"""User and authentication schemas"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys from clients"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserRegister(CamelModel):
    username: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    code: Optional[str] = None


class QuickRegister(CamelModel):
    phone: Optional[str] = None
    code: Optional[str] = None


class UserLogin(CamelModel):
    phone: Optional[str] = None
    password: Optional[str] = None


class SendCodeRequest(CamelModel):
    phone: Optional[str] = None


class UsernameUpdate(CamelModel):
    username: Optional[str] = None


class PasswordUpdate(CamelModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


def user_payload(user, include_created: bool = False) -> dict:
    data = {"id": user.id, "username": user.username, "phone": user.phone}
    if include_created:
        data["createdAt"] = user.created_at.isoformat() if user.created_at else None
    return data
