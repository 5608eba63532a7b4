"""Settings and daily record schemas"""
from typing import List, Optional

from pydantic import Field

from api.schemas.auth import CamelModel


class ItemPayload(CamelModel):
    """A titled entry; blank titles are rejected or dropped by the service"""
    title: Optional[str] = None
    content: Optional[str] = None


class PresetPrinciple(CamelModel):
    index: int = Field(..., ge=0)
    is_selected: bool = False


class SettingsUpdate(CamelModel):
    preset_principles: Optional[List[PresetPrinciple]] = None
    custom_principles: Optional[List[str]] = None
    trading_homework: Optional[List[ItemPayload]] = None
    trading_plans: Optional[List[ItemPayload]] = None


class PrinciplesUpdate(CamelModel):
    preset_principles: Optional[List[PresetPrinciple]] = None
    custom_principles: Optional[List[str]] = None


class HomeworkReplace(CamelModel):
    trading_homework: Optional[List[ItemPayload]] = None


class PlansReplace(CamelModel):
    trading_plans: Optional[List[ItemPayload]] = None


class DailyRecordUpdate(CamelModel):
    trading_plans: Optional[List[ItemPayload]] = None
    reflection: Optional[str] = None


class ReflectionUpdate(CamelModel):
    reflection: Optional[str] = None


def dump_items(items: Optional[List[ItemPayload]]):
    if items is None:
        return None
    return [item.model_dump() for item in items]


def dump_presets(presets: Optional[List[PresetPrinciple]]):
    if presets is None:
        return None
    return [p.model_dump() for p in presets]
