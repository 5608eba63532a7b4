"""User settings router: principles, homework checklist and plan template"""
from fastapi import APIRouter, Depends

from api.dependencies import get_settings_service
from api.schemas.errors import ok
from api.schemas.settings import (
    HomeworkReplace,
    ItemPayload,
    PlansReplace,
    PrinciplesUpdate,
    SettingsUpdate,
    dump_items,
    dump_presets,
)
from api.utils.auth import get_current_user_id
from tradingmind.services.settings_service import (
    HOMEWORK,
    PLANS,
    SettingsService,
    serialize_settings,
)
from tradingmind.utils.errors import ValidationError

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("")
async def get_settings(
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    """Settings document, created with defaults on first access"""
    return ok(serialize_settings(service.get(user_id)))


@router.put("")
async def update_settings(
    body: SettingsUpdate,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    """Replace only the fields present in the body"""
    settings = service.update(
        user_id,
        preset_principles=dump_presets(body.preset_principles),
        custom_principles=body.custom_principles,
        trading_homework=dump_items(body.trading_homework),
        trading_plans=dump_items(body.trading_plans),
    )
    return ok(serialize_settings(settings), "Settings saved")


@router.put("/principles")
async def update_principles(
    body: PrinciplesUpdate,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    settings = service.update_principles(
        user_id,
        dump_presets(body.preset_principles),
        body.custom_principles,
    )
    data = serialize_settings(settings)
    return ok(
        {"presetPrinciples": data["presetPrinciples"], "customPrinciples": data["customPrinciples"]},
        "Principles saved",
    )


@router.put("/homework")
async def replace_homework(
    body: HomeworkReplace,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    if body.trading_homework is None:
        raise ValidationError("tradingHomework must be a list")
    settings = service.replace_items(user_id, HOMEWORK, dump_items(body.trading_homework))
    return ok({"tradingHomework": serialize_settings(settings)["tradingHomework"]}, "Homework saved")


@router.post("/homework")
async def add_homework(
    body: ItemPayload,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    item, settings = service.add_item(user_id, HOMEWORK, body.title, body.content)
    return ok(
        {"item": item.to_dict(), "tradingHomework": serialize_settings(settings)["tradingHomework"]},
        "Homework item added",
    )


@router.put("/homework/{item_id}")
async def update_homework(
    item_id: str,
    body: ItemPayload,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    item, settings = service.update_item(user_id, HOMEWORK, item_id, body.title, body.content)
    return ok(
        {"item": item.to_dict(), "tradingHomework": serialize_settings(settings)["tradingHomework"]},
        "Homework item updated",
    )


@router.delete("/homework/{item_id}")
async def delete_homework(
    item_id: str,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    settings = service.delete_item(user_id, HOMEWORK, item_id)
    return ok({"tradingHomework": serialize_settings(settings)["tradingHomework"]}, "Homework item deleted")


@router.put("/plans")
async def replace_plans(
    body: PlansReplace,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    if body.trading_plans is None:
        raise ValidationError("tradingPlans must be a list")
    settings = service.replace_items(user_id, PLANS, dump_items(body.trading_plans))
    return ok({"tradingPlans": serialize_settings(settings)["tradingPlans"]}, "Plan template saved")


@router.post("/plans")
async def add_plan(
    body: ItemPayload,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    item, settings = service.add_item(user_id, PLANS, body.title, body.content)
    return ok(
        {"item": item.to_dict(), "tradingPlans": serialize_settings(settings)["tradingPlans"]},
        "Plan item added",
    )


@router.put("/plans/{item_id}")
async def update_plan(
    item_id: str,
    body: ItemPayload,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    item, settings = service.update_item(user_id, PLANS, item_id, body.title, body.content)
    return ok(
        {"item": item.to_dict(), "tradingPlans": serialize_settings(settings)["tradingPlans"]},
        "Plan item updated",
    )


@router.delete("/plans/{item_id}")
async def delete_plan(
    item_id: str,
    user_id: int = Depends(get_current_user_id),
    service: SettingsService = Depends(get_settings_service),
):
    settings = service.delete_item(user_id, PLANS, item_id)
    return ok({"tradingPlans": serialize_settings(settings)["tradingPlans"]}, "Plan item deleted")
