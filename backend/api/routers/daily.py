"""Daily records router: per-date trading plans and reflection"""
from fastapi import APIRouter, Depends

from api.dependencies import get_daily_service
from api.schemas.errors import ok
from api.schemas.settings import DailyRecordUpdate, ItemPayload, ReflectionUpdate, dump_items
from api.utils.auth import get_current_user_id
from tradingmind.services.daily_service import DailyRecordService, serialize_record

router = APIRouter(prefix="/api/daily", tags=["daily"])


@router.get("/{date}")
async def get_record(
    date: str,
    user_id: int = Depends(get_current_user_id),
    service: DailyRecordService = Depends(get_daily_service),
):
    """Record for date; an empty one with exists=false when nothing is stored"""
    return ok(service.get(user_id, date))


@router.put("/{date}")
async def save_record(
    date: str,
    body: DailyRecordUpdate,
    user_id: int = Depends(get_current_user_id),
    service: DailyRecordService = Depends(get_daily_service),
):
    record = service.save(user_id, date, dump_items(body.trading_plans), body.reflection)
    return ok(serialize_record(record), "Saved")


@router.post("/{date}/plan")
async def add_plan(
    date: str,
    body: ItemPayload,
    user_id: int = Depends(get_current_user_id),
    service: DailyRecordService = Depends(get_daily_service),
):
    item, record = service.add_plan(user_id, date, body.title, body.content)
    return ok({"item": item.to_dict(), "tradingPlans": list(record.trading_plans)}, "Plan added")


@router.put("/{date}/plan/{item_id}")
async def update_plan(
    date: str,
    item_id: str,
    body: ItemPayload,
    user_id: int = Depends(get_current_user_id),
    service: DailyRecordService = Depends(get_daily_service),
):
    item, record = service.update_plan(user_id, date, item_id, body.title, body.content)
    return ok({"item": item.to_dict(), "tradingPlans": list(record.trading_plans)}, "Plan updated")


@router.delete("/{date}/plan/{item_id}")
async def delete_plan(
    date: str,
    item_id: str,
    user_id: int = Depends(get_current_user_id),
    service: DailyRecordService = Depends(get_daily_service),
):
    record = service.delete_plan(user_id, date, item_id)
    return ok({"tradingPlans": list(record.trading_plans)}, "Plan deleted")


@router.put("/{date}/reflection")
async def save_reflection(
    date: str,
    body: ReflectionUpdate,
    user_id: int = Depends(get_current_user_id),
    service: DailyRecordService = Depends(get_daily_service),
):
    record = service.save_reflection(user_id, date, body.reflection)
    return ok({"reflection": record.reflection}, "Reflection saved")
