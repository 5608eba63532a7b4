"""Check-in router"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_checkin_service
from api.schemas.checkin import CheckInCreate
from api.schemas.errors import ok
from api.utils.auth import get_current_user_id
from tradingmind.services.checkin_service import CheckInService, serialize_checkin

router = APIRouter(prefix="/api/checkin", tags=["checkin"])


@router.post("")
async def create_checkin(
    body: CheckInCreate,
    user_id: int = Depends(get_current_user_id),
    service: CheckInService = Depends(get_checkin_service),
):
    """Check in for today, or for body.date when given"""
    tasks = [task.model_dump() for task in body.incomplete_tasks or []]
    record = service.record_check_in(user_id, body.type, tasks, body.note, body.date)
    return ok(serialize_checkin(record), "Check-in recorded")


@router.get("")
async def list_checkins(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    user_id: int = Depends(get_current_user_id),
    service: CheckInService = Depends(get_checkin_service),
):
    """Records of one month, current month by default"""
    return ok(service.list_month(user_id, year, month))


@router.get("/today")
async def today_status(
    user_id: int = Depends(get_current_user_id),
    service: CheckInService = Depends(get_checkin_service),
):
    return ok(service.today_status(user_id))


@router.get("/stats")
async def stats(
    user_id: int = Depends(get_current_user_id),
    service: CheckInService = Depends(get_checkin_service),
):
    """Monthly and overall counts plus the current streak"""
    return ok(service.compute_stats(user_id).to_dict())
