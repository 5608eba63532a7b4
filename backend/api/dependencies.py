"""FastAPI dependencies"""
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from tradingmind.db.session import get_db as get_db_session, close_db_session
from tradingmind.services.checkin_service import CheckInService
from tradingmind.services.daily_service import DailyRecordService
from tradingmind.services.identity import IdentityService
from tradingmind.services.settings_service import SettingsService
from tradingmind.services.sms import SMSService, get_sms_service


def get_db() -> Generator[Session, None, None]:
    """Get database session"""
    db = get_db_session()
    try:
        yield db
    finally:
        close_db_session(db)


def get_identity_service(
    db: Session = Depends(get_db),
    sms: SMSService = Depends(get_sms_service),
) -> IdentityService:
    return IdentityService(db, sms=sms)


def get_checkin_service(db: Session = Depends(get_db)) -> CheckInService:
    return CheckInService(db)


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_daily_service(db: Session = Depends(get_db)) -> DailyRecordService:
    return DailyRecordService(db)
