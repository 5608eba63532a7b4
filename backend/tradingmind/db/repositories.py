"""
Repository pattern for data access.

Provides clean interfaces for database operations, abstracting SQLAlchemy details.
Each repository handles a single aggregate (User, CheckIn, DailyRecord, UserSettings).
Repositories flush; committing is left to the calling service.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from loguru import logger

from tradingmind.db.models import CheckIn, DailyRecord, User, UserSettings
from tradingmind.utils.datetime import month_range
from tradingmind.utils.errors import (
    ConcurrentCreateError,
    DuplicateCheckInError,
    DuplicateUserError,
    NotFoundError,
)


class UserRepository:
    """Repository for User operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_phone(self, phone: str) -> Optional[User]:
        """Get user by phone."""
        return self.db.query(User).filter(User.phone == phone).first()

    def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        return self.db.query(User).filter(User.username == username).first()

    def create(self, username: str, phone: str, password_hash: str) -> User:
        """Create a new user. Duplicate username or phone raises DuplicateUserError."""
        if self.get_by_username(username):
            raise DuplicateUserError("Username is already taken", {"field": "username"})

        if self.get_by_phone(phone):
            raise DuplicateUserError("Phone number is already registered", {"field": "phone"})

        user = User(username=username, phone=phone, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateUserError("Username or phone number is already registered")
        return user

    def update(self, user_id: int, **kwargs) -> User:
        """Update a user."""
        user = self.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        for key, value in kwargs.items():
            if hasattr(user, key):
                setattr(user, key, value)

        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateUserError("Username is already taken", {"field": "username"})
        return user


class CheckInRepository:
    """Repository for CheckIn operations."""

    def __init__(self, db: Session):
        self.db = db

    def get_for_date(self, user_id: int, date: str) -> Optional[CheckIn]:
        """Get a user's check-in for one date."""
        return (
            self.db.query(CheckIn)
            .filter(CheckIn.user_id == user_id, CheckIn.date == date)
            .first()
        )

    def create(
        self,
        user_id: int,
        date: str,
        kind: str,
        incomplete_tasks: List[Dict[str, str]],
        note: str,
    ) -> CheckIn:
        """
        Insert a check-in.

        The (user_id, date) unique constraint is the arbiter: a concurrent
        insert that loses the race surfaces as DuplicateCheckInError.
        """
        existing = self.get_for_date(user_id, date)
        if existing:
            raise DuplicateCheckInError(
                "Already checked in for this date",
                {"existingRecord": {"id": existing.id, "date": existing.date, "type": existing.kind}},
            )

        checkin = CheckIn(
            user_id=user_id,
            date=date,
            kind=kind,
            is_completed=kind == "completed",
            incomplete_tasks=incomplete_tasks,
            note=note,
            created_at=datetime.utcnow(),
        )
        self.db.add(checkin)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Check-in insert for user {user_id} on {date} lost a uniqueness race")
            raise DuplicateCheckInError("A check-in already exists for this date")
        return checkin

    def get_for_month(self, user_id: int, year: int, month: int) -> List[CheckIn]:
        """Records dated YYYY-MM-01 through YYYY-MM-31 inclusive, oldest first."""
        start, end = month_range(year, month)
        return (
            self.db.query(CheckIn)
            .filter(CheckIn.user_id == user_id, CheckIn.date >= start, CheckIn.date <= end)
            .order_by(CheckIn.date.asc())
            .all()
        )

    def get_all(self, user_id: int) -> List[CheckIn]:
        """Full history, newest first."""
        return (
            self.db.query(CheckIn)
            .filter(CheckIn.user_id == user_id)
            .order_by(CheckIn.date.desc())
            .all()
        )


class DailyRecordRepository:
    """Repository for DailyRecord operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, date: str) -> Optional[DailyRecord]:
        return (
            self.db.query(DailyRecord)
            .filter(DailyRecord.user_id == user_id, DailyRecord.date == date)
            .first()
        )

    def get_or_new(self, user_id: int, date: str) -> DailyRecord:
        """Existing record, or a fresh unsaved one."""
        record = self.get(user_id, date)
        if record is None:
            now = datetime.utcnow()
            record = DailyRecord(
                user_id=user_id,
                date=date,
                trading_plans=[],
                reflection="",
                created_at=now,
                updated_at=now,
            )
        return record

    def save(self, record: DailyRecord) -> DailyRecord:
        """
        Persist the record and bump updated_at.

        Inserting a record another request created first rolls the session
        back and raises ConcurrentCreateError.
        """
        user_id, date = record.user_id, record.date
        record.updated_at = datetime.utcnow()
        self.db.add(record)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Daily record insert for user {user_id} on {date} lost a uniqueness race")
            raise ConcurrentCreateError("Daily record was created by another request", {"date": date})
        return record


class UserSettingsRepository:
    """Repository for UserSettings operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> Optional[UserSettings]:
        return self.db.query(UserSettings).filter(UserSettings.user_id == user_id).first()

    def new(self, user_id: int, **fields: Any) -> UserSettings:
        """Fresh unsaved settings document."""
        now = datetime.utcnow()
        return UserSettings(user_id=user_id, created_at=now, updated_at=now, **fields)

    def save(self, settings: UserSettings) -> UserSettings:
        """Persist the document and bump updated_at; a lost insert race raises ConcurrentCreateError."""
        user_id = settings.user_id
        settings.updated_at = datetime.utcnow()
        self.db.add(settings)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Settings insert for user {user_id} lost a uniqueness race")
            raise ConcurrentCreateError("Settings were created by another request")
        return settings
