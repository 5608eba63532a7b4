"""
SQLAlchemy 2.0 database models for Trading Mind.

Every table other than users is scoped to exactly one user. Titled item
lists (plans, homework) are stored as JSON arrays of {id, title, content}
inside their parent row. Timestamps are set explicitly by the repositories.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    """User identified by phone, with a bcrypt password hash."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(20), unique=True, index=True, nullable=False)
    phone = Column(String(11), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"


class CheckIn(Base):
    """One calendar-day check-in; at most one per (user, date)."""

    __tablename__ = "checkins"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uix_checkin_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    kind = Column(String(16), nullable=False)  # completed, incomplete
    is_completed = Column(Boolean, nullable=False, default=False)
    incomplete_tasks = Column(JSON, nullable=False, default=list)
    note = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<CheckIn(id={self.id}, user_id={self.user_id}, date={self.date}, kind={self.kind})>"


class DailyRecord(Base):
    """Per-user, per-date trading plans and reflection."""

    __tablename__ = "daily_records"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uix_daily_record_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(String(10), nullable=False)
    trading_plans = Column(JSON, nullable=False, default=list)
    reflection = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<DailyRecord(id={self.id}, user_id={self.user_id}, date={self.date})>"


class UserSettings(Base):
    """Singleton settings document per user: principles, homework, plans."""

    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    preset_principles = Column(JSON, nullable=False, default=list)
    custom_principles = Column(JSON, nullable=False, default=list)
    trading_homework = Column(JSON, nullable=False, default=list)
    trading_plans = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<UserSettings(id={self.id}, user_id={self.user_id})>"
