"""Check-in service tests with an injected "today"."""

from datetime import date

import pytest

from tradingmind.db.models import CheckIn, User
from tradingmind.db.repositories import CheckInRepository
from tradingmind.services.checkin_service import CheckInService
from tradingmind.utils.errors import (
    ConflictError,
    DuplicateCheckInError,
    InvalidDateError,
    InvalidKindError,
    MissingFieldError,
    ValidationError,
)

TODAY = date(2024, 3, 15)


@pytest.fixture
def user(db_session):
    user = User(username="trader1", phone="13800138000", password_hash="x")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def service(db_session):
    return CheckInService(db_session, today=lambda: TODAY)


class TestRecordCheckIn:

    def test_defaults_to_today(self, service, user):
        record = service.record_check_in(user.id, "completed")
        assert record.date == "2024-03-15"
        assert record.is_completed is True
        assert record.incomplete_tasks == []
        assert record.note == ""

    def test_incomplete_with_tasks(self, service, user):
        record = service.record_check_in(
            user.id,
            "incomplete",
            tasks=[{"title": "Stop loss", "content": "ignored it"}, {"title": None}],
            note="chased a breakout",
        )
        assert record.is_completed is False
        assert record.incomplete_tasks == [
            {"title": "Stop loss", "content": "ignored it"},
            {"title": "", "content": ""},
        ]
        assert record.note == "chased a breakout"

    def test_explicit_date(self, service, user):
        assert service.record_check_in(user.id, "completed", date_str="2024-03-01").date == "2024-03-01"

    @pytest.mark.parametrize("value", ["2024-02-30", "2024-3-1", "yesterday"])
    def test_invalid_date(self, service, user, value):
        with pytest.raises(InvalidDateError):
            service.record_check_in(user.id, "completed", date_str=value)

    def test_unknown_kind(self, service, user):
        with pytest.raises(InvalidKindError):
            service.record_check_in(user.id, "skipped")

    def test_missing_kind(self, service, user):
        with pytest.raises(MissingFieldError):
            service.record_check_in(user.id, None)

    def test_duplicate_carries_existing_record(self, service, user):
        first = service.record_check_in(user.id, "completed")
        with pytest.raises(DuplicateCheckInError) as exc:
            service.record_check_in(user.id, "incomplete")
        assert isinstance(exc.value, ConflictError)
        assert exc.value.details["existingRecord"] == {
            "id": first.id,
            "date": "2024-03-15",
            "type": "completed",
        }

    def test_same_date_for_other_user_allowed(self, service, user, db_session):
        other = User(username="trader2", phone="13900139000", password_hash="x")
        db_session.add(other)
        db_session.commit()
        service.record_check_in(user.id, "completed")
        assert service.record_check_in(other.id, "completed").user_id == other.id

    def test_lost_race_maps_to_conflict(self, service, user, db_session, monkeypatch):
        service.record_check_in(user.id, "completed")
        # Simulate a concurrent request that passed the existence check
        monkeypatch.setattr(CheckInRepository, "get_for_date", lambda self, user_id, date: None)

        with pytest.raises(DuplicateCheckInError):
            service.record_check_in(user.id, "incomplete")

        assert db_session.query(CheckIn).filter(CheckIn.user_id == user.id).count() == 1


class TestQueries:

    def test_list_month(self, service, user):
        for day, kind in [("2024-03-02", "incomplete"), ("2024-03-01", "completed"), ("2024-02-29", "completed")]:
            service.record_check_in(user.id, kind, date_str=day)

        result = service.list_month(user.id, 2024, 3)
        assert [r["date"] for r in result["records"]] == ["2024-03-01", "2024-03-02"]
        assert result["total"] == 2
        assert result["completedCount"] == 1
        assert result["incompleteCount"] == 1

        february = service.list_month(user.id, 2024, 2)
        assert [r["date"] for r in february["records"]] == ["2024-02-29"]

    def test_list_month_defaults_to_current(self, service, user):
        service.record_check_in(user.id, "completed")
        result = service.list_month(user.id)
        assert (result["year"], result["month"]) == (2024, 3)
        assert result["total"] == 1

    @pytest.mark.parametrize("month", [0, 13])
    def test_list_month_rejects_bad_month(self, service, user, month):
        with pytest.raises(ValidationError):
            service.list_month(user.id, 2024, month)

    def test_today_status(self, service, user):
        assert service.today_status(user.id) == {"hasCheckedIn": False, "record": None}
        service.record_check_in(user.id, "completed")
        status = service.today_status(user.id)
        assert status["hasCheckedIn"] is True
        assert status["record"]["type"] == "completed"

    def test_stats(self, service, user):
        for day in ["2024-02-28", "2024-03-13", "2024-03-14"]:
            service.record_check_in(user.id, "completed", date_str=day)
        service.record_check_in(user.id, "incomplete", date_str="2024-03-15")

        stats = service.compute_stats(user.id).to_dict()
        assert stats["monthly"] == {"total": 3, "completed": 2, "incomplete": 1}
        assert stats["overall"] == {"total": 4, "completed": 3, "incomplete": 1}
        assert stats["streak"] == 3
