"""Check-in endpoint tests."""

from datetime import date, timedelta

import pytest


def iso(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def test_check_in_today(client, auth_headers):
    body = client.post("/api/checkin", json={"type": "completed"}, headers=auth_headers).json()
    assert body["code"] == 200
    assert body["data"]["date"] == iso(date.today())
    assert body["data"]["isCompleted"] is True

    status = client.get("/api/checkin/today", headers=auth_headers).json()["data"]
    assert status["hasCheckedIn"] is True
    assert status["record"]["id"] == body["data"]["id"]


def test_today_status_is_read_only(client, auth_headers):
    first = client.get("/api/checkin/today", headers=auth_headers).json()
    second = client.get("/api/checkin/today", headers=auth_headers).json()
    assert first == second
    assert first["data"] == {"hasCheckedIn": False, "record": None}


def test_incomplete_check_in_with_tasks(client, auth_headers):
    body = client.post(
        "/api/checkin",
        json={
            "type": "incomplete",
            "incompleteTasks": [{"title": "Position size", "content": "went all in"}],
            "note": "lesson learned",
            "date": "2024-03-01",
        },
        headers=auth_headers,
    ).json()
    assert body["code"] == 200
    data = body["data"]
    assert data["type"] == "incomplete"
    assert data["isCompleted"] is False
    assert data["incompleteTasks"] == [{"title": "Position size", "content": "went all in"}]
    assert data["note"] == "lesson learned"


def test_duplicate_check_in(client, auth_headers):
    client.post("/api/checkin", json={"type": "completed", "date": "2024-03-01"}, headers=auth_headers)
    body = client.post("/api/checkin", json={"type": "incomplete", "date": "2024-03-01"}, headers=auth_headers).json()
    assert body["code"] == 400
    assert body["data"]["existingRecord"]["type"] == "completed"


def test_invalid_type_and_date(client, auth_headers):
    assert client.post("/api/checkin", json={"type": "maybe"}, headers=auth_headers).json()["code"] == 400
    assert client.post("/api/checkin", json={}, headers=auth_headers).json()["code"] == 400
    body = client.post("/api/checkin", json={"type": "completed", "date": "2024-13-01"}, headers=auth_headers).json()
    assert body["code"] == 400


def test_month_listing(client, auth_headers):
    for day in ["2024-03-05", "2024-03-01", "2024-04-01"]:
        client.post("/api/checkin", json={"type": "completed", "date": day}, headers=auth_headers)

    body = client.get("/api/checkin", params={"year": 2024, "month": 3}, headers=auth_headers).json()
    assert body["code"] == 200
    data = body["data"]
    assert [r["date"] for r in data["records"]] == ["2024-03-01", "2024-03-05"]
    assert data["total"] == 2
    assert data["completedCount"] == 2
    assert data["incompleteCount"] == 0


@pytest.mark.parametrize("month", [0, 13])
def test_month_listing_rejects_bad_month(client, auth_headers, month):
    body = client.get("/api/checkin", params={"year": 2024, "month": month}, headers=auth_headers).json()
    assert body["code"] == 400


def test_records_are_per_user(client, auth_headers):
    client.post("/api/checkin", json={"type": "completed", "date": "2024-03-01"}, headers=auth_headers)

    other = client.post(
        "/api/user/register",
        json={"username": "trader2", "phone": "13900139000", "password": "secret123"},
    ).json()["data"]
    other_headers = {"Authorization": f"Bearer {other['token']}"}

    body = client.get("/api/checkin", params={"year": 2024, "month": 3}, headers=other_headers).json()
    assert body["data"]["total"] == 0


def test_stats_with_yesterday_grace(client, auth_headers):
    today = date.today()
    for offset in (1, 2, 3):
        client.post(
            "/api/checkin",
            json={"type": "completed", "date": iso(today - timedelta(days=offset))},
            headers=auth_headers,
        )
    client.post(
        "/api/checkin",
        json={"type": "incomplete", "date": iso(today - timedelta(days=10))},
        headers=auth_headers,
    )

    stats = client.get("/api/checkin/stats", headers=auth_headers).json()["data"]
    assert stats["streak"] == 3
    assert stats["overall"] == {"total": 4, "completed": 3, "incomplete": 1}

    client.post("/api/checkin", json={"type": "incomplete"}, headers=auth_headers)
    stats = client.get("/api/checkin/stats", headers=auth_headers).json()["data"]
    assert stats["streak"] == 4
