import random
from datetime import datetime, timezone

import pytest

from app.config import settings
from app.modules.signup_windows.service import SignupWindowService
from tests.conftest import ADMIN_ID, HOUSE_ID
from tests.fakes import FakePushClient

# Sunday 2026-01-04; the weekend after next is Jan 16-18
SUNDAY = datetime(2026, 1, 4, 0, 0, tzinfo=timezone.utc)

SCHEDULE = "/api/v1/signup-windows/schedule"
OPEN_DUE = "/api/v1/signup-windows/open-due"


@pytest.fixture
def service(db, push):
    return SignupWindowService(db, push, rng=random.Random(42))


def _add_houses(db):
    db.rows("houses").extend([
        {"id": "house-nobeds", "name": "No Beds", "settings": {"bedSignupEnabled": True}},
        {"id": "house-off", "name": "Off", "settings": {"bedSignupEnabled": False}},
        {"id": "house-manual", "name": "Manual", "settings": {"bedSignupEnabled": True, "autoScheduleWindows": False}},
        {"id": "house-nosettings", "name": "Bare", "settings": None},
    ])


def _window(window_id="win-1", opens_at="2026-01-05T15:00:00+00:00", status="scheduled", house_id=HOUSE_ID):
    return {
        "id": window_id,
        "house_id": house_id,
        "target_weekend_start": "2026-01-16",
        "target_weekend_end": "2026-01-18",
        "opens_at": opens_at,
        "status": status,
    }


def test_schedule_creates_one_window_per_eligible_house(db, service):
    _add_houses(db)

    result = service.schedule_weekly_windows(SUNDAY)

    assert result.success
    assert result.windows_created == 1
    assert str(result.target_weekend.start) == "2026-01-16"
    assert str(result.target_weekend.end) == "2026-01-18"
    [window] = db.rows("signup_windows")
    assert window["house_id"] == HOUSE_ID
    assert window["status"] == "scheduled"
    assert window["target_weekend_start"] == "2026-01-16"
    opens_at = datetime.fromisoformat(window["opens_at"])
    assert opens_at.date().isoformat() in ("2026-01-05", "2026-01-06")
    assert 8 <= opens_at.hour <= 19


def test_schedule_is_idempotent_per_target_weekend(db, service):
    service.schedule_weekly_windows(SUNDAY)
    result = service.schedule_weekly_windows(SUNDAY)
    assert result.windows_created == 0
    assert len(db.rows("signup_windows")) == 1


def test_schedule_without_houses(service, db):
    db.tables["houses"] = []
    result = service.schedule_weekly_windows(SUNDAY)
    assert result.success
    assert result.message == "No houses found"


def test_schedule_collects_per_house_errors(db, service):
    db.fail_tables.add("beds")
    result = service.schedule_weekly_windows(SUNDAY)
    assert not result.success
    assert result.windows_created == 0
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Tahoe Cabin:")


def test_open_due_opens_and_notifies_accepted_members(db, push, service):
    db.rows("signup_windows").extend([
        _window(),
        _window("win-later", opens_at="2026-01-06T09:00:00+00:00"),
        _window("win-open", status="open"),
    ])

    result = service.open_due_windows(datetime(2026, 1, 5, 16, 0, tzinfo=timezone.utc))

    assert result.success
    assert result.windows_opened == 1
    assert result.notifications_sent == 2
    statuses = {w["id"]: w["status"] for w in db.rows("signup_windows")}
    assert statuses == {"win-1": "open", "win-later": "scheduled", "win-open": "open"}
    assert sorted(m.to for m in push.sent) == ["ExponentPushToken[admin]", "ExponentPushToken[member]"]
    message = push.sent[0]
    assert message.title == "Bed Sign-Up Open!"
    assert message.body == "Sign-up for beds (Jan 16 - Jan 18 weekend) is now open at Tahoe Cabin. Claim your spot!"
    assert message.priority == "high"
    assert message.data == {
        "type": "bed_signup_open",
        "windowId": "win-1",
        "houseId": HOUSE_ID,
        "houseName": "Tahoe Cabin",
        "weekendStart": "2026-01-16",
        "weekendEnd": "2026-01-18",
    }


def test_open_due_keeps_window_open_when_push_fails(db):
    db.rows("signup_windows").append(_window())
    service = SignupWindowService(db, FakePushClient(fail=True))

    result = service.open_due_windows(datetime(2026, 1, 5, 16, 0, tzinfo=timezone.utc))

    assert not result.success
    assert result.windows_opened == 1
    assert result.notifications_sent == 0
    assert result.errors[0].startswith("Notifications for Tahoe Cabin")
    assert db.rows("signup_windows")[0]["status"] == "open"


def test_open_due_skips_window_opened_by_concurrent_run(db, push, service, monkeypatch):
    db.rows("signup_windows").append(_window())
    table = db.table

    def open_elsewhere(name):
        # another run flips the window between the due-window select and the update
        if name == "houses":
            db.rows("signup_windows")[0]["status"] = "open"
        return table(name)

    monkeypatch.setattr(db, "table", open_elsewhere)

    result = service.open_due_windows(datetime(2026, 1, 5, 16, 0, tzinfo=timezone.utc))

    assert result.success
    assert result.windows_opened == 0
    assert result.notifications_sent == 0
    assert push.sent == []


def test_open_due_with_nothing_due(service):
    result = service.open_due_windows(SUNDAY)
    assert result.success
    assert result.message == "No windows to open"


def test_cron_routes_require_secret(client, cron_secret):
    assert client.post(SCHEDULE).status_code == 403
    assert client.post(OPEN_DUE, headers={"X-Cron-Secret": "wrong"}).status_code == 403


def test_cron_routes_reject_everything_without_configured_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", None)
    assert client.post(OPEN_DUE, headers={"X-Cron-Secret": ""}).status_code == 403


def test_open_due_route(client, db, cron_secret):
    db.rows("signup_windows").append(_window(opens_at="2020-01-01T00:00:00+00:00"))
    response = client.post(OPEN_DUE, headers={"X-Cron-Secret": cron_secret})
    assert response.status_code == 200
    assert response.json() == {"success": True, "windows_opened": 1, "notifications_sent": 2}


def test_open_due_route_reports_partial_failure(client, db, push, cron_secret):
    push.fail = True
    db.rows("signup_windows").append(_window(opens_at="2020-01-01T00:00:00+00:00"))
    response = client.post(OPEN_DUE, headers={"X-Cron-Secret": cron_secret})
    assert response.status_code == 207
    assert response.json()["windows_opened"] == 1
    assert response.json()["errors"]


def test_schedule_route(client, db, cron_secret):
    response = client.post(SCHEDULE, headers={"X-Cron-Secret": cron_secret})
    assert response.status_code == 200
    assert response.json()["windows_created"] == 1
    assert len(db.rows("signup_windows")) == 1


def test_window_status_for_members(client, db):
    db.rows("signup_windows").extend([
        _window("win-a", opens_at="2026-01-12T10:00:00+00:00"),
        _window("win-b", opens_at="2026-01-05T10:00:00+00:00"),
    ])
    response = client.get(f"/api/v1/houses/{HOUSE_ID}/signup-windows/status")
    assert response.status_code == 200
    body = response.json()
    assert body["has_beds"] is True
    assert body["active_window"] is None
    assert body["next_scheduled_window"]["id"] == "win-b"


def test_open_window_wins_over_scheduled(client, db):
    db.rows("signup_windows").extend([_window("win-s"), _window("win-o", status="open")])
    body = client.get(f"/api/v1/houses/{HOUSE_ID}/signup-windows/status").json()
    assert body["active_window"]["id"] == "win-o"
    assert body["next_scheduled_window"] is None


def test_only_admins_manage_windows(client, current_user):
    payload = {"target_weekend_start": "2026-01-16", "target_weekend_end": "2026-01-18"}
    url = f"/api/v1/houses/{HOUSE_ID}/signup-windows"
    assert client.post(url, json=payload).status_code == 403

    current_user["id"] = ADMIN_ID
    response = client.post(url, json=payload)
    assert response.status_code == 201
    assert response.json()["status"] == "scheduled"

    bad = {"target_weekend_start": "2026-01-18", "target_weekend_end": "2026-01-16"}
    assert client.post(url, json=bad).status_code == 422


def test_admin_open_and_close(client, db, current_user):
    current_user["id"] = ADMIN_ID
    db.rows("signup_windows").append(_window())
    base = f"/api/v1/houses/{HOUSE_ID}/signup-windows/win-1"

    opened = client.post(f"{base}/open")
    assert opened.status_code == 200
    assert opened.json()["status"] == "open"

    closed = client.post(f"{base}/close")
    assert closed.json()["status"] == "closed"
    assert closed.json()["closed_at"] is not None

    assert client.post(f"/api/v1/houses/{HOUSE_ID}/signup-windows/missing/close").status_code == 404
