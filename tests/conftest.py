import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.core.dependencies import get_current_user_id
from app.database.supabase_client import get_auth_supabase, get_supabase
from app.main import app
from app.modules.auth.service import AuthService
from app.modules.push.expo_client import get_push_client
from app.modules.weather.service import WeatherService
from tests.fakes import FakePushClient, FakeSupabase

HOUSE_ID = "house-1"
ADMIN_ID = "user-admin"
MEMBER_ID = "user-member"
PENDING_ID = "user-pending"
OUTSIDER_ID = "user-outsider"


def house_tables():
    """One house with an admin, an accepted member and a pending invite, each with a device."""
    return {
        "houses": [
            {
                "id": HOUSE_ID,
                "name": "Tahoe Cabin",
                "settings": {"bedSignupEnabled": True, "guestNightlyRate": 40},
            },
        ],
        "house_members": [
            {"id": "m1", "house_id": HOUSE_ID, "user_id": ADMIN_ID, "role": "admin",
             "invite_status": "accepted", "joined_at": "2024-01-01T00:00:00+00:00"},
            {"id": "m2", "house_id": HOUSE_ID, "user_id": MEMBER_ID, "role": "member",
             "invite_status": "accepted", "joined_at": "2024-02-01T00:00:00+00:00"},
            {"id": "m3", "house_id": HOUSE_ID, "user_id": PENDING_ID, "role": "member",
             "invite_status": "pending", "joined_at": "2024-03-01T00:00:00+00:00"},
        ],
        "profiles": [
            {"id": ADMIN_ID, "display_name": "Alex", "avatar_url": None, "venmo_handle": "@alex"},
            {"id": MEMBER_ID, "display_name": "Sam", "avatar_url": None, "venmo_handle": None},
        ],
        "push_tokens": [
            {"id": "t1", "user_id": ADMIN_ID, "token": "ExponentPushToken[admin]", "platform": "ios"},
            {"id": "t2", "user_id": MEMBER_ID, "token": "ExponentPushToken[member]", "platform": "android"},
            {"id": "t3", "user_id": PENDING_ID, "token": "ExponentPushToken[pending]", "platform": "ios"},
        ],
        "beds": [{"id": "bed-1", "house_id": HOUSE_ID}],
    }


@pytest.fixture(autouse=True)
def clear_caches():
    AuthService.clear_cache()
    WeatherService.clear_cache()
    yield
    AuthService.clear_cache()
    WeatherService.clear_cache()


@pytest.fixture
def db():
    return FakeSupabase(house_tables())


@pytest.fixture
def push():
    return FakePushClient()


@pytest.fixture
def current_user():
    """Mutable: tests switch identity with current_user["id"] = ..."""
    return {"id": MEMBER_ID, "email": "sam@example.com", "user_metadata": {}, "app_metadata": {}}


@pytest.fixture
def client(db, push, current_user):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_auth_supabase] = lambda: db
    app.dependency_overrides[get_push_client] = lambda: push
    app.dependency_overrides[get_current_user_id] = lambda: dict(current_user)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def cron_secret(monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "test-cron-secret")
    return "test-cron-secret"
