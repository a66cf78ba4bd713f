"""Tests for HTTP routes using FastAPI TestClient (lifespan not started: no MongoDB, no Firebase)."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from core.dependencies import get_current_user, get_database, get_notification_store
from main import app
from tests.fakes import FakeDatabase, FakeStore, make_token

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)
CLIENT_USER = {"user_id": "u1", "name": "Awa", "role": "client", "fcm_token": None,
               "created_at": NOW, "updated_at": NOW}
ADMIN_USER = {"user_id": "a1", "name": "Admin", "role": "admin", "created_at": NOW, "updated_at": NOW}
VIDEO_URL = "https://cdn.example.com/videos/abc123-intro.mp4"


@pytest.fixture
def database():
    return FakeDatabase(
        users=[dict(CLIENT_USER)],
        videos=[
            {"video_id": "v1", "short_id": "abc123", "video_url": VIDEO_URL, "title": "Intro <guitare>"},
            {"video_id": "v2", "video_url": "https://cdn.example.com/videos/def456-b.mp4"},
        ],
    )


@pytest.fixture
def store():
    return FakeStore(notifications=[{"notif_id": "n1", "user_id": "u1", "sent": True},
                                    {"notif_id": "n2", "user_id": "someone-else", "sent": False}])


@pytest.fixture
def client(database, store):
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_notification_store] = lambda: store
    app.dependency_overrides[get_current_user] = lambda: CLIENT_USER
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


class TestShareLinks:
    def test_native_app_is_redirected(self, client):
        resp = client.get("/abc123", headers={"User-Agent": "Dart/3.4 (dart:io)"}, follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == VIDEO_URL

    def test_android_webview_is_redirected(self, client):
        resp = client.get(
            "/abc123",
            headers={"User-Agent": "Mozilla/5.0 (Linux; Android 14; wv)", "X-Requested-With": "com.skillconnect.app"},
            follow_redirects=False,
        )
        assert resp.status_code == 302

    def test_browser_gets_landing_page(self, client):
        resp = client.get("/abc123", headers={"User-Agent": "Mozilla/5.0 (iPhone) Safari/604.1"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert VIDEO_URL in resp.text
        assert "skillconnect://video/abc123" in resp.text
        assert "Intro &lt;guitare&gt;" in resp.text

    def test_unknown_token_is_404_page(self, client):
        resp = client.get("/zzz999")
        assert resp.status_code == 404
        assert "Vidéo introuvable" in resp.text

    @pytest.mark.parametrize("token", ["bad.token", "%20", "a!b"])
    def test_malformed_token_is_400(self, client, token):
        assert client.get(f"/{token}").status_code == 400


class TestAdmin:
    def test_backfill_requires_admin(self, client):
        assert client.post("/api/admin/videos/backfill-short-ids").status_code == 403

    def test_backfill_reports(self, client, database):
        app.dependency_overrides[get_current_user] = lambda: ADMIN_USER
        resp = client.post("/api/admin/videos/backfill-short-ids")
        assert resp.status_code == 200
        assert resp.json() == {"scanned": 1, "updated": 1, "skipped": 0}
        assert database.videos.docs[1]["short_id"] == "def456"

    def test_pending_notifications(self, client):
        app.dependency_overrides[get_current_user] = lambda: ADMIN_USER
        resp = client.get("/api/admin/notifications/pending")
        assert [n["notif_id"] for n in resp.json()["notifications"]] == ["n2"]


class TestNotifications:
    def test_create_notification_is_pending(self, client, store):
        app.dependency_overrides[get_current_user] = lambda: ADMIN_USER
        resp = client.post("/api/notifications", json={"user_id": "u2", "title": "Hi", "body": "Hello"})
        assert resp.status_code == 201
        body = resp.json()
        assert body["notif_id"].startswith("ntf_")
        assert body["type"] == "general"
        assert body["sent"] is False
        assert store.notifications[body["notif_id"]]["user_id"] == "u2"
        # La création seule n'écrit jamais sent=True
        assert store.writes == []

    def test_create_rejects_empty_title(self, client):
        app.dependency_overrides[get_current_user] = lambda: ADMIN_USER
        resp = client.post("/api/notifications", json={"user_id": "u2", "title": "", "body": "x"})
        assert resp.status_code == 422

    def test_client_cannot_push_to_another_user(self, client, store):
        resp = client.post("/api/notifications", json={"user_id": "u2", "title": "Promo", "body": "Spam"})
        assert resp.status_code == 403
        assert set(store.notifications) == {"n1", "n2"}

    def test_read_own_notification(self, client, store):
        assert client.put("/api/notifications/n1/read").status_code == 200
        notif_id, write = store.writes[0]
        assert notif_id == "n1"
        assert set(write) == {"read_at"}
        assert store.notifications["n1"]["sent"] is True

    def test_read_other_users_notification_forbidden(self, client):
        assert client.put("/api/notifications/n2/read").status_code == 403

    def test_read_unknown_notification(self, client):
        assert client.put("/api/notifications/nope/read").status_code == 404


class TestUsers:
    def test_register_fcm_token(self, client, database):
        resp = client.put("/api/users/me/fcm-token", json={"fcm_token": " tok123 "})
        assert resp.status_code == 200
        assert database.users.docs[0]["fcm_token"] == "tok123"

    def test_empty_fcm_token_rejected(self, client):
        assert client.put("/api/users/me/fcm-token", json={"fcm_token": ""}).status_code == 422

    def test_get_me(self, client):
        assert client.get("/api/users/me").json()["user_id"] == "u1"


def test_missing_bearer_token_is_401():
    # Sans override : la vérification JWT s'exécute réellement
    client = TestClient(app)
    assert client.get("/api/users/me").status_code == 401


def test_invalid_bearer_token_is_401():
    client = TestClient(app)
    token = make_token("u1") + "tampered"
    assert client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


@pytest.mark.parametrize(("token_type", "minutes"), [("refresh", 5), ("access", -5)])
def test_refresh_or_expired_token_is_401(token_type, minutes):
    client = TestClient(app)
    token = make_token("u1", token_type=token_type, minutes=minutes)
    assert client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_error_details_are_user_facing(client):
    forbidden = client.put("/api/notifications/n2/read")
    assert forbidden.json()["detail"] == "Action non autorisée pour ce compte"
    missing = client.put("/api/notifications/nope/read")
    assert missing.json()["detail"] == "Notification inexistant(e) ou supprimé(e)"


def test_rejected_token_asks_to_reconnect():
    resp = TestClient(app).get("/api/users/me", headers={"Authorization": "Bearer x"})
    assert resp.json()["detail"].startswith("Session SkillConnect invalide")
