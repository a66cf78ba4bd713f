"""Tests for the MongoDB notification store, in particular the one-way sent flag."""

import asyncio

import pytest

from services.notification_store import NotificationStore, SentFlagError, ensure_sent_not_cleared
from tests.fakes import FakeDatabase


@pytest.fixture
def database():
    return FakeDatabase(
        users=[{"user_id": "u1", "name": "Awa", "fcm_token": "tok123"}],
        notifications=[{"notif_id": "n1", "user_id": "u1", "sent": False}],
    )


@pytest.mark.parametrize("value", [False, None, 0, "true"])
def test_sent_cannot_be_cleared(value):
    with pytest.raises(SentFlagError):
        ensure_sent_not_cleared({"sent": value})


def test_other_fields_are_allowed():
    ensure_sent_not_cleared({"read_at": "now"})
    ensure_sent_not_cleared({"sent": True, "error": "x"})


def test_update_refuses_to_clear_sent_without_touching_db(database):
    store = NotificationStore(database)
    with pytest.raises(SentFlagError):
        asyncio.run(store.update("n1", {"sent": False}))
    assert database.notifications.updates == []


def test_mark_sent_uses_server_timestamp(database):
    store = NotificationStore(database)
    assert asyncio.run(store.mark_sent("n1", with_timestamp=True)) is True
    assert database.notifications.updates == [
        ({"notif_id": "n1"}, {"$set": {"sent": True}, "$currentDate": {"sent_at": True}}),
    ]


def test_mark_sent_with_error(database):
    store = NotificationStore(database)
    asyncio.run(store.mark_sent("n1", error="invalid token"))
    assert database.notifications.updates == [
        ({"notif_id": "n1"}, {"$set": {"sent": True, "error": "invalid token"}}),
    ]


def test_mark_sent_unknown_notification(database):
    assert asyncio.run(NotificationStore(database).mark_sent("nope")) is False


def test_get_user_projects_token(database):
    user = asyncio.run(NotificationStore(database).get_user("u1"))
    assert user == {"user_id": "u1", "fcm_token": "tok123"}


def test_get_user_without_id(database):
    assert asyncio.run(NotificationStore(database).get_user(None)) is None


def test_list_pending(database):
    asyncio.run(NotificationStore(database).mark_sent("n1"))
    asyncio.run(database.notifications.insert_one({"notif_id": "n2", "user_id": "u1", "created_at": 1}))
    pending = asyncio.run(NotificationStore(database).list_pending())
    assert [n["notif_id"] for n in pending] == ["n2"]
