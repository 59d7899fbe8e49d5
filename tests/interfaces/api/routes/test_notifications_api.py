"""Integration tests for the notification API endpoints."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from taskflow.domain.entities import Notification, NotificationCategory
from taskflow.infrastructure.models import NotificationModel
from taskflow.infrastructure.notifications import ConnectionRegistry
from taskflow.infrastructure.repositories import NotificationRepository
from taskflow.infrastructure.security import create_access_token


@pytest.fixture()
def client(db_session):
    """Return a test client bound to a clean application instance."""

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


def _notify(session, user, category, message, *, minute: int, actor=None) -> Notification:
    return NotificationRepository(session).create(
        Notification(
            id=None,
            recipient_id=user.id,
            category=category,
            message=message,
            link="/project/1",
            actor_id=actor.id if actor else None,
            created_at=datetime(2024, 3, 10, 9, minute, tzinfo=timezone.utc),
        )
    )


def test_requires_authentication(client: TestClient) -> None:
    assert client.get("/notifications/").status_code == 401
    assert client.get("/notifications/", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_list_filter_and_count(client: TestClient, db_session, seed) -> None:
    alice = seed.user("Alice")
    bob = seed.user("Bob")
    first = _notify(db_session, alice, NotificationCategory.TASK_ASSIGNED, "Assigned", minute=0, actor=bob)
    _notify(db_session, alice, NotificationCategory.TASK_COMMENTED, "Commented", minute=5)
    _notify(db_session, bob, NotificationCategory.TASK_ASSIGNED, "Not for Alice", minute=6)

    response = client.get("/notifications/", headers=_auth(alice))
    assert response.status_code == 200
    body = response.json()
    assert [item["message"] for item in body] == ["Commented", "Assigned"]
    assert body[1]["category"] == "task-assigned"
    assert body[1]["actor_name"] == "Bob"
    assert body[1]["read"] is False

    filtered = client.get(
        "/notifications/", params={"category": "task-assigned"}, headers=_auth(alice)
    )
    assert [item["id"] for item in filtered.json()] == [first.id]

    limited = client.get("/notifications/", params={"limit": 1}, headers=_auth(alice))
    assert [item["message"] for item in limited.json()] == ["Commented"]

    invalid = client.get("/notifications/", params={"category": "bogus"}, headers=_auth(alice))
    assert invalid.status_code == 400

    count = client.get("/notifications/unread-count", headers=_auth(alice))
    assert count.json() == {"unread": 2}


def test_mark_read_and_read_all(client: TestClient, db_session, seed) -> None:
    alice = seed.user("Alice")
    bob = seed.user("Bob")
    mine = _notify(db_session, alice, NotificationCategory.TASK_UPDATED, "Updated", minute=0)
    _notify(db_session, alice, NotificationCategory.TASK_DUE_SOON, "Due", minute=1)
    theirs = _notify(db_session, bob, NotificationCategory.TASK_UPDATED, "Bob's", minute=2)

    marked = client.post(f"/notifications/{mine.id}/read", headers=_auth(alice))
    assert marked.status_code == 200
    assert marked.json()["read"] is True

    forbidden = client.post(f"/notifications/{theirs.id}/read", headers=_auth(alice))
    assert forbidden.status_code == 403

    missing = client.post("/notifications/9999/read", headers=_auth(alice))
    assert missing.status_code == 404

    unread = client.get("/notifications/", params={"unreadOnly": True}, headers=_auth(alice))
    assert [item["message"] for item in unread.json()] == ["Due"]

    read_all = client.post("/notifications/read-all", headers=_auth(alice))
    assert read_all.json() == {"updated": 1}
    assert client.get("/notifications/unread-count", headers=_auth(alice)).json() == {"unread": 0}
    assert client.get("/notifications/unread-count", headers=_auth(bob)).json() == {"unread": 1}


def test_preferences_round_trip(client: TestClient, seed) -> None:
    carol = seed.user("Carol")

    defaults = client.get("/notifications/settings", headers=_auth(carol))
    assert defaults.status_code == 200
    assert all(defaults.json().values())

    updated = client.put(
        "/notifications/settings",
        json={"task_commented": False, "weekly_digest": False},
        headers=_auth(carol),
    )
    assert updated.status_code == 200
    assert updated.json()["task_commented"] is False
    assert updated.json()["weekly_digest"] is False
    assert updated.json()["task_assigned"] is True

    stored = client.get("/notifications/settings", headers=_auth(carol)).json()
    assert stored == updated.json()

    rejected = client.put(
        "/notifications/settings", json={"sms_enabled": True}, headers=_auth(carol)
    )
    assert rejected.status_code == 422


def test_subscribe_rejects_invalid_token(client: TestClient) -> None:
    response = client.get("/notifications/subscribe", params={"token": "not-a-jwt"})

    assert response.status_code == 401


def test_delivery_services_are_created_per_application(client: TestClient) -> None:
    registry = client.app.state.connection_registry

    assert isinstance(registry, ConnectionRegistry)
    assert registry.connected_user_ids() == []
    assert client.app.state.notification_dispatcher.publisher is not None


def test_unread_only_filter_uses_camel_case_parameter(client: TestClient, db_session, seed) -> None:
    alice = seed.user("Alice")
    seen = _notify(db_session, alice, NotificationCategory.TASK_UPDATED, "read-one", minute=0)
    _notify(db_session, alice, NotificationCategory.TASK_UPDATED, "unread-one", minute=1)
    NotificationRepository(db_session).mark_as_read(seen.id)

    response = client.get("/notifications/", params={"unreadOnly": "true"}, headers=_auth(alice))

    assert [item["message"] for item in response.json()] == ["unread-one"]


def test_offset_reaches_notifications_beyond_the_page_cap(client: TestClient, db_session, seed) -> None:
    alice = seed.user("Alice")
    start = datetime(2024, 3, 1, 9, 0)
    db_session.add_all(
        NotificationModel(
            recipient_id=alice.id,
            category=NotificationCategory.TASK_UPDATED,
            message=f"update {index}",
            created_at=start + timedelta(minutes=index),
        )
        for index in range(205)
    )
    db_session.commit()

    default_page = client.get("/notifications/", headers=_auth(alice)).json()
    first_page = client.get("/notifications/", params={"limit": 200}, headers=_auth(alice)).json()
    last_page = client.get(
        "/notifications/", params={"limit": 200, "offset": 200}, headers=_auth(alice)
    ).json()

    assert len(default_page) == 50
    assert len(first_page) == 200
    assert first_page[0]["message"] == "update 204"
    assert [item["message"] for item in last_page] == [f"update {index}" for index in range(4, -1, -1)]
    assert {item["id"] for item in first_page}.isdisjoint(item["id"] for item in last_page)


def test_subscribe_streams_connected_event(client: TestClient, seed) -> None:
    alice = seed.user("Alice")
    registry = client.app.state.connection_registry

    def close_once_connected() -> None:
        deadline = time.monotonic() + 5
        while not registry.is_connected(alice.id) and time.monotonic() < deadline:
            time.sleep(0.01)
        registry.close_all()

    closer = threading.Thread(target=close_once_connected)
    closer.start()
    response = client.get(
        "/notifications/subscribe",
        params={"token": create_access_token({"sub": str(alice.id)})},
    )
    closer.join()

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert response.text.startswith("event: connected\n")
    assert f'"user_id": {alice.id}' in response.text
    assert not registry.is_connected(alice.id)
