"""Tests for the notification dispatcher."""

from __future__ import annotations

import asyncio
import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from taskflow.application.use_cases.notifications import (
    NotificationDispatcher,
    list_notifications,
    update_preferences,
)
from taskflow.application.use_cases.notifications import dispatcher as dispatcher_module
from taskflow.domain.entities import NotificationCategory, User
from taskflow.infrastructure.notifications import ConnectionRegistry

BASE_URL = "http://localhost:3000"


def _decode(frame: str) -> tuple[str, dict]:
    lines = frame.strip().splitlines()
    data = "\n".join(line.removeprefix("data: ") for line in lines[1:])
    return lines[0].removeprefix("event: "), json.loads(data)


def _dispatcher(outbox, registry: ConnectionRegistry | None = None) -> NotificationDispatcher:
    return NotificationDispatcher(
        registry or ConnectionRegistry(), outbox, frontend_base_url=BASE_URL
    )


def test_dispatch_persists_pushes_and_emails_connected_recipient(db_session, seed, outbox) -> None:
    alice = seed.user("Alice")
    bob = seed.user("Bob")

    async def scenario():
        registry = ConnectionRegistry()
        dispatcher = _dispatcher(outbox, registry)
        channel = registry.subscribe(alice.id)
        notification = dispatcher.dispatch(
            db_session,
            recipient=alice,
            category=NotificationCategory.TASK_ASSIGNED,
            message="Task 'X' assigned",
            link="/project/1?taskId=5",
            actor=bob,
        )
        frames = channel.stream()
        await asyncio.wait_for(frames.__anext__(), timeout=1)
        pushed = _decode(await asyncio.wait_for(frames.__anext__(), timeout=1))
        await frames.aclose()
        return notification, pushed

    notification, (event, payload) = asyncio.run(scenario())

    stored = list_notifications(db_session, alice.id)
    assert [item.id for item in stored] == [notification.id]
    assert stored[0].category is NotificationCategory.TASK_ASSIGNED
    assert stored[0].read is False
    assert stored[0].actor_name == "Bob"

    assert event == "new-notification"
    assert payload["id"] == notification.id
    assert payload["category"] == "task-assigned"
    assert payload["message"] == "Task 'X' assigned"
    assert payload["link"] == "/project/1?taskId=5"
    assert payload["read"] is False
    assert payload["actor_name"] == "Bob"

    assert len(outbox.messages) == 1
    email = outbox.messages[0]
    assert email.recipient == "alice@example.com"
    assert email.subject == "[TaskFlow] New notification: New task assigned"
    assert f"recipientId={alice.id}" in email.html_content


def test_dispatch_to_offline_recipient_still_emails(db_session, seed, outbox) -> None:
    carol = seed.user("Carol")
    update_preferences(db_session, carol.id, task_commented=True)
    registry = ConnectionRegistry()

    notification = _dispatcher(outbox, registry).dispatch(
        db_session,
        recipient=carol,
        category=NotificationCategory.TASK_COMMENTED,
        message="New comment on 'Docs'",
        link="/project/2?taskId=9",
    )

    assert notification.id is not None
    assert not registry.is_connected(carol.id)
    assert len(list_notifications(db_session, carol.id)) == 1
    assert [message.recipient for message in outbox.messages] == ["carol@example.com"]


def test_disabled_category_skips_email_only(db_session, seed, outbox) -> None:
    dave = seed.user("Dave")
    update_preferences(db_session, dave.id, task_updated=False)

    _dispatcher(outbox).dispatch(
        db_session,
        recipient=dave,
        category=NotificationCategory.TASK_UPDATED,
        message="Task updated",
    )

    assert len(list_notifications(db_session, dave.id)) == 1
    assert outbox.messages == []


def test_master_switch_disables_every_email(db_session, seed, outbox) -> None:
    erin = seed.user("Erin")
    update_preferences(db_session, erin.id, email_enabled=False)

    _dispatcher(outbox).dispatch(
        db_session,
        recipient=erin,
        category=NotificationCategory.TASK_ASSIGNED,
        message="Task assigned",
    )

    assert outbox.messages == []


def test_category_without_email_switch_is_not_emailed_once_preferences_exist(
    db_session, seed, outbox
) -> None:
    frank = seed.user("Frank")
    update_preferences(db_session, frank.id)

    _dispatcher(outbox).dispatch(
        db_session,
        recipient=frank,
        category=NotificationCategory.PROJECT_JOINED,
        message="Someone joined",
    )

    assert outbox.messages == []


def test_invalid_category_is_rejected_before_persisting(db_session, seed, outbox) -> None:
    grace = seed.user("Grace")

    with pytest.raises(ValueError):
        _dispatcher(outbox).dispatch(
            db_session, recipient=grace, category="task-exploded", message="Boom"
        )

    assert list_notifications(db_session, grace.id) == []
    assert outbox.messages == []


def test_category_accepts_wire_value_and_member_name(db_session, seed, outbox) -> None:
    heidi = seed.user("Heidi")
    dispatcher = _dispatcher(outbox)

    by_value = dispatcher.dispatch(
        db_session, recipient=heidi, category="task-due-soon", message="Due soon"
    )
    by_name = dispatcher.dispatch(
        db_session, recipient=heidi, category="TASK_DUE_SOON", message="Due soon again"
    )

    assert by_value.category is NotificationCategory.TASK_DUE_SOON
    assert by_name.category is NotificationCategory.TASK_DUE_SOON


def test_missing_recipient_is_rejected(db_session, outbox) -> None:
    with pytest.raises(ValueError):
        _dispatcher(outbox).dispatch(
            db_session,
            recipient=None,
            category=NotificationCategory.TASK_ASSIGNED,
            message="Orphan",
        )
    with pytest.raises(ValueError):
        _dispatcher(outbox).dispatch(
            db_session,
            recipient=User(id=None, name="Ghost", email="ghost@example.com"),
            category=NotificationCategory.TASK_ASSIGNED,
            message="Orphan",
        )


def test_preference_lookup_failure_keeps_notification(db_session, seed, outbox, monkeypatch) -> None:
    ivan = seed.user("Ivan")

    def broken_lookup(*args, **kwargs):
        raise SQLAlchemyError("preferences table unavailable")

    monkeypatch.setattr(dispatcher_module, "should_email", broken_lookup)

    notification = _dispatcher(outbox).dispatch(
        db_session,
        recipient=ivan,
        category=NotificationCategory.TASK_ASSIGNED,
        message="Task assigned",
    )

    assert notification.id is not None
    assert outbox.messages == []


def test_closed_outbox_does_not_fail_dispatch(db_session, seed) -> None:
    judy = seed.user("Judy")

    class ClosedOutbox:
        def submit(self, message):
            raise RuntimeError("cannot schedule new futures after shutdown")

    notification = _dispatcher(ClosedOutbox()).dispatch(
        db_session,
        recipient=judy,
        category=NotificationCategory.TASK_ASSIGNED,
        message="Task assigned",
    )

    assert notification.id is not None
