"""Tests for the helpers that turn domain events into notifications."""

from __future__ import annotations

import pytest

from taskflow.application.use_cases.notifications import (
    NotificationDispatcher,
    broadcast_project_updated,
    notify_project_invitation,
    notify_project_joined,
    notify_task_assigned,
    notify_task_commented,
    notify_task_completed,
)
from taskflow.domain.entities import MembershipStatus, NotificationCategory
from taskflow.domain.errors import AccessDeniedError, NotFoundError
from taskflow.infrastructure.notifications import ConnectionRegistry


@pytest.fixture()
def dispatcher(outbox) -> NotificationDispatcher:
    return NotificationDispatcher(
        ConnectionRegistry(lambda project_id: []),
        outbox,
        frontend_base_url="http://localhost:3000",
    )


def test_task_assignment_notifies_assignee(db_session, seed, dispatcher) -> None:
    alice = seed.user("Alice")
    bob = seed.user("Bob")
    project = seed.project("Alpha")
    task = seed.task(project, "Fix <login>", assignee=alice)

    notification = notify_task_assigned(
        db_session, dispatcher, task=task, assignee=alice, actor=bob
    )

    assert notification.category is NotificationCategory.TASK_ASSIGNED
    assert notification.recipient_id == alice.id
    assert notification.actor_id == bob.id
    assert notification.link == f"/project/{project.id}?taskId={task.id}"
    assert "<strong>Bob</strong>" in notification.message
    assert "Fix &lt;login&gt;" in notification.message


def test_self_actions_do_not_notify(db_session, seed, dispatcher, outbox) -> None:
    alice = seed.user("Alice")
    project = seed.project("Alpha", owner=alice)
    task = seed.task(project, "Solo", assignee=alice, creator=alice)

    assert notify_task_assigned(db_session, dispatcher, task=task, assignee=alice, actor=alice) is None
    assert notify_task_commented(db_session, dispatcher, task=task, assignee=alice, commenter=alice) is None
    assert notify_task_completed(db_session, dispatcher, task=task, creator=alice, actor=alice) is None
    assert notify_project_joined(db_session, dispatcher, project=project, member=alice, owner=alice) is None
    assert notify_task_assigned(db_session, dispatcher, task=task, assignee=None, actor=alice) is None
    assert outbox.messages == []


def test_invitation_and_join_notifications(db_session, seed, dispatcher) -> None:
    owner = seed.user("Olivia")
    guest = seed.user("Gary")
    project = seed.project("Beta", owner=owner)

    invitation = notify_project_invitation(
        db_session,
        dispatcher,
        project=project,
        invitee=guest,
        inviter=owner,
        invitation_link="/invitations/abc",
    )
    joined = notify_project_joined(
        db_session, dispatcher, project=project, member=guest, owner=owner
    )

    assert invitation.category is NotificationCategory.PROJECT_INVITATION
    assert invitation.link == "/invitations/abc"
    assert joined.category is NotificationCategory.PROJECT_JOINED
    assert joined.recipient_id == owner.id
    assert joined.link == f"/project/{project.id}"


def test_broadcast_project_updated_checks_project_and_membership(db_session, seed, dispatcher) -> None:
    member = seed.user("Mona")
    outsider = seed.user("Otto")
    invited = seed.user("Ivy")
    project = seed.project("Gamma")
    seed.member(project, member)
    seed.member(project, invited, MembershipStatus.PENDING)

    assert broadcast_project_updated(db_session, dispatcher, project_id=project.id, actor=member) == 0

    with pytest.raises(AccessDeniedError):
        broadcast_project_updated(db_session, dispatcher, project_id=project.id, actor=outsider)
    with pytest.raises(AccessDeniedError):
        broadcast_project_updated(db_session, dispatcher, project_id=project.id, actor=invited)
    with pytest.raises(NotFoundError):
        broadcast_project_updated(db_session, dispatcher, project_id=9999)
