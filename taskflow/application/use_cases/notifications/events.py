"""Helpers that task, comment and project code call when something notifiable happens."""

from __future__ import annotations

from html import escape

from sqlalchemy.orm import Session

from taskflow.domain.entities import Notification, NotificationCategory, Project, Task, User
from taskflow.domain.errors import AccessDeniedError, NotFoundError
from taskflow.infrastructure.repositories import ProjectMemberRepository

from .dispatcher import NotificationDispatcher


def task_link(task: Task) -> str:
    return f"/project/{task.project_id}?taskId={task.id}"


def _is_self(recipient: User | None, actor: User | None) -> bool:
    return recipient is not None and actor is not None and recipient.id == actor.id


def notify_task_assigned(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    task: Task,
    assignee: User | None,
    actor: User,
) -> Notification | None:
    """Tell ``assignee`` that ``actor`` gave them ``task``."""

    if assignee is None or _is_self(assignee, actor):
        return None
    message = (
        f"<strong>{escape(actor.name)}</strong> assigned you the task "
        f"<strong>'{escape(task.title)}'</strong>."
    )
    return dispatcher.dispatch(
        session,
        recipient=assignee,
        category=NotificationCategory.TASK_ASSIGNED,
        message=message,
        link=task_link(task),
        actor=actor,
    )


def notify_task_updated(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    task: Task,
    assignee: User | None,
    actor: User,
) -> Notification | None:
    if assignee is None or _is_self(assignee, actor):
        return None
    message = (
        f"<strong>{escape(actor.name)}</strong> updated your task "
        f"<strong>'{escape(task.title)}'</strong>."
    )
    return dispatcher.dispatch(
        session,
        recipient=assignee,
        category=NotificationCategory.TASK_UPDATED,
        message=message,
        link=task_link(task),
        actor=actor,
    )


def notify_task_commented(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    task: Task,
    assignee: User | None,
    commenter: User,
) -> Notification | None:
    if assignee is None or _is_self(assignee, commenter):
        return None
    message = (
        f"<strong>{escape(commenter.name)}</strong> commented on the task "
        f"<strong>'{escape(task.title)}'</strong>."
    )
    return dispatcher.dispatch(
        session,
        recipient=assignee,
        category=NotificationCategory.TASK_COMMENTED,
        message=message,
        link=task_link(task),
        actor=commenter,
    )


def notify_task_completed(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    task: Task,
    creator: User | None,
    actor: User,
) -> Notification | None:
    """Tell the creator of ``task`` that ``actor`` finished it."""

    if creator is None or _is_self(creator, actor):
        return None
    message = (
        f"<strong>{escape(actor.name)}</strong> completed the task "
        f"<strong>'{escape(task.title)}'</strong>."
    )
    return dispatcher.dispatch(
        session,
        recipient=creator,
        category=NotificationCategory.TASK_COMPLETED,
        message=message,
        link=task_link(task),
        actor=actor,
    )


def notify_project_invitation(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    project: Project,
    invitee: User,
    inviter: User,
    invitation_link: str,
) -> Notification | None:
    if _is_self(invitee, inviter):
        return None
    message = (
        f"<strong>{escape(inviter.name)}</strong> invited you to the project "
        f"<strong>'{escape(project.name)}'</strong>."
    )
    return dispatcher.dispatch(
        session,
        recipient=invitee,
        category=NotificationCategory.PROJECT_INVITATION,
        message=message,
        link=invitation_link,
        actor=inviter,
    )


def notify_project_joined(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    project: Project,
    member: User,
    owner: User | None,
) -> Notification | None:
    """Tell the project owner that ``member`` accepted the invitation."""

    if owner is None or _is_self(owner, member):
        return None
    message = (
        f"<strong>{escape(member.name)}</strong> joined the project "
        f"<strong>'{escape(project.name)}'</strong>."
    )
    return dispatcher.dispatch(
        session,
        recipient=owner,
        category=NotificationCategory.PROJECT_JOINED,
        message=message,
        link=f"/project/{project.id}",
        actor=member,
    )


def broadcast_project_updated(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    project_id: int,
    actor: User | None = None,
) -> int:
    """Send ``project-updated`` to every connected accepted member.

    When ``actor`` is given it must be an accepted member of the project.
    """

    repository = ProjectMemberRepository(session)
    if repository.get_project(project_id) is None:
        raise NotFoundError("Project not found")
    if actor is not None and not repository.is_accepted_member(project_id, actor.id):
        raise AccessDeniedError("You are not a member of this project")
    return dispatcher.publisher.publish_project_updated(project_id)


__all__ = [
    "broadcast_project_updated",
    "notify_project_invitation",
    "notify_project_joined",
    "notify_task_assigned",
    "notify_task_commented",
    "notify_task_completed",
    "notify_task_updated",
    "task_link",
]
