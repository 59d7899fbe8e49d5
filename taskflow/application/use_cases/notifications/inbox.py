"""Read and acknowledge the notifications of the authenticated user."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from taskflow.domain.entities import Notification, NotificationCategory
from taskflow.domain.errors import AccessDeniedError, NotFoundError
from taskflow.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def list_notifications(
    session: Session,
    user_id: int,
    *,
    category: NotificationCategory | str | None = None,
    unread_only: bool = False,
    limit: int | None = 50,
    offset: int = 0,
) -> Sequence[Notification]:
    """Return the notifications of ``user_id``, newest first."""

    resolved = NotificationCategory.coerce(category) if category is not None else None
    return NotificationRepository(session).list_for_user(
        user_id, category=resolved, unread_only=unread_only, limit=limit, offset=offset
    )


def count_unread_notifications(session: Session, user_id: int) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_notification_read(
    session: Session, notification_id: int, *, user_id: int
) -> Notification:
    """Flag one notification as read on behalf of its recipient."""

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.recipient_id != user_id:
        raise AccessDeniedError("You are not allowed to read this notification")

    updated = repository.mark_as_read(notification_id)
    logger.info("Notification %s marked as read by user %s", notification_id, user_id)
    return updated


def mark_all_notifications_read(session: Session, user_id: int) -> int:
    updated = NotificationRepository(session).mark_all_as_read(user_id)
    logger.info("Marked %s notifications as read for user %s", updated, user_id)
    return updated


__all__ = [
    "count_unread_notifications",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
