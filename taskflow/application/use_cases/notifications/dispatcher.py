"""Turn domain events into persisted, pushed and emailed notifications."""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskflow.domain.entities import Notification, NotificationCategory, User
from taskflow.infrastructure.email import (
    EmailMessage,
    build_recipient_link,
    render_notification_email,
)
from taskflow.infrastructure.notifications import ConnectionRegistry, NotificationPublisher
from taskflow.infrastructure.repositories import NotificationRepository
from taskflow.utils import now_in_app_timezone

from .preferences import should_email

logger = logging.getLogger(__name__)


class EmailQueue(Protocol):
    def submit(self, message: EmailMessage) -> object: ...


class NotificationDispatcher:
    """Persist a notification, push it live and queue its email.

    Only persistence failures reach the caller. Push and email problems are
    logged and contained here.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        outbox: EmailQueue,
        *,
        frontend_base_url: str,
    ) -> None:
        self._publisher = NotificationPublisher(registry)
        self._outbox = outbox
        self._frontend_base_url = frontend_base_url

    @property
    def publisher(self) -> NotificationPublisher:
        return self._publisher

    def dispatch(
        self,
        session: Session,
        *,
        recipient: User | None,
        category: NotificationCategory | str,
        message: str,
        link: str | None = None,
        actor: User | None = None,
    ) -> Notification:
        if recipient is None or recipient.id is None:
            raise ValueError("A notification recipient is required")
        resolved = NotificationCategory.coerce(category)

        notification = NotificationRepository(session).create(
            Notification(
                id=None,
                recipient_id=recipient.id,
                category=resolved,
                message=message,
                link=link,
                actor_id=actor.id if actor is not None else None,
                read=False,
                created_at=now_in_app_timezone(),
            )
        )

        self._publisher.publish(notification)
        self._queue_email(session, recipient, notification)
        return notification

    def _queue_email(
        self, session: Session, recipient: User, notification: Notification
    ) -> None:
        try:
            wants_email = should_email(session, recipient.id, notification.category)
        except SQLAlchemyError:
            session.rollback()
            logger.exception(
                "Could not load email preferences for user %s; email skipped", recipient.id
            )
            return
        if not wants_email:
            logger.debug(
                "Email for %s disabled by user %s", notification.category.value, recipient.id
            )
            return
        if not recipient.email:
            logger.warning("User %s has no email address; email skipped", recipient.id)
            return

        email = render_notification_email(
            recipient=recipient.email,
            title=notification.category.display_name,
            message=notification.message,
            link=build_recipient_link(
                notification.link,
                recipient_id=recipient.id,
                base_url=self._frontend_base_url,
            ),
        )
        try:
            self._outbox.submit(email)
        except RuntimeError:
            logger.exception("Email outbox unavailable; email to %s dropped", recipient.email)


__all__ = ["EmailQueue", "NotificationDispatcher"]
