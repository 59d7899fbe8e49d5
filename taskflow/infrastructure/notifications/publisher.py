"""Serialize notifications and push them through the connection registry."""

from __future__ import annotations

from typing import Any

from taskflow.domain.entities import Notification

from .manager import ConnectionRegistry

NEW_NOTIFICATION_EVENT = "new-notification"
PROJECT_UPDATED_EVENT = "project-updated"


class NotificationPublisher:
    """Deliver notification and project events to live subscribers."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    def publish(self, notification: Notification) -> bool:
        """Push ``notification`` to its recipient if they are connected."""

        return self._registry.send_to_user(
            notification.recipient_id,
            NEW_NOTIFICATION_EVENT,
            serialize_notification(notification),
        )

    def publish_project_updated(self, project_id: int) -> int:
        """Ask every connected member of ``project_id`` to refetch it."""

        return self._registry.broadcast_to_project(
            project_id, PROJECT_UPDATED_EVENT, {"projectId": project_id}
        )


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the push payload representation for ``notification``."""

    return {
        "id": notification.id,
        "category": notification.category.value,
        "message": notification.message,
        "link": notification.link,
        "read": notification.read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "actor_id": notification.actor_id,
        "actor_name": notification.actor_name,
        "actor_avatar_url": notification.actor_avatar_url,
    }


__all__ = [
    "NEW_NOTIFICATION_EVENT",
    "PROJECT_UPDATED_EVENT",
    "NotificationPublisher",
    "serialize_notification",
]
