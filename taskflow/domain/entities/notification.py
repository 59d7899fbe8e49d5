"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationCategory(str, Enum):
    """Closed set of events that produce a notification."""

    TASK_ASSIGNED = "task-assigned"
    TASK_UPDATED = "task-updated"
    TASK_COMMENTED = "task-commented"
    TASK_DUE_SOON = "task-due-soon"
    PROJECT_INVITATION = "project-invitation"
    PROJECT_JOINED = "project-joined"
    TASK_COMPLETED = "task-completed"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def coerce(cls, value: "NotificationCategory | str") -> "NotificationCategory":
        """Return ``value`` as a category, accepting the wire value or the member name."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip()
            try:
                return cls(normalized.lower())
            except ValueError:
                member = cls.__members__.get(normalized.upper().replace("-", "_"))
                if member is not None:
                    return member
        raise ValueError(f"Unknown notification category: {value!r}")


_DISPLAY_NAMES: dict[NotificationCategory, str] = {
    NotificationCategory.TASK_ASSIGNED: "New task assigned",
    NotificationCategory.TASK_UPDATED: "Task updated",
    NotificationCategory.TASK_COMMENTED: "New comment",
    NotificationCategory.TASK_DUE_SOON: "Task due soon",
    NotificationCategory.PROJECT_INVITATION: "Project invitation",
    NotificationCategory.PROJECT_JOINED: "New project member",
    NotificationCategory.TASK_COMPLETED: "Task completed",
}


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    recipient_id: int
    category: NotificationCategory
    message: str
    link: str | None = None
    actor_id: int | None = None
    actor_name: str | None = None
    actor_avatar_url: str | None = None
    read: bool = False
    created_at: datetime | None = None


__all__ = ["Notification", "NotificationCategory"]
