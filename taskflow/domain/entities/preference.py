"""Domain entity with the per-user notification preferences."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .notification import NotificationCategory


class DigestFrequency(str, Enum):
    """Cadence of the summary emails."""

    DAILY = "daily"
    WEEKLY = "weekly"


# Categories that have their own email switch. Anything else is unknown to the
# preference schema and never emailed once the user saved preferences.
EMAIL_PREFERENCE_FIELDS: dict[NotificationCategory, str] = {
    NotificationCategory.TASK_ASSIGNED: "task_assigned",
    NotificationCategory.TASK_UPDATED: "task_updated",
    NotificationCategory.TASK_COMMENTED: "task_commented",
    NotificationCategory.TASK_DUE_SOON: "task_due_soon",
    NotificationCategory.PROJECT_INVITATION: "project_invitation",
}

DIGEST_PREFERENCE_FIELDS: dict[DigestFrequency, str] = {
    DigestFrequency.DAILY: "daily_digest",
    DigestFrequency.WEEKLY: "weekly_digest",
}


@dataclass
class UserNotificationPreference:
    """Email and digest switches for a single user."""

    user_id: int
    email_enabled: bool = True
    task_assigned: bool = True
    task_updated: bool = True
    task_commented: bool = True
    task_due_soon: bool = True
    project_invitation: bool = True
    daily_digest: bool = True
    weekly_digest: bool = True

    def allows_email(self, category: NotificationCategory) -> bool:
        """Return ``True`` when ``category`` should also be sent by email."""

        if not self.email_enabled:
            return False
        field_name = EMAIL_PREFERENCE_FIELDS.get(category)
        if field_name is None:
            return False
        return bool(getattr(self, field_name))

    def allows_digest(self, frequency: DigestFrequency) -> bool:
        return bool(getattr(self, DIGEST_PREFERENCE_FIELDS[frequency]))


__all__ = [
    "DigestFrequency",
    "DIGEST_PREFERENCE_FIELDS",
    "EMAIL_PREFERENCE_FIELDS",
    "UserNotificationPreference",
]
