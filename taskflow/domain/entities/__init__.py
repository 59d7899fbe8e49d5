"""Domain entities exposed by the application."""

from .notification import Notification, NotificationCategory
from .preference import (
    DIGEST_PREFERENCE_FIELDS,
    EMAIL_PREFERENCE_FIELDS,
    DigestFrequency,
    UserNotificationPreference,
)
from .project import MembershipStatus, Project, ProjectMembership
from .task import Comment, Task, TaskStatus
from .user import User

__all__ = [
    "Comment",
    "DigestFrequency",
    "DIGEST_PREFERENCE_FIELDS",
    "EMAIL_PREFERENCE_FIELDS",
    "MembershipStatus",
    "Notification",
    "NotificationCategory",
    "Project",
    "ProjectMembership",
    "Task",
    "TaskStatus",
    "User",
    "UserNotificationPreference",
]
