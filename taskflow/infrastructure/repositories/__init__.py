"""Repository implementations for infrastructure layer."""

from .notification_preference_repository import NotificationPreferenceRepository
from .notification_repository import NotificationRepository
from .project_member_repository import ProjectMemberRepository
from .task_repository import TaskRepository
from .user_repository import UserRepository

__all__ = [
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "ProjectMemberRepository",
    "TaskRepository",
    "UserRepository",
]
