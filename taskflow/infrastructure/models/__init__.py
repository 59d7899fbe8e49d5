"""ORM models used by the application infrastructure."""

from .user import UserModel
from .project import ProjectMemberModel, ProjectModel
from .task import CommentModel, TaskModel
from .notification import NotificationModel
from .notification_preference import NotificationPreferenceModel

__all__ = [
    "CommentModel",
    "NotificationModel",
    "NotificationPreferenceModel",
    "ProjectMemberModel",
    "ProjectModel",
    "TaskModel",
    "UserModel",
]
