"""Notification delivery: dispatch, preferences, inbox, digests and reminders."""

from .digest import (
    DigestRunResult,
    ProjectDigest,
    UserDigest,
    collect_user_digest,
    digest_subject,
    render_digest_html,
    run_digest,
)
from .dispatcher import NotificationDispatcher
from .events import (
    broadcast_project_updated,
    notify_project_invitation,
    notify_project_joined,
    notify_task_assigned,
    notify_task_commented,
    notify_task_completed,
    notify_task_updated,
)
from .inbox import (
    count_unread_notifications,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from .jobs import build_notification_jobs
from .preferences import (
    digest_enabled,
    get_preferences,
    should_email,
    update_preferences,
)
from .reminders import send_due_soon_reminders

__all__ = [
    "DigestRunResult",
    "NotificationDispatcher",
    "ProjectDigest",
    "UserDigest",
    "broadcast_project_updated",
    "build_notification_jobs",
    "collect_user_digest",
    "count_unread_notifications",
    "digest_enabled",
    "digest_subject",
    "get_preferences",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "notify_project_invitation",
    "notify_project_joined",
    "notify_task_assigned",
    "notify_task_commented",
    "notify_task_completed",
    "notify_task_updated",
    "render_digest_html",
    "run_digest",
    "send_due_soon_reminders",
    "should_email",
    "update_preferences",
]
