"""Aggregate application use cases."""

from .notifications import NotificationDispatcher, run_digest, send_due_soon_reminders

__all__ = [
    "NotificationDispatcher",
    "run_digest",
    "send_due_soon_reminders",
]
