"""Realtime notification helpers for the infrastructure layer."""

from .channel import KEEPALIVE_FRAME, LiveChannel, ServerSentEvent
from .manager import CONNECTED_EVENT, ConnectionRegistry, MembershipResolver
from .membership import resolve_accepted_members
from .outbox import EmailOutbox
from .publisher import (
    NEW_NOTIFICATION_EVENT,
    PROJECT_UPDATED_EVENT,
    NotificationPublisher,
    serialize_notification,
)

__all__ = [
    "CONNECTED_EVENT",
    "ConnectionRegistry",
    "EmailOutbox",
    "KEEPALIVE_FRAME",
    "LiveChannel",
    "MembershipResolver",
    "NEW_NOTIFICATION_EVENT",
    "NotificationPublisher",
    "PROJECT_UPDATED_EVENT",
    "ServerSentEvent",
    "resolve_accepted_members",
    "serialize_notification",
]
