"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskflow.domain.entities import NotificationCategory


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    category: NotificationCategory
    message: str
    link: str | None = None
    read: bool = False
    created_at: datetime
    actor_id: int | None = None
    actor_name: str | None = None
    actor_avatar_url: str | None = None


class UnreadCountRead(BaseModel):
    unread: int = Field(..., ge=0)


class MarkAllReadResponse(BaseModel):
    updated: int = Field(..., ge=0, description="Notifications switched to read")


class NotificationPreferenceRead(BaseModel):
    """Email and digest switches of the authenticated user."""

    model_config = ConfigDict(from_attributes=True)

    email_enabled: bool
    task_assigned: bool
    task_updated: bool
    task_commented: bool
    task_due_soon: bool
    project_invitation: bool
    daily_digest: bool
    weekly_digest: bool


class NotificationPreferenceUpdate(BaseModel):
    """Partial update; omitted flags keep their current value."""

    model_config = ConfigDict(extra="forbid")

    email_enabled: bool | None = None
    task_assigned: bool | None = None
    task_updated: bool | None = None
    task_commented: bool | None = None
    task_due_soon: bool | None = None
    project_invitation: bool | None = None
    daily_digest: bool | None = None
    weekly_digest: bool | None = None


__all__ = [
    "MarkAllReadResponse",
    "NotificationPreferenceRead",
    "NotificationPreferenceUpdate",
    "NotificationRead",
    "UnreadCountRead",
]
