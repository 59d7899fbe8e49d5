"""Endpoints and event stream for user notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from taskflow.application.use_cases.notifications import (
    count_unread_notifications,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read,
    mark_notification_read,
)
from taskflow.domain.entities import Notification, User
from taskflow.domain.errors import AccessDeniedError, NotFoundError
from taskflow.infrastructure.database import SessionLocal, get_db
from taskflow.infrastructure.notifications import ConnectionRegistry
from taskflow.interfaces.api.dependencies import (
    get_connection_registry,
    get_current_active_user,
    resolve_current_user,
)
from taskflow.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("/subscribe")
async def subscribe(
    token: str = Query(..., min_length=1, description="Access token of the subscriber"),
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> StreamingResponse:
    """Open the event stream of the authenticated user.

    Browsers cannot attach headers to ``EventSource`` requests, so the access
    token travels in the query string. A new subscription replaces the
    previous stream of the same user.
    """

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
    finally:
        session.close()
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    channel = registry.subscribe(user.id)
    return StreamingResponse(
        channel.stream(), media_type="text/event-stream", headers=_STREAM_HEADERS
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    category: str | None = Query(None, description="Only return this category"),
    unread_only: bool = Query(
        False, alias="unreadOnly", description="Only return unread notifications"
    ),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0, description="Number of newer notifications to skip"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the notifications of the authenticated user, newest first.

    Older notifications are reached by paging with ``offset``.
    """

    try:
        notifications = list_notifications_uc(
            db,
            current_user.id,
            category=category,
            unread_only=unread_only,
            limit=limit,
            offset=offset,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountRead:
    return UnreadCountRead(unread=count_unread_notifications(db, current_user.id))


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    """Mark one of the caller's notifications as read."""

    try:
        notification = mark_notification_read(db, notification_id, user_id=current_user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except AccessDeniedError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.post("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=mark_all_notifications_read(db, current_user.id))
