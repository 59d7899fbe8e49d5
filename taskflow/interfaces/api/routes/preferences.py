"""Endpoints to read and change notification preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskflow.application.use_cases.notifications import get_preferences, update_preferences
from taskflow.domain.entities import User
from taskflow.infrastructure.database import get_db
from taskflow.interfaces.api.dependencies import get_current_active_user
from taskflow.interfaces.api.schemas import (
    NotificationPreferenceRead,
    NotificationPreferenceUpdate,
)

router = APIRouter(prefix="/notifications/settings", tags=["notifications"])


@router.get("", response_model=NotificationPreferenceRead)
def read_preferences(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPreferenceRead:
    """Return the caller's preferences; defaults apply until first saved."""

    return NotificationPreferenceRead.model_validate(get_preferences(db, current_user.id))


@router.put("", response_model=NotificationPreferenceRead)
def write_preferences(
    payload: NotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationPreferenceRead:
    preference = update_preferences(
        db, current_user.id, **payload.model_dump(exclude_none=True)
    )
    return NotificationPreferenceRead.model_validate(preference)
