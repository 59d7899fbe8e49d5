"""Preference gate: per-user, per-category email and digest switches."""

from __future__ import annotations

from dataclasses import fields, replace

from sqlalchemy.orm import Session

from taskflow.domain.entities import (
    DigestFrequency,
    NotificationCategory,
    UserNotificationPreference,
)
from taskflow.infrastructure.repositories import NotificationPreferenceRepository

PREFERENCE_FLAGS = frozenset(
    field.name for field in fields(UserNotificationPreference) if field.name != "user_id"
)


def get_preferences(session: Session, user_id: int) -> UserNotificationPreference:
    """Return the stored preferences or the all-enabled defaults."""

    stored = NotificationPreferenceRepository(session).get(user_id)
    return stored if stored is not None else UserNotificationPreference(user_id=user_id)


def update_preferences(
    session: Session, user_id: int, **flags: bool | None
) -> UserNotificationPreference:
    """Store the given flags, keeping the current value of omitted ones."""

    unknown = set(flags) - PREFERENCE_FLAGS
    if unknown:
        raise ValueError(f"Unknown preference flags: {', '.join(sorted(unknown))}")

    changes = {name: bool(value) for name, value in flags.items() if value is not None}
    current = get_preferences(session, user_id)
    return NotificationPreferenceRepository(session).save(replace(current, **changes))


def should_email(
    session: Session, user_id: int, category: NotificationCategory | str
) -> bool:
    """Return whether ``category`` events for ``user_id`` also go out by email.

    Users without a preference row get every email. Once a row exists,
    categories without their own switch are never emailed.
    """

    preference = NotificationPreferenceRepository(session).get(user_id)
    if preference is None:
        return True
    try:
        resolved = NotificationCategory.coerce(category)
    except ValueError:
        return False
    return preference.allows_email(resolved)


def digest_enabled(
    session: Session, user_id: int, frequency: DigestFrequency | str
) -> bool:
    preference = NotificationPreferenceRepository(session).get(user_id)
    if preference is None:
        return True
    return preference.allows_digest(DigestFrequency(frequency))


__all__ = [
    "PREFERENCE_FLAGS",
    "digest_enabled",
    "get_preferences",
    "should_email",
    "update_preferences",
]
