"""Persistence helpers for notification preferences."""

from __future__ import annotations

from dataclasses import fields

from sqlalchemy import or_
from sqlalchemy.orm import Session

from taskflow.domain.entities import (
    DIGEST_PREFERENCE_FIELDS,
    DigestFrequency,
    UserNotificationPreference,
)
from taskflow.infrastructure.models import NotificationPreferenceModel, UserModel

_FLAG_NAMES = tuple(
    field.name for field in fields(UserNotificationPreference) if field.name != "user_id"
)


class NotificationPreferenceRepository:
    """Load and store :class:`UserNotificationPreference` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> UserNotificationPreference | None:
        model = self._get_model(user_id)
        return self._to_entity(model) if model else None

    def save(self, preference: UserNotificationPreference) -> UserNotificationPreference:
        model = self._get_model(preference.user_id)
        if model is None:
            model = NotificationPreferenceModel(user_id=preference.user_id)
        for name in _FLAG_NAMES:
            setattr(model, name, bool(getattr(preference, name)))
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_user_ids_with_digest(self, frequency: DigestFrequency) -> list[int]:
        """Return active users that receive the ``frequency`` digest.

        Users that never saved preferences receive every digest.
        """

        flag = getattr(NotificationPreferenceModel, DIGEST_PREFERENCE_FIELDS[frequency])
        query = (
            self.session.query(UserModel.id)
            .outerjoin(
                NotificationPreferenceModel,
                NotificationPreferenceModel.user_id == UserModel.id,
            )
            .filter(UserModel.is_active.is_(True))
            .filter(or_(NotificationPreferenceModel.id.is_(None), flag.is_(True)))
            .order_by(UserModel.id)
        )
        return [user_id for (user_id,) in query.all()]

    def _get_model(self, user_id: int) -> NotificationPreferenceModel | None:
        return (
            self.session.query(NotificationPreferenceModel)
            .filter(NotificationPreferenceModel.user_id == user_id)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> UserNotificationPreference:
        values = {name: bool(getattr(model, name)) for name in _FLAG_NAMES}
        return UserNotificationPreference(user_id=model.user_id, **values)


__all__ = ["NotificationPreferenceRepository"]
