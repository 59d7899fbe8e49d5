"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer
from sqlalchemy.sql import expression

from taskflow.infrastructure.database import Base


def _flag() -> Column:
    return Column(Boolean, nullable=False, default=True, server_default=expression.true())


class NotificationPreferenceModel(Base):
    """One row per user; absent rows mean every flag is enabled."""

    __tablename__ = "notification_preference"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    email_enabled = _flag()
    task_assigned = _flag()
    task_updated = _flag()
    task_commented = _flag()
    task_due_soon = _flag()
    project_invitation = _flag()
    daily_digest = _flag()
    weekly_digest = _flag()


__all__ = ["NotificationPreferenceModel"]
