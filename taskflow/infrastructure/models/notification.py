"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from taskflow.domain.entities import NotificationCategory
from taskflow.infrastructure.database import Base
from taskflow.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    actor_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
    category = Column(
        Enum(
            NotificationCategory,
            native_enum=False,
            length=40,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    message = Column(Text, nullable=False)
    link = Column(String(512), nullable=True)
    read = Column(
        "is_read",
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    actor = relationship("UserModel", foreign_keys=[actor_id], lazy="joined")


__all__ = ["NotificationModel"]
