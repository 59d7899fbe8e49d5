"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, Integer, String

from taskflow.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a TaskFlow user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    avatar_url = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


__all__ = ["UserModel"]
