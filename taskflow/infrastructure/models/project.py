"""SQLAlchemy models for projects and project memberships."""

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from taskflow.domain.entities import MembershipStatus
from taskflow.infrastructure.database import Base


class ProjectModel(Base):
    """Database representation of a shared project."""

    __tablename__ = "project"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    owner_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )


class ProjectMemberModel(Base):
    """Membership of a user in a project, including its invitation status."""

    __tablename__ = "project_member"
    __table_args__ = (UniqueConstraint("project_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer,
        ForeignKey("project.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        Enum(MembershipStatus, native_enum=False, length=20),
        nullable=False,
        default=MembershipStatus.PENDING,
    )

    project = relationship("ProjectModel", lazy="joined")


__all__ = ["ProjectModel", "ProjectMemberModel"]
