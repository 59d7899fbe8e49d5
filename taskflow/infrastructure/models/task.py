"""SQLAlchemy models for tasks and their comments."""

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, String, Text

from taskflow.domain.entities import TaskStatus
from taskflow.infrastructure.database import Base
from taskflow.utils import now_in_app_naive_datetime


class TaskModel(Base):
    """Database representation of a project task."""

    __tablename__ = "task"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer,
        ForeignKey("project.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(200), nullable=False)
    status = Column(
        Enum(TaskStatus, native_enum=False, length=20),
        nullable=False,
        default=TaskStatus.TODO,
    )
    assignee_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    assigned_at = Column(DateTime(), nullable=True)
    completed_at = Column(DateTime(), nullable=True)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)


class CommentModel(Base):
    """Database representation of a comment left on a task."""

    __tablename__ = "comment"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(
        Integer,
        ForeignKey("task.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["CommentModel", "TaskModel"]
