"""Queries over tasks and comments used by digests and reminders."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from taskflow.domain.entities import Task, TaskStatus
from taskflow.infrastructure.models import CommentModel, TaskModel
from taskflow.utils import ensure_app_naive_datetime, ensure_app_timezone


class TaskRepository:
    """Read task activity for a user inside a project."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_newly_assigned(
        self, *, project_id: int, assignee_id: int, since: datetime
    ) -> Sequence[Task]:
        """Tasks assigned to ``assignee_id`` after ``since``.

        Tasks created with an assignee and never reassigned have no
        ``assigned_at``; their creation time counts as the assignment time.
        Tasks that were already done before ``since`` are left out; a task
        completed inside the window is still reported here.
        """

        window_start = ensure_app_naive_datetime(since)
        assigned_at = func.coalesce(TaskModel.assigned_at, TaskModel.created_at)
        query = (
            self.session.query(TaskModel)
            .filter(TaskModel.project_id == project_id)
            .filter(TaskModel.assignee_id == assignee_id)
            .filter(
                or_(
                    TaskModel.status != TaskStatus.DONE,
                    TaskModel.completed_at > window_start,
                )
            )
            .filter(assigned_at > window_start)
            .order_by(assigned_at, TaskModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_completed(
        self, *, project_id: int, assignee_id: int, since: datetime
    ) -> Sequence[Task]:
        query = (
            self.session.query(TaskModel)
            .filter(TaskModel.project_id == project_id)
            .filter(TaskModel.assignee_id == assignee_id)
            .filter(TaskModel.status == TaskStatus.DONE)
            .filter(TaskModel.completed_at > ensure_app_naive_datetime(since))
            .order_by(TaskModel.completed_at, TaskModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_commented_by_others(
        self, *, project_id: int, assignee_id: int, since: datetime
    ) -> Sequence[Task]:
        """Tasks of ``assignee_id`` with comments from other users after ``since``.

        Each task is returned once, ordered by its first qualifying comment.
        """

        query = (
            self.session.query(TaskModel)
            .join(CommentModel, CommentModel.task_id == TaskModel.id)
            .filter(TaskModel.project_id == project_id)
            .filter(TaskModel.assignee_id == assignee_id)
            .filter(CommentModel.author_id != assignee_id)
            .filter(CommentModel.created_at > ensure_app_naive_datetime(since))
            .order_by(CommentModel.created_at, CommentModel.id)
        )
        unique: dict[int, Task] = {}
        for model in query.all():
            if model.id not in unique:
                unique[model.id] = self._to_entity(model)
        return list(unique.values())

    def list_open_due_between(self, start: date, end: date) -> Sequence[Task]:
        query = (
            self.session.query(TaskModel)
            .filter(TaskModel.assignee_id.is_not(None))
            .filter(TaskModel.status != TaskStatus.DONE)
            .filter(TaskModel.due_date >= start)
            .filter(TaskModel.due_date <= end)
            .order_by(TaskModel.due_date, TaskModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: TaskModel) -> Task:
        return Task(
            id=model.id,
            project_id=model.project_id,
            title=model.title,
            status=TaskStatus(model.status),
            assignee_id=model.assignee_id,
            created_by=model.created_by,
            due_date=model.due_date,
            created_at=ensure_app_timezone(model.created_at),
            assigned_at=ensure_app_timezone(model.assigned_at),
            completed_at=ensure_app_timezone(model.completed_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["TaskRepository"]
