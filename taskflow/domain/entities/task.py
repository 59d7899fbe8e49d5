"""Domain entities for tasks and task comments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


@dataclass
class Task:
    """Unit of work inside a project."""

    id: int | None
    project_id: int
    title: str
    status: TaskStatus = TaskStatus.TODO
    assignee_id: int | None = None
    created_by: int | None = None
    due_date: date | None = None
    created_at: datetime | None = None
    assigned_at: datetime | None = None
    completed_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE


@dataclass
class Comment:
    id: int | None
    task_id: int
    author_id: int
    content: str
    created_at: datetime | None = None


__all__ = ["Comment", "Task", "TaskStatus"]
