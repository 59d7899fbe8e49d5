"""Daily reminders for open tasks whose due date is close."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from html import escape

from sqlalchemy.orm import Session

from taskflow.domain.entities import NotificationCategory, Task
from taskflow.infrastructure.repositories import TaskRepository, UserRepository

from .dispatcher import NotificationDispatcher
from .events import task_link

logger = logging.getLogger(__name__)


def describe_due_date(task: Task, today: date) -> str:
    days = (task.due_date - today).days
    if days <= 0:
        return "is due today"
    if days == 1:
        return "is due tomorrow"
    return f"is due in {days} days"


def send_due_soon_reminders(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    today: date,
    horizon_days: int = 3,
) -> int:
    """Notify assignees of open tasks due between ``today`` and the horizon."""

    tasks = TaskRepository(session).list_open_due_between(
        today, today + timedelta(days=horizon_days)
    )
    assignees = UserRepository(session).get_map_by_ids(task.assignee_id for task in tasks)

    sent = 0
    for task in tasks:
        assignee = assignees.get(task.assignee_id)
        if assignee is None or not assignee.is_active:
            continue
        message = (
            f"The task <strong>'{escape(task.title)}'</strong> "
            f"{describe_due_date(task, today)}."
        )
        dispatcher.dispatch(
            session,
            recipient=assignee,
            category=NotificationCategory.TASK_DUE_SOON,
            message=message,
            link=task_link(task),
        )
        sent += 1

    logger.info("Sent %s due date reminders for %s", sent, today.isoformat())
    return sent


__all__ = ["describe_due_date", "send_due_soon_reminders"]
