"""Daily and weekly activity digests, one email per user per run."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from html import escape

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskflow.domain.entities import DigestFrequency, Project, Task, User
from taskflow.infrastructure.email import SUBJECT_PREFIX, EmailSender, send_email
from taskflow.infrastructure.repositories import (
    NotificationPreferenceRepository,
    ProjectMemberRepository,
    TaskRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

DIGEST_WINDOWS: dict[DigestFrequency, timedelta] = {
    DigestFrequency.DAILY: timedelta(hours=24),
    DigestFrequency.WEEKLY: timedelta(days=7),
}
_TITLE_PREVIEW_LIMIT = 5

_SECTION_LABELS = (
    ("new_tasks", "New tasks assigned to you"),
    ("completed_tasks", "Tasks you completed"),
    ("commented_tasks", "Tasks with new comments"),
)


@dataclass
class ProjectDigest:
    """Activity of one project inside the digest window."""

    project: Project
    new_tasks: Sequence[Task] = ()
    completed_tasks: Sequence[Task] = ()
    commented_tasks: Sequence[Task] = ()

    @property
    def item_count(self) -> int:
        return len(self.new_tasks) + len(self.completed_tasks) + len(self.commented_tasks)

    @property
    def has_items(self) -> bool:
        return self.item_count > 0


@dataclass
class UserDigest:
    user: User
    frequency: DigestFrequency
    window_start: datetime
    projects: list[ProjectDigest] = field(default_factory=list)

    @property
    def has_items(self) -> bool:
        return any(project.has_items for project in self.projects)


@dataclass
class DigestRunResult:
    frequency: DigestFrequency
    sent: int = 0
    skipped: int = 0
    failed: int = 0


def digest_window_start(frequency: DigestFrequency, now: datetime) -> datetime:
    return now - DIGEST_WINDOWS[frequency]


def collect_user_digest(
    session: Session, user: User, frequency: DigestFrequency, *, now: datetime
) -> UserDigest:
    """Gather the activity of ``user`` across their accepted projects."""

    since = digest_window_start(frequency, now)
    tasks = TaskRepository(session)
    digest = UserDigest(user=user, frequency=frequency, window_start=since)
    for project in ProjectMemberRepository(session).list_accepted_projects(user.id):
        project_digest = ProjectDigest(
            project=project,
            new_tasks=tasks.list_newly_assigned(
                project_id=project.id, assignee_id=user.id, since=since
            ),
            completed_tasks=tasks.list_completed(
                project_id=project.id, assignee_id=user.id, since=since
            ),
            commented_tasks=tasks.list_commented_by_others(
                project_id=project.id, assignee_id=user.id, since=since
            ),
        )
        if project_digest.has_items:
            digest.projects.append(project_digest)
    return digest


def digest_subject(frequency: DigestFrequency) -> str:
    return f"{SUBJECT_PREFIX} {frequency.value.capitalize()} digest"


def _format_titles(tasks: Sequence[Task]) -> str:
    titles = [f"'{escape(task.title)}'" for task in tasks[:_TITLE_PREVIEW_LIMIT]]
    remaining = len(tasks) - _TITLE_PREVIEW_LIMIT
    if remaining > 0:
        titles.append(f"and {remaining} more")
    return ", ".join(titles)


def render_digest_html(digest: UserDigest) -> str:
    """Render one section per project and one bullet per non-empty category."""

    period = "day" if digest.frequency == DigestFrequency.DAILY else "week"
    parts = [
        f"<h1>Your activity over the past {period}</h1>",
        f"<p>Hi {escape(digest.user.name)}, here is what happened in your projects.</p>",
    ]
    for project_digest in digest.projects:
        parts.append(f"<h2>{escape(project_digest.project.name)}</h2>")
        parts.append("<ul>")
        for attribute, label in _SECTION_LABELS:
            tasks = getattr(project_digest, attribute)
            if tasks:
                parts.append(
                    f"<li><b>{label} ({len(tasks)}):</b> {_format_titles(tasks)}</li>"
                )
        parts.append("</ul>")
    return "".join(parts)


def run_digest(
    session: Session,
    frequency: DigestFrequency | str,
    *,
    now: datetime,
    send: EmailSender = send_email,
) -> DigestRunResult:
    """Email one digest to every opted-in user with activity since the window start.

    Users without qualifying items are skipped. A user whose activity cannot
    be read or whose send fails is logged and counted as failed, and the run
    moves on to the next user.
    """

    frequency = DigestFrequency(frequency)
    result = DigestRunResult(frequency=frequency)
    user_ids = NotificationPreferenceRepository(session).list_user_ids_with_digest(frequency)
    users = UserRepository(session).get_map_by_ids(user_ids)
    subject = digest_subject(frequency)

    for user_id in user_ids:
        user = users.get(user_id)
        if user is None or not user.email:
            result.skipped += 1
            continue

        try:
            digest = collect_user_digest(session, user, frequency, now=now)
        except SQLAlchemyError:
            session.rollback()
            logger.exception(
                "Could not collect %s digest for user %s", frequency.value, user.id
            )
            result.failed += 1
            continue
        if not digest.has_items:
            result.skipped += 1
            continue

        try:
            delivered = send(subject, render_digest_html(digest), user.email)
        except Exception:
            logger.exception("%s digest to %s failed", frequency.value, user.email)
            delivered = False
        if delivered:
            result.sent += 1
        else:
            result.failed += 1

    logger.info(
        "%s digest run finished: %s sent, %s skipped, %s failed",
        frequency.value.capitalize(),
        result.sent,
        result.skipped,
        result.failed,
    )
    return result


__all__ = [
    "DIGEST_WINDOWS",
    "DigestRunResult",
    "ProjectDigest",
    "UserDigest",
    "collect_user_digest",
    "digest_subject",
    "digest_window_start",
    "render_digest_html",
    "run_digest",
]
