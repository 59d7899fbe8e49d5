"""Shared fixtures: a throwaway SQLite database and small data builders."""

from __future__ import annotations

import os
import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest

TEST_DIR = Path(tempfile.mkdtemp(prefix="taskflow-tests-"))
TEST_DB_PATH = TEST_DIR / "test.db"

os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["FRONTEND_BASE_URL"] = "http://localhost:3000"
for _name in ("SENDGRID_API_KEY", "SENDGRID_SENDER", "APP_TIMEZONE"):
    os.environ.pop(_name, None)

from taskflow.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from taskflow.domain.entities import MembershipStatus, Project, Task, TaskStatus, User  # noqa: E402
from taskflow.infrastructure import database  # noqa: E402
from taskflow.infrastructure import models  # noqa: E402,F401
from taskflow.infrastructure.models import (  # noqa: E402
    CommentModel,
    ProjectMemberModel,
    ProjectModel,
    TaskModel,
    UserModel,
)


class RecordingOutbox:
    """Collects queued emails instead of handing them to SendGrid."""

    def __init__(self) -> None:
        self.messages = []

    def submit(self, message):
        self.messages.append(message)
        return None


class RecordingSender:
    """Email sender double that remembers every call."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.calls: list[tuple[str, str, str]] = []

    def __call__(self, subject: str, html_content: str, recipient: str) -> bool:
        self.calls.append((subject, html_content, recipient))
        return self.result

    @property
    def recipients(self) -> list[str]:
        return [recipient for _, _, recipient in self.calls]


class Seeder:
    """Insert rows directly so tests can describe their fixtures compactly."""

    def __init__(self, session) -> None:
        self.session = session

    def _commit(self, model):
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return model

    def user(self, name: str, *, email: str | None = None, is_active: bool = True) -> User:
        model = self._commit(
            UserModel(
                name=name,
                email=email or f"{name.lower()}@example.com",
                avatar_url=f"https://cdn.example.com/{name.lower()}.png",
                is_active=is_active,
            )
        )
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            avatar_url=model.avatar_url,
            is_active=model.is_active,
        )

    def project(self, name: str, *, owner: User | None = None) -> Project:
        model = self._commit(ProjectModel(name=name, owner_id=owner.id if owner else None))
        return Project(id=model.id, name=model.name, owner_id=model.owner_id)

    def member(
        self,
        project: Project,
        user: User,
        status: MembershipStatus = MembershipStatus.ACCEPTED,
    ) -> None:
        self._commit(ProjectMemberModel(project_id=project.id, user_id=user.id, status=status))

    def task(
        self,
        project: Project,
        title: str,
        *,
        assignee: User | None = None,
        creator: User | None = None,
        status: TaskStatus = TaskStatus.TODO,
        created_at: datetime | None = None,
        assigned_at: datetime | None = None,
        completed_at: datetime | None = None,
        due_date: date | None = None,
    ) -> Task:
        model = self._commit(
            TaskModel(
                project_id=project.id,
                title=title,
                status=status,
                assignee_id=assignee.id if assignee else None,
                created_by=creator.id if creator else None,
                created_at=created_at or datetime(2024, 1, 1, 8, 0),
                assigned_at=assigned_at,
                completed_at=completed_at,
                due_date=due_date,
            )
        )
        return Task(
            id=model.id,
            project_id=model.project_id,
            title=model.title,
            status=status,
            assignee_id=model.assignee_id,
            created_by=model.created_by,
            due_date=model.due_date,
        )

    def comment(self, task: Task, author: User, *, created_at: datetime, content: str = "Looks good") -> None:
        self._commit(
            CommentModel(task_id=task.id, author_id=author.id, content=content, created_at=created_at)
        )


@pytest.fixture()
def db_session():
    """Yield a session bound to an empty schema."""

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def seed(db_session) -> Seeder:
    return Seeder(db_session)


@pytest.fixture()
def outbox() -> RecordingOutbox:
    return RecordingOutbox()


@pytest.fixture()
def sender() -> RecordingSender:
    return RecordingSender()
