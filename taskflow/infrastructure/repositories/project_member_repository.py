"""Read-only queries over project memberships."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from taskflow.domain.entities import MembershipStatus, Project
from taskflow.infrastructure.models import ProjectMemberModel, ProjectModel


class ProjectMemberRepository:
    """Resolve accepted members of projects and accepted projects of users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_accepted_user_ids(self, project_id: int) -> list[int]:
        query = (
            self.session.query(ProjectMemberModel.user_id)
            .filter(ProjectMemberModel.project_id == project_id)
            .filter(ProjectMemberModel.status == MembershipStatus.ACCEPTED)
            .order_by(ProjectMemberModel.id)
        )
        return [user_id for (user_id,) in query.all()]

    def list_accepted_projects(self, user_id: int) -> Sequence[Project]:
        query = (
            self.session.query(ProjectModel)
            .join(ProjectMemberModel, ProjectMemberModel.project_id == ProjectModel.id)
            .filter(ProjectMemberModel.user_id == user_id)
            .filter(ProjectMemberModel.status == MembershipStatus.ACCEPTED)
            .order_by(ProjectModel.name, ProjectModel.id)
        )
        return [self._to_project(model) for model in query.all()]

    def is_accepted_member(self, project_id: int, user_id: int) -> bool:
        query = (
            self.session.query(ProjectMemberModel.id)
            .filter(ProjectMemberModel.project_id == project_id)
            .filter(ProjectMemberModel.user_id == user_id)
            .filter(ProjectMemberModel.status == MembershipStatus.ACCEPTED)
        )
        return query.first() is not None

    def get_project(self, project_id: int) -> Project | None:
        model = self.session.get(ProjectModel, project_id)
        return self._to_project(model) if model else None

    @staticmethod
    def _to_project(model: ProjectModel) -> Project:
        return Project(id=model.id, name=model.name, owner_id=model.owner_id)


__all__ = ["ProjectMemberRepository"]
