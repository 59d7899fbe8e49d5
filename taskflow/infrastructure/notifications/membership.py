"""Membership lookups used by the registry to fan out project events."""

from __future__ import annotations

from taskflow.infrastructure.database import SessionLocal
from taskflow.infrastructure.repositories import ProjectMemberRepository


def resolve_accepted_members(project_id: int) -> list[int]:
    """Return the ids of users whose membership in ``project_id`` is accepted."""

    with SessionLocal() as session:
        return ProjectMemberRepository(session).list_accepted_user_ids(project_id)


__all__ = ["resolve_accepted_members"]
