"""Domain entities for projects and their memberships."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MembershipStatus(str, Enum):
    """Invitation state of a project membership."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


@dataclass
class Project:
    id: int | None
    name: str
    owner_id: int | None = None


@dataclass
class ProjectMembership:
    """Link between a user and a project, owned by the invitation workflow."""

    id: int | None
    project_id: int
    user_id: int
    status: MembershipStatus = MembershipStatus.PENDING


__all__ = ["MembershipStatus", "Project", "ProjectMembership"]
