"""Project data model."""

from datetime import date
from enum import Enum
from typing import Optional, List
from pydantic import Field

from .base import CamelModel
from .user import User


class ProjectStatus(str, Enum):
    """Project lifecycle states."""
    PLANNING = "Planning"
    IN_PROGRESS = "In Progress"
    BLOCKED = "Blocked"
    COMPLETED = "Completed"


class ProjectPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ProjectType(CamelModel):
    """Entry of the project type list sheet."""
    id: str
    name: str


class ProjectCreate(CamelModel):
    """Fields accepted when creating a project (references by id only)."""
    name: str
    description: str = ""
    client_id: str
    team_leader_id: str
    team_member_ids: List[str] = Field(default_factory=list)
    start_date: date
    deadline: date
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: ProjectPriority = ProjectPriority.MEDIUM
    type: Optional[str] = None
    share_token: Optional[str] = None


class Project(ProjectCreate):
    """
    A project with its display fields resolved.

    client_name, team_leader and team_members are denormalized copies of the
    referenced Client and Users. The client cache keeps them current.
    """
    id: str
    client_name: str = ""
    team_leader: str = ""
    team_members: List[User] = Field(default_factory=list)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.team_member_ids

    def involves(self, user_id: str) -> bool:
        """True when the user leads the project or is on its team."""
        return self.team_leader_id == user_id or self.has_member(user_id)
