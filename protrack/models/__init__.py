from .base import EntityKind, CamelModel
from .user import User, UserCreate, UserRole, UserStatus, Team, avatar_url
from .client import Client, ClientCreate
from .project import Project, ProjectCreate, ProjectStatus, ProjectPriority, ProjectType
from .task import Task, TaskCreate, TaskStatus
from .activity import Activity, ActivityCreate, sort_newest_first
from .summary import ProjectFacts, TaskFact, ProjectSummary, ActionableSuggestions, RiskAssessment

__all__ = [
    "EntityKind",
    "CamelModel",
    "User",
    "UserCreate",
    "UserRole",
    "UserStatus",
    "Team",
    "avatar_url",
    "Client",
    "ClientCreate",
    "Project",
    "ProjectCreate",
    "ProjectStatus",
    "ProjectPriority",
    "ProjectType",
    "Task",
    "TaskCreate",
    "TaskStatus",
    "Activity",
    "ActivityCreate",
    "sort_newest_first",
    "ProjectFacts",
    "TaskFact",
    "ProjectSummary",
    "ActionableSuggestions",
    "RiskAssessment",
]
