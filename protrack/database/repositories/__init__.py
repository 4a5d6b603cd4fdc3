"""
Repository classes for the sheet-backed entity store.

Each repository handles list/create/update/delete for its entity type.
"""

from .users import UserRepository
from .clients import ClientRepository
from .projects import ProjectRepository, resolve_project
from .tasks import TaskRepository
from .activities import ActivityRepository
from .project_types import ProjectTypeRepository

__all__ = [
    "UserRepository",
    "ClientRepository",
    "ProjectRepository",
    "resolve_project",
    "TaskRepository",
    "ActivityRepository",
    "ProjectTypeRepository",
]
