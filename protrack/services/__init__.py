"""
Services for business logic.
"""

from .commands import ProjectTrackerService
from .visibility import (
    visible_projects,
    can_modify_project,
    can_modify_activity,
    filter_projects,
    paginate,
    project_progress,
)

__all__ = [
    "ProjectTrackerService",
    "visible_projects",
    "can_modify_project",
    "can_modify_activity",
    "filter_projects",
    "paginate",
    "project_progress",
]
