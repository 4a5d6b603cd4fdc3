"""
Project visibility, permissions and list shaping.

Pure functions over cached collections; nothing here touches the store.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from config import settings

from ..models import (
    Activity,
    Project,
    ProjectPriority,
    ProjectStatus,
    Task,
    TaskStatus,
    User,
    UserRole,
)
from ..utils.datetime_utils import is_overdue

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================
# VISIBILITY AND PERMISSIONS
# ============================================

def visible_projects(user: Optional[User], projects: Iterable[Project], users: Iterable[User]) -> List[Project]:
    """
    Projects a user may see.

    - Admin / Supervisor: everything
    - Senior with a team: projects they lead or belong to, plus any project
      with a member of their team
    - Everyone else: projects they lead or belong to
    """
    if user is None:
        return []

    projects = list(projects)
    if user.role in (UserRole.ADMIN, UserRole.SUPERVISOR):
        return projects

    if user.role == UserRole.SENIOR and user.team:
        team_ids = {u.id for u in users if u.team == user.team}
        return [
            p for p in projects
            if p.involves(user.id) or any(member_id in team_ids for member_id in p.team_member_ids)
        ]

    return [p for p in projects if p.involves(user.id)]


def can_modify_project(user: Optional[User], project: Project) -> bool:
    """Admins can edit any project; otherwise only its team leader."""
    if user is None:
        return False
    return user.role == UserRole.ADMIN or project.team_leader_id == user.id


def can_modify_activity(user: Optional[User], activity: Activity) -> bool:
    """Admins can edit any activity; otherwise only the user who logged it."""
    if user is None:
        return False
    return user.role == UserRole.ADMIN or activity.user_id == user.id


# ============================================
# FILTERING AND PAGINATION
# ============================================

def filter_projects(
    projects: Iterable[Project],
    status: Optional[ProjectStatus] = None,
    priority: Optional[ProjectPriority] = None,
    overdue_only: bool = False,
    query: str = "",
    today: Optional[date] = None,
) -> List[Project]:
    """
    Narrow a project list.

    Args:
        status: Keep only this status (None for all)
        priority: Keep only this priority (None for all)
        overdue_only: Keep only projects past their deadline and not completed
        query: Case-insensitive match on project or client name
    """
    needle = query.strip().lower()
    result = []

    for project in projects:
        if status is not None and project.status != status:
            continue
        if priority is not None and project.priority != priority:
            continue
        if overdue_only and not is_overdue(project, today):
            continue
        if needle and needle not in project.name.lower() and needle not in project.client_name.lower():
            continue
        result.append(project)

    return result


def paginate(items: Sequence[T], page: int, per_page: Optional[int] = None) -> Tuple[List[T], int]:
    """
    Slice one page out of a list.

    per_page defaults to settings.projects_per_page.

    Returns:
        (items on the page, total number of pages)
    """
    if per_page is None:
        per_page = settings.projects_per_page
    if per_page <= 0:
        raise ValueError("per_page must be positive")

    total_pages = (len(items) + per_page - 1) // per_page
    page = max(page, 1)
    start = (page - 1) * per_page
    return list(items[start:start + per_page]), total_pages


def project_progress(project: Project, tasks: Iterable[Task]) -> int:
    """Percentage of the project's tasks that are done (0 with no tasks)."""
    own = [t for t in tasks if t.project_id == project.id]
    if not own:
        return 0
    done = sum(1 for t in own if t.status == TaskStatus.DONE)
    return round(done * 100 / len(own))
