"""Task data model."""

from enum import Enum
from typing import Optional

from .base import CamelModel


class TaskStatus(str, Enum):
    """Task status states."""
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class TaskCreate(CamelModel):
    name: str
    description: str = ""
    project_id: str
    status: TaskStatus = TaskStatus.TODO
    user_id: Optional[str] = None


class Task(TaskCreate):
    """
    A unit of work inside a project.

    user_name and user_avatar denormalize the assigned user, when there is one.
    """
    id: str
    user_name: Optional[str] = None
    user_avatar: Optional[str] = None
