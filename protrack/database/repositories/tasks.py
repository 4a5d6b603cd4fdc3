"""
Task repository over the task sheet.

Columns: id, name, description, projectID, userID, status
"""

import asyncio
import logging
from typing import Optional, List, Dict

from pydantic import ValidationError

from ...integrations.sheets import SHEET_TASKS, SHEET_ACTIVITIES
from ...models import Task, TaskCreate, User
from .base import SheetRepository, store_operation
from .users import UserRepository

logger = logging.getLogger(__name__)


class TaskRepository(SheetRepository):
    """Repository for task operations."""

    sheet_name = SHEET_TASKS
    id_prefix = "TASK"
    id_width = 4

    def __init__(self, sheets=None, users: Optional[UserRepository] = None):
        super().__init__(sheets)
        self.users = users or UserRepository(self.sheets)

    @staticmethod
    def _to_row(task_id: str, task: TaskCreate) -> List[str]:
        return [
            task_id,
            task.name,
            task.description,
            task.project_id,
            task.user_id or "",
            task.status.value,
        ]

    @staticmethod
    def _from_row(row: List[str], users: Dict[str, User]) -> Optional[Task]:
        if not row[0] or not row[1]:
            logger.warning(f"Skipping incomplete task row: {row}")
            return None

        user = users.get(row[4]) if row[4] else None
        if row[4] and user is None:
            logger.warning(f"User with ID {row[4]} not found for task {row[0]}")

        try:
            return Task(
                id=row[0],
                name=row[1],
                description=row[2],
                project_id=row[3],
                user_id=row[4] or None,
                status=row[5],
                user_name=user.name if user else None,
                user_avatar=user.avatar if user else None,
            )
        except ValidationError as e:
            logger.warning(f"Could not process task row {row[0]}: {e}")
            return None

    @store_operation("retrieve task data")
    async def list(self) -> List[Task]:
        users, rows = await asyncio.gather(self.users.list(), self._rows())
        user_map = {u.id: u for u in users}

        tasks = []
        for row in rows:
            task = self._from_row(row, user_map)
            if task:
                tasks.append(task)
        return tasks

    @store_operation("create task")
    async def create(self, data: TaskCreate) -> Task:
        task_id = await self.next_id()
        await self.sheets.append_row(self.sheet_name, self._to_row(task_id, data))

        user = None
        if data.user_id:
            user = next((u for u in await self.users.list() if u.id == data.user_id), None)

        logger.info(f"Created task {task_id} in project {data.project_id}")
        return Task(
            id=task_id,
            **data.model_dump(),
            user_name=user.name if user else ("Unknown User" if data.user_id else None),
            user_avatar=user.avatar if user else None,
        )

    @store_operation("update task")
    async def update(self, task: Task) -> Task:
        row_number = await self.find_row_number(task.id)
        await self.sheets.update_row(self.sheet_name, row_number, self._to_row(task.id, task))

        logger.info(f"Updated task {task.id}")
        return task

    @store_operation("delete task data")
    async def delete(self, task_id: str) -> None:
        """Delete a task together with its activities."""
        await self._delete_with_dependents(task_id, {SHEET_ACTIVITIES: 2})
