"""
Activity repository over the activity sheet.

Columns: id, activity, taskID, projID, userID, date, starttime, endtime
"""

import asyncio
import logging
from typing import Optional, List, Dict

from pydantic import ValidationError

from ...integrations.sheets import SHEET_ACTIVITIES
from ...models import Activity, ActivityCreate, Task, User, avatar_url, sort_newest_first
from .base import SheetRepository, sheet_date, sheet_time, store_operation
from .tasks import TaskRepository
from .users import UserRepository

logger = logging.getLogger(__name__)


class ActivityRepository(SheetRepository):
    """Repository for activity operations."""

    sheet_name = SHEET_ACTIVITIES
    id_prefix = "ACT"
    id_width = 4

    def __init__(self, sheets=None, users: Optional[UserRepository] = None, tasks: Optional[TaskRepository] = None):
        super().__init__(sheets)
        self.users = users or UserRepository(self.sheets)
        self.tasks = tasks or TaskRepository(self.sheets, self.users)

    @staticmethod
    def _to_row(activity_id: str, activity: ActivityCreate) -> List[str]:
        return [
            activity_id,
            activity.activity,
            activity.task_id,
            activity.project_id,
            activity.user_id,
            activity.date.isoformat(),
            activity.start_time,
            activity.end_time,
        ]

    @staticmethod
    def _from_row(row: List[str], users: Dict[str, User], tasks: Dict[str, Task]) -> Optional[Activity]:
        if not row[0]:
            return None

        user = users.get(row[4])
        task = tasks.get(row[2])
        if user is None:
            logger.warning(f"User with ID {row[4]} not found for activity. Skipping.")
            return None
        if task is None:
            logger.warning(f"Task with ID {row[2]} not found for activity. Skipping.")
            return None

        try:
            return Activity(
                id=row[0],
                activity=row[1],
                task_id=row[2],
                task_name=task.name,
                project_id=row[3],
                user_id=row[4],
                user_name=user.name,
                user_avatar=user.avatar,
                date=sheet_date(row[5]),
                start_time=sheet_time(row[6]),
                end_time=sheet_time(row[7]),
            )
        except ValidationError as e:
            logger.warning(f"Could not process activity row {row[0]}: {e}")
            return None

    @store_operation("retrieve activity data")
    async def list(self) -> List[Activity]:
        """Get all resolvable activities, newest first."""
        users, tasks, rows = await asyncio.gather(self.users.list(), self.tasks.list(), self._rows())
        user_map = {u.id: u for u in users}
        task_map = {t.id: t for t in tasks}

        activities = []
        for row in rows:
            activity = self._from_row(row, user_map, task_map)
            if activity:
                activities.append(activity)
        return sort_newest_first(activities)

    @store_operation("create activity")
    async def create(self, data: ActivityCreate) -> Activity:
        activity_id = await self.next_id()
        await self.sheets.append_row(self.sheet_name, self._to_row(activity_id, data))

        users, tasks = await asyncio.gather(self.users.list(), self.tasks.list())
        user = next((u for u in users if u.id == data.user_id), None)
        task = next((t for t in tasks if t.id == data.task_id), None)

        logger.info(f"Created activity {activity_id} on task {data.task_id}")
        return Activity(
            id=activity_id,
            **data.model_dump(),
            user_name=user.name if user else "Unknown User",
            user_avatar=user.avatar if user else avatar_url("U"),
            task_name=task.name if task else "Unknown Task",
        )

    @store_operation("update activity")
    async def update(self, activity: Activity) -> Activity:
        row_number = await self.find_row_number(activity.id)
        await self.sheets.update_row(self.sheet_name, row_number, self._to_row(activity.id, activity))

        logger.info(f"Updated activity {activity.id}")
        return activity

    @store_operation("delete activity")
    async def delete(self, activity_id: str) -> None:
        await self._delete_with_dependents(activity_id, {})
