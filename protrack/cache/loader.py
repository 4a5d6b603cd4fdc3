"""
Two-tier cache loading.

Users and clients are needed before anything can render, so they load
first and block. Projects, tasks and activities follow in a background
task with their own loading flags.

Initial load: an essential-tier failure propagates to the caller.
Refetch: the failure is reported and the previous collections stay.
Secondary failures are always reported only; the essential tier is kept.
"""

import asyncio
import logging
from typing import Callable, Optional

from ..models import EntityKind
from .client_cache import ClientCache

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, Exception], None]


class CacheLoader:
    """Fill a ClientCache from the entity store."""

    def __init__(self, store, cache: ClientCache, on_error: Optional[ErrorCallback] = None):
        self.store = store
        self.cache = cache
        self.on_error = on_error

        self.is_loading = False
        self.is_projects_loading = False
        self.is_tasks_loading = False
        self.is_activities_loading = False

        self._secondary_task: Optional[asyncio.Task] = None

    async def load(self, refetch: bool = False) -> None:
        """
        Run the essential tier, then schedule the secondary tier.

        Returns once users and clients are in the cache. Await
        wait_secondary() for the rest.
        """
        label = "refetch" if refetch else "initial load"
        self.is_loading = True
        if refetch:
            self._set_secondary_flags(True)
        logger.info(f"Cache {label}: fetching users and clients")

        try:
            users, clients = await asyncio.gather(
                self.store.users.list(),
                self.store.clients.list(),
            )
        except Exception as e:
            self.is_loading = False
            self._set_secondary_flags(False)
            self.cache.stats.record_load(success=False)
            logger.error(f"Cache {label} failed on users/clients: {e}")
            if not refetch:
                raise
            self._report("Could not refresh data. Please try again.", e)
            return

        self.cache.replace_collections({
            EntityKind.USER: users,
            EntityKind.CLIENT: clients,
        })
        self.is_loading = False
        logger.info(f"Cache {label}: {len(users)} users, {len(clients)} clients loaded")

        self._set_secondary_flags(True)
        self._secondary_task = asyncio.create_task(self._load_secondary(label))

    async def refetch(self) -> None:
        """Reload everything; readers keep the old collections until each tier lands."""
        await self.load(refetch=True)

    async def wait_secondary(self) -> None:
        """Wait for the background tier started by the last load."""
        if self._secondary_task is not None:
            await self._secondary_task

    @property
    def is_busy(self) -> bool:
        return (
            self.is_loading
            or self.is_projects_loading
            or self.is_tasks_loading
            or self.is_activities_loading
        )

    async def _load_secondary(self, label: str) -> None:
        try:
            projects, tasks, activities = await asyncio.gather(
                self.store.projects.list(),
                self.store.tasks.list(),
                self.store.activities.list(),
            )
        except Exception as e:
            self.cache.stats.record_load(success=False)
            logger.error(f"Cache {label} failed on projects/tasks/activities: {e}")
            self._report("Failed to load project data.", e)
            return
        finally:
            self._set_secondary_flags(False)

        self.cache.replace_collections({
            EntityKind.PROJECT: projects,
            EntityKind.TASK: tasks,
            EntityKind.ACTIVITY: activities,
        })
        self.cache.stats.record_load(success=True)
        logger.info(
            f"Cache {label}: {len(projects)} projects, {len(tasks)} tasks, "
            f"{len(activities)} activities loaded"
        )

    def _set_secondary_flags(self, value: bool) -> None:
        self.is_projects_loading = value
        self.is_tasks_loading = value
        self.is_activities_loading = value

    def _report(self, message: str, error: Exception) -> None:
        if self.on_error is None:
            return
        try:
            self.on_error(message, error)
        except Exception as callback_error:
            logger.warning(f"Load error callback raised: {callback_error}")
