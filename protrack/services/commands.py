"""
Command layer: every write a user can make.

Each command awaits the entity store first and only patches the client
cache once the store has confirmed. A failing store call leaves the cache
exactly as it was; the error reaches the caller unchanged.
"""

import logging
import secrets
from typing import Dict, List, Optional

from ..ai.summarizer import ProjectSummarizer, get_summarizer
from ..cache import ClientCache, PendingValue
from ..database.exceptions import EntityNotFoundError, ReferentialConflictError
from ..database.repositories.projects import UNKNOWN_USER, resolve_project
from ..models import (
    ActionableSuggestions,
    Activity,
    ActivityCreate,
    Client,
    ClientCreate,
    EntityKind,
    Project,
    ProjectCreate,
    ProjectFacts,
    ProjectStatus,
    ProjectSummary,
    RiskAssessment,
    Task,
    TaskCreate,
    TaskFact,
    User,
    UserCreate,
)

logger = logging.getLogger(__name__)


class ProjectTrackerService:
    """Confirm-then-apply commands over the entity store and client cache."""

    def __init__(self, store, cache: ClientCache, summarizer: Optional[ProjectSummarizer] = None):
        self.store = store
        self.cache = cache
        self._summarizer = summarizer
        self._status_values: Dict[str, PendingValue[ProjectStatus]] = {}
        self._status_in_flight: Dict[str, int] = {}

    @property
    def summarizer(self) -> ProjectSummarizer:
        if self._summarizer is None:
            self._summarizer = get_summarizer()
        return self._summarizer

    # ============================================
    # USERS
    # ============================================

    async def create_user(self, data: UserCreate) -> User:
        user = await self.store.users.create(data)
        self.cache.add(EntityKind.USER, user)
        return user

    async def update_user(self, user: User) -> User:
        """Update a user; projects, tasks and activities pick up the new name and avatar."""
        updated = await self.store.users.update(user)
        self.cache.update(EntityKind.USER, updated)
        return updated

    async def delete_user(self, user_id: str) -> None:
        if any(p.involves(user_id) for p in self.cache.projects):
            raise ReferentialConflictError(
                "Cannot delete user. The user is currently assigned to one or more projects."
            )
        await self.store.users.delete(user_id)
        self.cache.remove(EntityKind.USER, user_id)

    # ============================================
    # CLIENTS
    # ============================================

    async def create_client(self, data: ClientCreate) -> Client:
        client = await self.store.clients.create(data)
        self.cache.add(EntityKind.CLIENT, client)
        return client

    async def get_or_create_client(self, name: str) -> Client:
        """Cached client with this name (case-insensitive), created if absent."""
        for client in self.cache.clients:
            if client.name.lower() == name.strip().lower():
                return client
        return await self.create_client(ClientCreate(name=name.strip()))

    async def update_client(self, client: Client) -> Client:
        updated = await self.store.clients.update(client)
        self.cache.update(EntityKind.CLIENT, updated)
        return updated

    async def delete_client(self, client_id: str) -> None:
        if any(p.client_id == client_id for p in self.cache.projects):
            raise ReferentialConflictError(
                "Cannot delete client. The client is associated with one or more projects."
            )
        await self.store.clients.delete(client_id)
        self.cache.remove(EntityKind.CLIENT, client_id)

    # ============================================
    # PROJECTS
    # ============================================

    def _resolve(self, project: Project) -> Project:
        """Recompute client name, leader name and member list from cached users and clients."""
        users = {u.id: u for u in self.cache.users}
        clients = {c.id: c for c in self.cache.clients}
        return resolve_project(project, users, clients)

    async def create_project(self, data: ProjectCreate) -> Project:
        project = await self.store.projects.create(data)
        self.cache.add(EntityKind.PROJECT, project)
        return project

    async def update_project(self, project: Project) -> Project:
        updated = self._resolve(await self.store.projects.update(project))
        self.cache.update(EntityKind.PROJECT, updated)
        return updated

    async def delete_project(self, project_id: str) -> None:
        """Delete a project; its tasks and activities go with it."""
        await self.store.projects.delete(project_id)
        self.cache.remove(EntityKind.PROJECT, project_id)
        self._status_values.pop(project_id, None)

    def project_status(self, project_id: str) -> Optional[ProjectStatus]:
        """Status to display: a pending change if one is in flight, else the cached one."""
        pending = self._status_values.get(project_id)
        if pending is not None:
            return pending.current
        project = self.cache.get(EntityKind.PROJECT, project_id)
        return project.status if project else None

    async def set_project_status(self, project_id: str, status: ProjectStatus) -> Project:
        """
        Change a project's status optimistically.

        project_status() reports the new status while the write is in flight.
        The cache is patched only after the store confirms; on failure the
        displayed status falls back and the error is re-raised.
        """
        project = self.cache.get(EntityKind.PROJECT, project_id)
        if project is None:
            raise EntityNotFoundError(f'Project "{project_id}" is not loaded.')

        pending = self._status_values.setdefault(project_id, PendingValue(project.status))
        self._status_in_flight[project_id] = self._status_in_flight.get(project_id, 0) + 1

        async def confirm() -> ProjectStatus:
            await self.store.projects.update_status(project_id, status)
            return status

        try:
            await pending.optimistic(status, confirm)
        finally:
            self._status_in_flight[project_id] -= 1
            if not self._status_in_flight[project_id]:
                del self._status_in_flight[project_id]
                self._status_values.pop(project_id, None)

        current = self.cache.get(EntityKind.PROJECT, project_id) or project
        updated = current.model_copy(update={"status": status})
        self.cache.update(EntityKind.PROJECT, updated)
        return updated

    async def enable_project_sharing(self, project_id: str) -> Project:
        """Give the project a share token for the public status page (kept if it has one)."""
        project = self.cache.get(EntityKind.PROJECT, project_id)
        if project is None:
            raise EntityNotFoundError(f'Project "{project_id}" is not loaded.')
        if project.share_token:
            return project

        token = secrets.token_urlsafe(16)
        logger.info(f"Enabling status page for project {project_id}")
        return await self.update_project(project.model_copy(update={"share_token": token}))

    # ============================================
    # TASKS
    # ============================================

    def _resolve_task(self, task: Task) -> Task:
        if not task.user_id:
            return task.model_copy(update={"user_name": None, "user_avatar": None})
        user = self.cache.get(EntityKind.USER, task.user_id)
        if user is None:
            return task.model_copy(update={"user_name": UNKNOWN_USER})
        return task.model_copy(update={"user_name": user.name, "user_avatar": user.avatar})

    async def create_task(self, data: TaskCreate) -> Task:
        task = await self.store.tasks.create(data)
        self.cache.add(EntityKind.TASK, task)
        return task

    async def update_task(self, task: Task) -> Task:
        """Update a task; activities logged against it pick up a new name."""
        updated = self._resolve_task(await self.store.tasks.update(task))
        self.cache.update(EntityKind.TASK, updated)
        return updated

    async def delete_task(self, task_id: str) -> None:
        await self.store.tasks.delete(task_id)
        self.cache.remove(EntityKind.TASK, task_id)

    # ============================================
    # ACTIVITIES
    # ============================================

    def _resolve_activity(self, activity: Activity) -> Activity:
        patch = {}
        task = self.cache.get(EntityKind.TASK, activity.task_id)
        if task is not None:
            patch["task_name"] = task.name
        user = self.cache.get(EntityKind.USER, activity.user_id)
        if user is not None:
            patch["user_name"] = user.name
            patch["user_avatar"] = user.avatar
        return activity.model_copy(update=patch) if patch else activity

    async def create_activity(self, data: ActivityCreate) -> Activity:
        activity = await self.store.activities.create(data)
        self.cache.add(EntityKind.ACTIVITY, activity)
        return activity

    async def update_activity(self, activity: Activity) -> Activity:
        updated = self._resolve_activity(await self.store.activities.update(activity))
        self.cache.update(EntityKind.ACTIVITY, updated)
        return updated

    async def delete_activity(self, activity_id: str) -> None:
        await self.store.activities.delete(activity_id)
        self.cache.remove(EntityKind.ACTIVITY, activity_id)

    # ============================================
    # SUMMARIES
    # ============================================

    def project_facts(self, project_id: str) -> ProjectFacts:
        """Summarizer input for a cached project."""
        project = self.cache.get(EntityKind.PROJECT, project_id)
        if project is None:
            raise EntityNotFoundError(f'Project "{project_id}" is not loaded.')

        return ProjectFacts(
            project_name=project.name,
            description=project.description,
            team_members=[m.name for m in project.team_members],
            start_date=project.start_date.isoformat(),
            deadline=project.deadline.isoformat(),
            current_status=project.status.value,
        )

    def task_facts(self, project_id: str) -> List[TaskFact]:
        return [
            TaskFact(name=t.name, description=t.description, status=t.status.value)
            for t in self.cache.tasks_for_project(project_id)
        ]

    async def generate_project_summary(self, project_id: str) -> ProjectSummary:
        """AI summary of a project and its tasks. Never cached."""
        facts = self.project_facts(project_id)
        return await self.summarizer.generate_project_summary(facts, self.task_facts(project_id))

    async def suggest_improvements(self, project_id: str) -> ActionableSuggestions:
        facts = self.project_facts(project_id)
        return await self.summarizer.provide_actionable_suggestions(facts)

    async def assess_project_risks(self, project_id: str) -> RiskAssessment:
        facts = self.project_facts(project_id)
        return await self.summarizer.assess_risks(facts, self.task_facts(project_id))
