"""
Project repository over the project sheet.

Columns: id, name, description, clientID, teamLeaderId, teamMemberIds,
         startDate, deadline, status, priority, type, shareToken

Projects store references only. Client name, leader name and member
objects are resolved against the user and client sheets on every read.
"""

import asyncio
import logging
from typing import Optional, List, Dict, Union

from pydantic import ValidationError

from ...integrations.sheets import SHEET_PROJECTS, SHEET_TASKS, SHEET_ACTIVITIES
from ...models import Client, Project, ProjectCreate, ProjectStatus, User
from .base import SheetRepository, sheet_date, split_ids, store_operation
from .clients import ClientRepository
from .users import UserRepository

logger = logging.getLogger(__name__)

STATUS_COLUMN = 9
UNKNOWN_CLIENT = "Unknown Client"
UNKNOWN_USER = "Unknown User"


def resolve_project(
    project: Union[Project, ProjectCreate],
    users: Dict[str, User],
    clients: Dict[str, Client],
    project_id: Optional[str] = None,
) -> Project:
    """Fill a project's display fields from id-keyed user and client maps."""
    data = project.model_dump(exclude={"client_name", "team_leader", "team_members"})
    if project_id is not None:
        data["id"] = project_id

    leader = users.get(project.team_leader_id)
    client = clients.get(project.client_id)

    return Project(
        **data,
        client_name=client.name if client else UNKNOWN_CLIENT,
        team_leader=leader.name if leader else UNKNOWN_USER,
        team_members=[users[uid] for uid in project.team_member_ids if uid in users],
    )


class ProjectRepository(SheetRepository):
    """Repository for project operations."""

    sheet_name = SHEET_PROJECTS
    id_prefix = "PROJ"
    id_width = 3

    def __init__(self, sheets=None, users: Optional[UserRepository] = None, clients: Optional[ClientRepository] = None):
        super().__init__(sheets)
        self.users = users or UserRepository(self.sheets)
        self.clients = clients or ClientRepository(self.sheets)

    @staticmethod
    def _to_row(project_id: str, project: Union[Project, ProjectCreate]) -> List[str]:
        return [
            project_id,
            project.name,
            project.description,
            project.client_id,
            project.team_leader_id,
            ",".join(project.team_member_ids),
            project.start_date.isoformat(),
            project.deadline.isoformat(),
            project.status.value,
            project.priority.value,
            project.type or "",
            project.share_token or "",
        ]

    @staticmethod
    def _from_row(row: List[str], users: Dict[str, User], clients: Dict[str, Client]) -> Optional[Project]:
        project_id, name, client_id, leader_id = row[0], row[1], row[3], row[4]
        if not project_id:
            return None

        if not name or not row[6] or not row[7] or not leader_id or not client_id:
            logger.warning(f"Skipping incomplete project data for project ID {project_id}: {row}")
            return None

        if leader_id not in users:
            logger.warning(f"Team leader with ID '{leader_id}' not found for project '{name}'. Skipping project.")
            return None

        if client_id not in clients:
            logger.warning(f"Client with ID '{client_id}' not found for project '{name}'. Skipping project.")
            return None

        try:
            raw = ProjectCreate(
                name=name,
                description=row[2],
                client_id=client_id,
                team_leader_id=leader_id,
                team_member_ids=split_ids(row[5]),
                start_date=sheet_date(row[6]),
                deadline=sheet_date(row[7]),
                status=row[8],
                priority=row[9],
                type=row[10] or None,
                share_token=row[11] or None,
            )
        except ValidationError as e:
            logger.warning(f"Could not process project row {project_id}: {e}")
            return None

        return resolve_project(raw, users, clients, project_id=project_id)

    async def _lookups(self):
        users, clients = await asyncio.gather(self.users.list(), self.clients.list())
        return {u.id: u for u in users}, {c.id: c for c in clients}

    @store_operation("retrieve project data")
    async def list(self) -> List[Project]:
        """Get all resolvable projects, in sheet order."""
        (users, clients), rows = await asyncio.gather(self._lookups(), self._rows())

        projects = []
        for row in rows:
            project = self._from_row(row, users, clients)
            if project:
                projects.append(project)
        return projects

    @store_operation("retrieve project data")
    async def get_by_id(self, project_id: str) -> Optional[Project]:
        for project in await self.list():
            if project.id == project_id:
                return project
        return None

    @store_operation("retrieve project data")
    async def get_by_share_token(self, token: str) -> Optional[Project]:
        """Project exposed through a public status link."""
        if not token:
            return None
        for project in await self.list():
            if project.share_token == token:
                return project
        return None

    @store_operation("create project")
    async def create(self, data: ProjectCreate) -> Project:
        project_id = await self.next_id()
        await self.sheets.append_row(self.sheet_name, self._to_row(project_id, data))

        users, clients = await self._lookups()
        logger.info(f"Created project {project_id} ({data.name})")
        return resolve_project(data, users, clients, project_id=project_id)

    @store_operation("update project")
    async def update(self, project: Project) -> Project:
        """Overwrite a project's row and return it with display fields recomputed."""
        row_number = await self.find_row_number(project.id)
        await self.sheets.update_row(self.sheet_name, row_number, self._to_row(project.id, project))

        users, clients = await self._lookups()
        logger.info(f"Updated project {project.id}")
        return resolve_project(project, users, clients)

    @store_operation("update project status")
    async def update_status(self, project_id: str, status: ProjectStatus) -> None:
        row_number = await self.find_row_number(project_id)
        await self.sheets.update_cell(self.sheet_name, row_number, STATUS_COLUMN, status.value)
        logger.info(f"Project {project_id} status -> {status.value}")

    @store_operation("delete project data")
    async def delete(self, project_id: str) -> None:
        """Delete a project together with its tasks and activities."""
        await self._delete_with_dependents(
            project_id, {SHEET_TASKS: 3, SHEET_ACTIVITIES: 3}
        )
