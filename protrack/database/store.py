"""
Entity store: the five repositories behind one object.

Injected into the cache loader and the command layer so both can be
exercised against a fake in tests.
"""

import logging
from typing import Optional

from ..integrations.sheets import GoogleSheetsIntegration, get_sheets_integration
from ..models import EntityKind
from .repositories import (
    UserRepository,
    ClientRepository,
    ProjectRepository,
    TaskRepository,
    ActivityRepository,
    ProjectTypeRepository,
)

logger = logging.getLogger(__name__)


class EntityStore:
    """Remote tabular store, one sheet per entity."""

    def __init__(self, sheets: Optional[GoogleSheetsIntegration] = None):
        self.sheets = sheets or get_sheets_integration()
        self.users = UserRepository(self.sheets)
        self.clients = ClientRepository(self.sheets)
        self.projects = ProjectRepository(self.sheets, self.users, self.clients)
        self.tasks = TaskRepository(self.sheets, self.users)
        self.activities = ActivityRepository(self.sheets, self.users, self.tasks)
        self.project_types = ProjectTypeRepository(self.sheets)

    def repository(self, kind: EntityKind):
        """Repository for one of the five cached entity kinds."""
        return {
            EntityKind.USER: self.users,
            EntityKind.CLIENT: self.clients,
            EntityKind.PROJECT: self.projects,
            EntityKind.TASK: self.tasks,
            EntityKind.ACTIVITY: self.activities,
        }[kind]


_store: Optional[EntityStore] = None


def get_entity_store() -> EntityStore:
    """Get the process-wide entity store."""
    global _store
    if _store is None:
        _store = EntityStore()
    return _store
