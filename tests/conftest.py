"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from protrack.cache import ClientCache
from protrack.models import EntityKind, ProjectStatus, TaskStatus, Team, UserRole

from factories import make_activity, make_client, make_project, make_task, make_user

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


@pytest.fixture
def alice():
    return make_user("USER-001", "Alice", role=UserRole.ADMIN, team=Team.TEAM_1)


@pytest.fixture
def bob():
    return make_user("USER-002", "Bob", team=Team.TEAM_1)


@pytest.fixture
def acme():
    return make_client("CLIENT-001", "Acme")


@pytest.fixture
def seeded_cache(alice, bob, acme):
    """
    Cache with two users, one client, one project led by Alice with Bob as
    member, two tasks assigned to Bob and one activity on each task.
    """
    project = make_project("PROJ-001", leader=alice, members=[bob], client=acme,
                           status=ProjectStatus.IN_PROGRESS)
    t1 = make_task("TASK-0001", user=bob, status=TaskStatus.DONE)
    t2 = make_task("TASK-0002", user=bob)
    a1 = make_activity("ACT-0001", task=t1, user=bob, day=date(2026, 3, 1))
    a2 = make_activity("ACT-0002", task=t2, user=bob, day=date(2026, 3, 2))

    cache = ClientCache()
    cache.replace_collections({
        EntityKind.USER: [alice, bob],
        EntityKind.CLIENT: [acme],
        EntityKind.PROJECT: [project],
        EntityKind.TASK: [t1, t2],
        EntityKind.ACTIVITY: [a1, a2],
    })
    return cache


@pytest.fixture
def mock_store():
    """Entity store whose repositories are all AsyncMocks returning empty lists."""
    store = MagicMock()
    for name in ("users", "clients", "projects", "tasks", "activities", "project_types"):
        repo = MagicMock()
        repo.list = AsyncMock(return_value=[])
        repo.create = AsyncMock()
        repo.update = AsyncMock()
        repo.delete = AsyncMock(return_value=None)
        setattr(store, name, repo)
    store.projects.update_status = AsyncMock(return_value=None)
    return store
