"""
Tests for protrack/cache/loader.py

Two-tier loading: users/clients first, then projects/tasks/activities in
the background, with the failure rules for initial load and refetch.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from protrack.cache import CacheLoader, ClientCache
from protrack.database.exceptions import StoreOperationError
from protrack.models import EntityKind

from factories import make_activity, make_client, make_project, make_task, make_user


@pytest.fixture
def populated_store(mock_store):
    mock_store.users.list = AsyncMock(return_value=[make_user("USER-001", "Alice")])
    mock_store.clients.list = AsyncMock(return_value=[make_client()])
    mock_store.projects.list = AsyncMock(return_value=[make_project()])
    mock_store.tasks.list = AsyncMock(return_value=[make_task()])
    mock_store.activities.list = AsyncMock(return_value=[make_activity()])
    return mock_store


class TestInitialLoad:
    """First load of an empty cache."""

    @pytest.mark.asyncio
    async def test_load_fills_all_collections(self, populated_store):
        cache = ClientCache()
        loader = CacheLoader(populated_store, cache)

        await loader.load()
        await loader.wait_secondary()

        assert [u.id for u in cache.users] == ["USER-001"]
        assert len(cache.clients) == 1
        assert len(cache.projects) == 1
        assert len(cache.tasks) == 1
        assert len(cache.activities) == 1
        assert not loader.is_busy
        assert cache.stats.loads == 1

    @pytest.mark.asyncio
    async def test_essential_tier_ready_before_secondary(self, populated_store):
        release = asyncio.Event()

        async def slow_projects():
            await release.wait()
            return [make_project()]

        populated_store.projects.list = slow_projects
        cache = ClientCache()
        loader = CacheLoader(populated_store, cache)

        await loader.load()

        assert not loader.is_loading
        assert loader.is_projects_loading
        assert cache.is_loaded(EntityKind.USER)
        assert not cache.is_loaded(EntityKind.PROJECT)

        release.set()
        await loader.wait_secondary()
        assert cache.is_loaded(EntityKind.PROJECT)
        assert not loader.is_projects_loading

    @pytest.mark.asyncio
    async def test_essential_failure_propagates(self, populated_store):
        populated_store.clients.list = AsyncMock(side_effect=StoreOperationError("Could not retrieve client data."))
        cache = ClientCache()
        loader = CacheLoader(populated_store, cache)

        with pytest.raises(StoreOperationError):
            await loader.load()

        assert not loader.is_loading
        assert not cache.is_loaded(EntityKind.USER)
        populated_store.projects.list.assert_not_called()

    @pytest.mark.asyncio
    async def test_secondary_failure_is_reported_and_keeps_essential(self, populated_store):
        populated_store.tasks.list = AsyncMock(side_effect=StoreOperationError("Could not retrieve task data."))
        on_error = MagicMock()
        cache = ClientCache()
        loader = CacheLoader(populated_store, cache, on_error=on_error)

        await loader.load()
        await loader.wait_secondary()

        assert cache.is_loaded(EntityKind.USER)
        assert not cache.is_loaded(EntityKind.PROJECT)
        assert not loader.is_tasks_loading
        on_error.assert_called_once()
        assert on_error.call_args[0][0] == "Failed to load project data."


class TestRefetch:
    """Reloading an already-populated cache."""

    @pytest.mark.asyncio
    async def test_refetch_replaces_collections(self, populated_store):
        cache = ClientCache()
        loader = CacheLoader(populated_store, cache)
        await loader.load()
        await loader.wait_secondary()

        populated_store.users.list = AsyncMock(return_value=[make_user("USER-001", "Alicia")])
        populated_store.projects.list = AsyncMock(return_value=[])

        await loader.refetch()
        await loader.wait_secondary()

        assert cache.users[0].name == "Alicia"
        assert cache.projects == ()

    @pytest.mark.asyncio
    async def test_refetch_raises_every_flag_up_front(self, populated_store):
        cache = ClientCache()
        loader = CacheLoader(populated_store, cache)
        await loader.load()
        await loader.wait_secondary()

        release = asyncio.Event()

        async def slow_users():
            await release.wait()
            return [make_user("USER-001", "Alice")]

        populated_store.users.list = slow_users
        refetch = asyncio.create_task(loader.refetch())
        await asyncio.sleep(0)

        assert loader.is_loading
        assert loader.is_projects_loading
        assert loader.is_tasks_loading
        assert loader.is_activities_loading

        release.set()
        await refetch
        await loader.wait_secondary()
        assert not loader.is_busy

    @pytest.mark.asyncio
    async def test_refetch_failure_clears_every_flag(self, populated_store):
        loader = CacheLoader(populated_store, ClientCache())
        populated_store.users.list = AsyncMock(side_effect=StoreOperationError("Could not retrieve user data."))

        await loader.refetch()

        assert not loader.is_busy

    @pytest.mark.asyncio
    async def test_refetch_failure_keeps_previous_state(self, populated_store):
        on_error = MagicMock()
        cache = ClientCache()
        loader = CacheLoader(populated_store, cache, on_error=on_error)
        await loader.load()
        await loader.wait_secondary()
        before = {kind: cache.all(kind) for kind in EntityKind}

        populated_store.users.list = AsyncMock(side_effect=StoreOperationError("Could not retrieve user data."))

        await loader.refetch()
        await loader.wait_secondary()

        assert {kind: cache.all(kind) for kind in EntityKind} == before
        assert not loader.is_loading
        on_error.assert_called_once()

    @pytest.mark.asyncio
    async def test_error_callback_failure_does_not_escape(self, populated_store):
        populated_store.users.list = AsyncMock(side_effect=StoreOperationError("boom"))
        loader = CacheLoader(populated_store, ClientCache(), on_error=MagicMock(side_effect=RuntimeError("ui gone")))

        await loader.refetch()

        assert not loader.is_loading
