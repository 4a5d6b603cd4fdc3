"""
Tests for protrack/services/commands.py

Every command awaits the store before touching the cache; failures leave
the cache unchanged.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from protrack.ai import SummarizerError
from protrack.database.exceptions import (
    EntityNotFoundError,
    ReferentialConflictError,
    StoreOperationError,
)
from protrack.models import (
    ClientCreate,
    EntityKind,
    ActionableSuggestions,
    ProjectStatus,
    ProjectSummary,
    RiskAssessment,
    TaskCreate,
    UserCreate,
)
from protrack.services import ProjectTrackerService

from factories import make_client, make_task, make_user


@pytest.fixture
def summarizer():
    summarizer = MagicMock()
    summarizer.generate_project_summary = AsyncMock(return_value=ProjectSummary(
        executive_summary="On track.",
        risk_assessment="Low.",
        actionable_suggestions="Keep going.",
    ))
    summarizer.provide_actionable_suggestions = AsyncMock(return_value=ActionableSuggestions(
        risk_assessment="Low.",
        bottleneck_analysis="None.",
        suggestions=["Add tests."],
        executive_summary="Fine.",
    ))
    summarizer.assess_risks = AsyncMock(return_value=RiskAssessment(
        risk_assessment="Deadline is close.",
        bottleneck_analysis="One developer.",
    ))
    return summarizer


@pytest.fixture
def service(mock_store, seeded_cache, summarizer):
    return ProjectTrackerService(mock_store, seeded_cache, summarizer=summarizer)


def snapshot(cache):
    return {kind: cache.all(kind) for kind in EntityKind}


class TestUserCommands:

    @pytest.mark.asyncio
    async def test_create_user_adds_after_store(self, service, mock_store, seeded_cache):
        created = make_user("USER-003", "Carol")
        mock_store.users.create = AsyncMock(return_value=created)

        result = await service.create_user(UserCreate(username="carol", name="Carol", email="c@example.com"))

        assert result == created
        assert seeded_cache.get(EntityKind.USER, "USER-003") == created

    @pytest.mark.asyncio
    async def test_update_user_cascades(self, service, mock_store, seeded_cache, bob):
        renamed = bob.model_copy(update={"name": "Robert"})
        mock_store.users.update = AsyncMock(return_value=renamed)

        await service.update_user(renamed)

        assert seeded_cache.projects[0].team_members[0].name == "Robert"
        assert {t.user_name for t in seeded_cache.tasks} == {"Robert"}

    @pytest.mark.asyncio
    async def test_update_failure_leaves_cache(self, service, mock_store, seeded_cache, bob):
        mock_store.users.update = AsyncMock(side_effect=EntityNotFoundError("missing"))
        before = snapshot(seeded_cache)

        with pytest.raises(EntityNotFoundError):
            await service.update_user(bob.model_copy(update={"name": "Robert"}))

        assert snapshot(seeded_cache) == before

    @pytest.mark.asyncio
    async def test_delete_referenced_user_rejected_before_store(self, service, mock_store, seeded_cache):
        with pytest.raises(ReferentialConflictError):
            await service.delete_user("USER-002")

        mock_store.users.delete.assert_not_called()
        assert seeded_cache.get(EntityKind.USER, "USER-002") is not None

    @pytest.mark.asyncio
    async def test_delete_unreferenced_user(self, service, mock_store, seeded_cache):
        seeded_cache.add_to_cache(make_user("USER-009", "Zed"))

        await service.delete_user("USER-009")

        mock_store.users.delete.assert_awaited_once_with("USER-009")
        assert seeded_cache.get(EntityKind.USER, "USER-009") is None


class TestClientCommands:

    @pytest.mark.asyncio
    async def test_delete_referenced_client_rejected(self, service, mock_store, seeded_cache):
        with pytest.raises(ReferentialConflictError):
            await service.delete_client("CLIENT-001")

        mock_store.clients.delete.assert_not_called()
        assert [c.id for c in seeded_cache.clients] == ["CLIENT-001"]

    @pytest.mark.asyncio
    async def test_delete_client_store_failure(self, service, mock_store, seeded_cache):
        seeded_cache.add_to_cache(make_client("CLIENT-002", "Globex"))
        mock_store.clients.delete = AsyncMock(side_effect=StoreOperationError("Could not delete client."))

        with pytest.raises(StoreOperationError):
            await service.delete_client("CLIENT-002")

        assert seeded_cache.get(EntityKind.CLIENT, "CLIENT-002") is not None

    @pytest.mark.asyncio
    async def test_get_or_create_client_uses_cache_case_insensitively(self, service, mock_store):
        client = await service.get_or_create_client("  acme ")
        assert client.id == "CLIENT-001"
        mock_store.clients.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_or_create_client_creates(self, service, mock_store, seeded_cache):
        mock_store.clients.create = AsyncMock(return_value=make_client("CLIENT-002", "Globex"))

        await service.get_or_create_client("Globex")

        assert mock_store.clients.create.await_args[0][0] == ClientCreate(name="Globex")
        assert seeded_cache.get(EntityKind.CLIENT, "CLIENT-002").name == "Globex"


class TestProjectCommands:

    @pytest.mark.asyncio
    async def test_update_project_recomputes_display_fields(self, service, mock_store, seeded_cache, bob):
        project = seeded_cache.get(EntityKind.PROJECT, "PROJ-001")
        raw = project.model_copy(update={"team_leader_id": bob.id, "team_leader": "", "team_member_ids": [], "team_members": []})
        mock_store.projects.update = AsyncMock(return_value=raw)

        updated = await service.update_project(raw)

        assert updated.team_leader == "Bob"
        assert updated.client_name == "Acme"
        assert seeded_cache.get(EntityKind.PROJECT, "PROJ-001").team_leader == "Bob"

    @pytest.mark.asyncio
    async def test_delete_project_cascades(self, service, mock_store, seeded_cache):
        await service.delete_project("PROJ-001")

        mock_store.projects.delete.assert_awaited_once_with("PROJ-001")
        assert seeded_cache.projects == ()
        assert seeded_cache.tasks == ()
        assert seeded_cache.activities == ()

    @pytest.mark.asyncio
    async def test_delete_project_not_found(self, service, mock_store, seeded_cache):
        mock_store.projects.delete = AsyncMock(side_effect=EntityNotFoundError('Item with ID "PROJ-001" not found'))
        before = snapshot(seeded_cache)

        with pytest.raises(EntityNotFoundError):
            await service.delete_project("PROJ-001")

        assert snapshot(seeded_cache) == before

    @pytest.mark.asyncio
    async def test_set_status_shows_pending_until_confirmed(self, service, mock_store, seeded_cache):
        seen = []

        async def confirm(project_id, status):
            seen.append((service.project_status(project_id), seeded_cache.projects[0].status))

        mock_store.projects.update_status = AsyncMock(side_effect=confirm)

        updated = await service.set_project_status("PROJ-001", ProjectStatus.BLOCKED)

        assert seen == [(ProjectStatus.BLOCKED, ProjectStatus.IN_PROGRESS)]
        assert updated.status == ProjectStatus.BLOCKED
        assert seeded_cache.projects[0].status == ProjectStatus.BLOCKED
        assert service.project_status("PROJ-001") == ProjectStatus.BLOCKED

    @pytest.mark.asyncio
    async def test_set_status_failure_rolls_back(self, service, mock_store, seeded_cache):
        mock_store.projects.update_status = AsyncMock(side_effect=StoreOperationError("Could not update project status."))

        with pytest.raises(StoreOperationError):
            await service.set_project_status("PROJ-001", ProjectStatus.COMPLETED)

        assert service.project_status("PROJ-001") == ProjectStatus.IN_PROGRESS
        assert seeded_cache.projects[0].status == ProjectStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_overlapping_status_changes_keep_the_later_pending_value(self, service, mock_store, seeded_cache):
        first_sent = asyncio.Event()
        fail_first = asyncio.Event()
        finish_second = asyncio.Event()

        async def confirm(project_id, status):
            if status == ProjectStatus.BLOCKED:
                first_sent.set()
                await fail_first.wait()
                raise StoreOperationError("Could not update project status.")
            await finish_second.wait()

        mock_store.projects.update_status = AsyncMock(side_effect=confirm)

        first = asyncio.create_task(service.set_project_status("PROJ-001", ProjectStatus.BLOCKED))
        await first_sent.wait()
        second = asyncio.create_task(service.set_project_status("PROJ-001", ProjectStatus.COMPLETED))
        await asyncio.sleep(0)
        assert service.project_status("PROJ-001") == ProjectStatus.COMPLETED

        fail_first.set()
        with pytest.raises(StoreOperationError):
            await first
        assert service.project_status("PROJ-001") == ProjectStatus.COMPLETED
        assert seeded_cache.projects[0].status == ProjectStatus.IN_PROGRESS

        finish_second.set()
        await second
        assert service.project_status("PROJ-001") == ProjectStatus.COMPLETED
        assert seeded_cache.projects[0].status == ProjectStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_set_status_unknown_project(self, service):
        with pytest.raises(EntityNotFoundError):
            await service.set_project_status("PROJ-404", ProjectStatus.COMPLETED)

    @pytest.mark.asyncio
    async def test_enable_sharing_assigns_token(self, service, mock_store, seeded_cache):
        mock_store.projects.update = AsyncMock(side_effect=lambda project: project)

        shared = await service.enable_project_sharing("PROJ-001")

        assert shared.share_token
        assert seeded_cache.projects[0].share_token == shared.share_token

    @pytest.mark.asyncio
    async def test_enable_sharing_keeps_existing_token(self, service, mock_store, seeded_cache):
        project = seeded_cache.projects[0].model_copy(update={"share_token": "abc"})
        seeded_cache.update_in_cache(project)

        shared = await service.enable_project_sharing("PROJ-001")

        assert shared.share_token == "abc"
        mock_store.projects.update.assert_not_called()


class TestTaskAndActivityCommands:

    @pytest.mark.asyncio
    async def test_create_task(self, service, mock_store, seeded_cache, bob):
        created = make_task("TASK-0003", user=bob)
        mock_store.tasks.create = AsyncMock(return_value=created)

        await service.create_task(TaskCreate(name="New", project_id="PROJ-001", user_id=bob.id))

        assert seeded_cache.get(EntityKind.TASK, "TASK-0003") == created

    @pytest.mark.asyncio
    async def test_update_task_reassigns_and_renames_activities(self, service, mock_store, seeded_cache, alice):
        task = seeded_cache.get(EntityKind.TASK, "TASK-0001")
        changed = task.model_copy(update={"name": "Renamed", "user_id": alice.id})
        mock_store.tasks.update = AsyncMock(return_value=changed)

        updated = await service.update_task(changed)

        assert updated.user_name == "Alice"
        assert [a.task_name for a in seeded_cache.activities if a.task_id == "TASK-0001"] == ["Renamed"]

    @pytest.mark.asyncio
    async def test_delete_task_evicts_activities(self, service, seeded_cache):
        await service.delete_task("TASK-0001")
        assert all(a.task_id != "TASK-0001" for a in seeded_cache.activities)

    @pytest.mark.asyncio
    async def test_update_activity_refreshes_names(self, service, mock_store, seeded_cache):
        activity = seeded_cache.get(EntityKind.ACTIVITY, "ACT-0001")
        moved = activity.model_copy(update={"task_id": "TASK-0002", "task_name": "stale"})
        mock_store.activities.update = AsyncMock(return_value=moved)

        updated = await service.update_activity(moved)

        assert updated.task_name == "Task TASK-0002"


class TestSummaries:

    @pytest.mark.asyncio
    async def test_summary_uses_cached_facts(self, service, summarizer):
        summary = await service.generate_project_summary("PROJ-001")

        assert summary.executive_summary == "On track."
        facts, tasks = summarizer.generate_project_summary.await_args[0]
        assert facts.project_name == "Project PROJ-001"
        assert facts.team_members == ["Bob"]
        assert facts.current_status == "In Progress"
        assert [t.status for t in tasks] == ["Done", "To Do"]

    @pytest.mark.asyncio
    async def test_summary_unknown_project(self, service, summarizer):
        with pytest.raises(EntityNotFoundError):
            await service.generate_project_summary("PROJ-404")
        summarizer.generate_project_summary.assert_not_called()

    @pytest.mark.asyncio
    async def test_summary_failure_surfaces(self, service, summarizer, seeded_cache):
        summarizer.generate_project_summary = AsyncMock(side_effect=SummarizerError("down"))
        before = snapshot(seeded_cache)

        with pytest.raises(SummarizerError):
            await service.generate_project_summary("PROJ-001")

        assert snapshot(seeded_cache) == before

    @pytest.mark.asyncio
    async def test_suggestions_use_project_facts(self, service, summarizer):
        result = await service.suggest_improvements("PROJ-001")

        assert result.suggestions == ["Add tests."]
        (facts,) = summarizer.provide_actionable_suggestions.await_args[0]
        assert facts.project_name == "Project PROJ-001"
        assert facts.team_members == ["Bob"]

    @pytest.mark.asyncio
    async def test_risk_assessment_uses_facts_and_tasks(self, service, summarizer):
        result = await service.assess_project_risks("PROJ-001")

        assert result.bottleneck_analysis == "One developer."
        facts, tasks = summarizer.assess_risks.await_args[0]
        assert facts.current_status == "In Progress"
        assert [t.name for t in tasks] == ["Task TASK-0001", "Task TASK-0002"]

    @pytest.mark.asyncio
    async def test_suggestion_and_risk_failures_surface(self, service, summarizer):
        summarizer.provide_actionable_suggestions = AsyncMock(side_effect=SummarizerError("down"))
        summarizer.assess_risks = AsyncMock(side_effect=SummarizerError("down"))

        with pytest.raises(SummarizerError):
            await service.suggest_improvements("PROJ-001")
        with pytest.raises(SummarizerError):
            await service.assess_project_risks("PROJ-001")

    @pytest.mark.asyncio
    async def test_suggestions_unknown_project(self, service, summarizer):
        with pytest.raises(EntityNotFoundError):
            await service.suggest_improvements("PROJ-404")
        summarizer.provide_actionable_suggestions.assert_not_called()
