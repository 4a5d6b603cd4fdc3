"""
Tests for protrack/cache/pending.py
"""

import pytest
from unittest.mock import AsyncMock

from protrack.cache import PendingValue


class TestPendingValue:
    """Stage / commit / rollback."""

    def test_current_is_committed_by_default(self):
        value = PendingValue("Planning")
        assert value.current == "Planning"
        assert value.pending is None
        assert not value.is_pending

    def test_stage_shows_pending(self):
        value = PendingValue("Planning")
        value.stage("Blocked")
        assert value.current == "Blocked"
        assert value.committed == "Planning"
        assert value.is_pending

    def test_commit_promotes(self):
        value = PendingValue("Planning")
        value.stage("Blocked")
        value.commit("Blocked")
        assert value.committed == "Blocked"
        assert not value.is_pending

    def test_rollback_restores(self):
        value = PendingValue("Planning")
        value.stage("Blocked")
        value.rollback()
        assert value.current == "Planning"

    def test_none_can_be_staged(self):
        value = PendingValue("x")
        value.stage(None)
        assert value.is_pending
        assert value.current is None


    def test_stale_token_leaves_newer_stage(self):
        value = PendingValue("Planning")
        first = value.stage("Blocked")
        value.stage("Completed")

        value.rollback(first)
        assert value.current == "Completed"

        value.commit("Blocked", first)
        assert value.committed == "Blocked"
        assert value.current == "Completed"


class TestOptimistic:
    """optimistic() around a remote call."""

    @pytest.mark.asyncio
    async def test_success_commits_confirmed_value(self):
        value = PendingValue(1)
        seen = []

        async def remote():
            seen.append(value.current)
            return 2

        result = await value.optimistic(2, remote)

        assert result == 2
        assert seen == [2]
        assert value.committed == 2
        assert not value.is_pending

    @pytest.mark.asyncio
    async def test_failure_rolls_back_and_reraises(self):
        value = PendingValue(1)
        remote = AsyncMock(side_effect=ConnectionError("offline"))

        with pytest.raises(ConnectionError):
            await value.optimistic(2, remote)

        assert value.current == 1
        assert not value.is_pending

    @pytest.mark.asyncio
    async def test_failure_keeps_later_overlapping_value(self):
        value = PendingValue(1)

        async def later_call_then_fail():
            value.stage(3)
            raise ConnectionError("offline")

        with pytest.raises(ConnectionError):
            await value.optimistic(2, later_call_then_fail)

        assert value.current == 3
        assert value.committed == 1
