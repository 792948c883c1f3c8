"""
Unit tests for MatchTrackerApp update runs
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from match_tracker.apps.tracker_app import MatchTrackerApp
from match_tracker.data_collection.run_coordinator import RunAlreadyActiveError
from match_tracker.database.state_store import PersistenceError
from match_tracker.domain.models import ChangeKind
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_C, api_url, fake_scraper

SENIOR = "AE BADALONÈS SÈNIOR A MASCULÍ"
JUNIOR = "AE Badalonès Júnior Femení"


@pytest.fixture
def matches():
    return {SENIOR: [TOKEN_A, TOKEN_B], JUNIOR: [TOKEN_C]}


@pytest.fixture
def tracker(test_settings, matches):
    return MatchTrackerApp(test_settings, scraper=fake_scraper(matches))


@pytest.mark.asyncio
async def test_first_run_saves_initial_snapshot(tracker):
    result = await tracker.run_update()

    assert result.success is True
    assert result.has_changes is True
    assert result.message == "Initial snapshot saved"
    # no baseline to enumerate against on the first run
    assert result.changes == []

    snapshot, metadata = await tracker.current_snapshot()
    assert snapshot.teams["senior-a-masc"].urls == [api_url(TOKEN_A), api_url(TOKEN_B)]
    assert metadata.total_matches == 3
    assert metadata.last_check == metadata.last_update
    assert tracker.last_result == result


@pytest.mark.asyncio
async def test_unchanged_run_only_touches_last_check(tracker):
    await tracker.run_update()
    _, first_meta = await tracker.current_snapshot()

    result = await tracker.run_update()

    assert result.success is True
    assert result.has_changes is False
    assert result.changes == []
    assert result.message == "No changes"
    _, metadata = await tracker.current_snapshot()
    assert metadata.last_update == first_meta.last_update
    assert metadata.last_check >= first_meta.last_check
    assert len(await tracker.store.history()) == 1


@pytest.mark.asyncio
async def test_new_match_is_reported_and_saved(tracker, matches):
    await tracker.run_update()
    matches[JUNIOR].append(TOKEN_A)

    result = await tracker.run_update(trigger="scheduled")

    assert result.has_changes is True
    assert result.message == "1 changes saved"
    [change] = result.changes
    assert change.kind == ChangeKind.NEW_MATCHES
    assert change.team == "junior-fem"
    assert change.matches == [api_url(TOKEN_A)]
    assert len(await tracker.store.history()) == 2


@pytest.mark.asyncio
async def test_empty_team_list_is_a_failed_run(test_settings):
    tracker = MatchTrackerApp(test_settings, scraper=fake_scraper({}))

    result = await tracker.run_update()

    assert result.success is False
    assert "No teams found" in result.error
    assert await tracker.store.history() == []
    assert not tracker.coordinator.is_running


@pytest.mark.asyncio
async def test_concurrent_run_is_rejected(tracker):
    release = asyncio.Event()
    original = tracker.scraper.list_teams.side_effect

    async def slow_list_teams():
        await release.wait()
        return original()

    tracker.scraper.list_teams.side_effect = slow_list_teams
    first = asyncio.create_task(tracker.run_update(trigger="scheduled"))
    await asyncio.sleep(0)

    with pytest.raises(RunAlreadyActiveError):
        await tracker.run_update(trigger="manual")

    release.set()
    result = await first
    assert result.success is True
    assert tracker.coordinator.completed_runs == 1


@pytest.mark.asyncio
async def test_persistence_error_is_recorded_and_raised(tracker):
    tracker.store.save = AsyncMock(side_effect=PersistenceError("disk full"))

    with pytest.raises(PersistenceError):
        await tracker.run_update()

    assert tracker.last_result.success is False
    assert tracker.last_result.error == "disk full"
    assert not tracker.coordinator.is_running


@pytest.mark.asyncio
async def test_bootstrap_runs_only_without_snapshot(tracker):
    first = await tracker.bootstrap()
    second = await tracker.bootstrap()

    assert first.success is True
    assert second is None
    assert tracker.scraper.list_teams.await_count == 1


@pytest.mark.asyncio
async def test_status_reports_components(tracker):
    await tracker.run_update()

    status = await tracker.get_status()

    assert status["server"]["update_in_progress"] is False
    assert status["server"]["completed_runs"] == 1
    assert status["database"]["has_snapshot"] is True
    assert status["metadata"]["total_teams"] == 2
    assert status["last_result"]["success"] is True
    assert status["scheduler"]["active"] is False
