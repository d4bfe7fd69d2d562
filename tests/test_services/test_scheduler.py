"""Tests for periodic refresh."""

import asyncio

import pytest

from app.services.scheduler import RefreshScheduler


async def _wait_for_runs(scheduler: RefreshScheduler, runs: int) -> None:
    while scheduler.runs < runs:
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
class TestRefreshScheduler:
    """Test the refresh loop."""

    async def test_refreshes_while_connected(self, session):
        """A connected session should be refreshed on every tick."""
        await session.connect()
        scheduler = RefreshScheduler(session, interval_seconds=0.01)

        scheduler.start()
        await asyncio.wait_for(_wait_for_runs(scheduler, 2), timeout=5)
        await scheduler.stop()

        assert scheduler.running is False
        assert session.result is not None
        assert scheduler.status().last_run is not None

    async def test_skips_when_disconnected(self, session):
        """Nothing should run before the session connects."""
        scheduler = RefreshScheduler(session, interval_seconds=0.01)

        scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()

        assert scheduler.runs == 0
        assert session.result is None

    async def test_paused(self, session):
        """A paused scheduler should keep running without refreshing."""
        await session.connect()
        scheduler = RefreshScheduler(session, interval_seconds=0.01)
        scheduler.pause()

        scheduler.start()
        await asyncio.sleep(0.05)
        assert scheduler.running is True
        await scheduler.stop()

        assert scheduler.runs == 0

    async def test_stop_cuts_wait_short(self, session):
        """Stopping should not wait out the interval."""
        scheduler = RefreshScheduler(session, interval_seconds=3600)
        scheduler.start()

        await asyncio.wait_for(scheduler.stop(), timeout=1)

        assert scheduler.running is False

    async def test_trigger(self, session):
        """A manual trigger should refresh immediately."""
        await session.connect()
        scheduler = RefreshScheduler(session, interval_seconds=3600)

        result = await scheduler.trigger()

        assert result is session.result
        assert scheduler.runs == 1
