"""Periodic dashboard refresh."""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from app.schemas.pipeline import SchedulerStatusResponse, SynthesisResult
from app.services.session import DashboardSession

logger = logging.getLogger("worker")


class RefreshScheduler:
    """
    Re-runs synthesis on a fixed interval while the session is connected.

    Start and stop are explicit; ``stop()`` sets a stop event that also cuts
    the current wait short. Refreshes go through ``DashboardSession.refresh``,
    so scheduled and manual cycles never overlap.
    """

    def __init__(self, session: DashboardSession, interval_seconds: float):
        self.session = session
        self.interval_seconds = interval_seconds
        self.paused = False
        self.runs = 0
        self.last_run: Optional[datetime] = None
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the refresh loop in the background."""
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Refresh scheduler started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the loop and wait for an in-progress refresh to finish."""
        if not self.running:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("Refresh scheduler stopped")

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    async def trigger(self) -> Optional[SynthesisResult]:
        """Refresh now, outside the schedule."""
        return await self._run_once()

    async def _loop(self) -> None:
        while not self._stop_event.is_set():
            if not self.paused and self.session.is_connected:
                await self._run_once()

            try:
                await asyncio.wait_for(self._stop_event.wait(), self.interval_seconds)
            except asyncio.TimeoutError:
                pass

    async def _run_once(self) -> Optional[SynthesisResult]:
        result = None
        try:
            result = await self.session.refresh()
        except Exception as e:
            logger.error(f"Scheduled refresh failed: {e}", exc_info=True)

        self.runs += 1
        self.last_run = datetime.utcnow()
        if result is not None:
            logger.info(
                f"Refresh {self.runs}: cycle {result.generation} {result.state.value}, "
                f"{len(result.dashboards)} dashboard(s), {len(result.insights)} insight(s)"
            )
        return result

    def status(self) -> SchedulerStatusResponse:
        return SchedulerStatusResponse(
            running=self.running,
            paused=self.paused,
            interval_seconds=self.interval_seconds,
            last_run=self.last_run,
            runs=self.runs,
        )
