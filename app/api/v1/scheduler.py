"""Periodic refresh control endpoints."""

from fastapi import APIRouter

from app.api.deps import Scheduler
from app.schemas.pipeline import SchedulerStatusResponse

router = APIRouter(prefix="/scheduler", tags=["scheduler"])


@router.get("/", response_model=SchedulerStatusResponse)
async def scheduler_status(scheduler: Scheduler) -> SchedulerStatusResponse:
    """Whether periodic refresh is running or paused."""
    return scheduler.status()


@router.post("/start", response_model=SchedulerStatusResponse)
async def start_scheduler(scheduler: Scheduler) -> SchedulerStatusResponse:
    """Start (or resume) periodic refresh."""
    scheduler.resume()
    scheduler.start()
    return scheduler.status()


@router.post("/pause", response_model=SchedulerStatusResponse)
async def pause_scheduler(scheduler: Scheduler) -> SchedulerStatusResponse:
    """Keep the loop alive but skip refreshes."""
    scheduler.pause()
    return scheduler.status()


@router.post("/stop", response_model=SchedulerStatusResponse)
async def stop_scheduler(scheduler: Scheduler) -> SchedulerStatusResponse:
    """Stop periodic refresh."""
    await scheduler.stop()
    return scheduler.status()
