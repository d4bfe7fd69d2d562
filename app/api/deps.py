"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from app.services.scheduler import RefreshScheduler
from app.services.session import DashboardSession


def get_session(request: Request) -> DashboardSession:
    """Dashboard session created at startup."""
    return request.app.state.session


def get_scheduler(request: Request) -> RefreshScheduler:
    """Refresh scheduler created at startup."""
    return request.app.state.scheduler


Session = Annotated[DashboardSession, Depends(get_session)]
Scheduler = Annotated[RefreshScheduler, Depends(get_scheduler)]
