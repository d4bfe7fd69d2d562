"""Dashboard and insight endpoints."""

from fastapi import APIRouter

from app.api.deps import Scheduler, Session
from app.core.exceptions import NotFound, ServiceUnavailable
from app.schemas.pipeline import DashboardsResponse, InsightsResponse, SynthesisResult
from app.services.formatting import widget_display

router = APIRouter(tags=["dashboards"])


def _dashboards_response(result: SynthesisResult) -> DashboardsResponse:
    display = []
    for dashboard in result.dashboards:
        formatted = {}
        for widget in dashboard.widgets:
            values = widget_display(widget)
            if values is not None:
                formatted[widget.id] = values
        display.append(formatted)

    return DashboardsResponse(
        generation=result.generation,
        state=result.state,
        degraded=result.dashboards_degraded,
        last_updated=result.completed_at,
        dashboards=result.dashboards,
        display=display,
    )


@router.post("/dashboards/refresh", response_model=DashboardsResponse)
async def refresh_dashboards(session: Session, scheduler: Scheduler) -> DashboardsResponse:
    """
    Run a synthesis cycle now.

    Joins the running cycle if one is already in flight.
    """
    if not session.is_connected:
        raise ServiceUnavailable(session.status_message or "Not connected")

    result = await scheduler.trigger()
    if result is None:
        raise ServiceUnavailable(
            session.status_message or "Synthesis cycle was abandoned"
        )
    return _dashboards_response(result)


@router.get("/dashboards", response_model=DashboardsResponse)
async def get_dashboards(session: Session) -> DashboardsResponse:
    """Current dashboard model."""
    if session.result is None:
        raise NotFound("Dashboard model")
    return _dashboards_response(session.result)


@router.get("/insights", response_model=InsightsResponse)
async def get_insights(session: Session) -> InsightsResponse:
    """Current insights."""
    result = session.result
    if result is None:
        raise NotFound("Insights")
    return InsightsResponse(
        generation=result.generation,
        degraded=result.insights_degraded,
        last_updated=result.completed_at,
        insights=result.insights,
    )
