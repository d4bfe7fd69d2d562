"""API v1 router - aggregates all endpoint routers."""

from fastapi import APIRouter

from app.api.v1.connection import router as connection_router
from app.api.v1.dashboards import router as dashboards_router
from app.api.v1.scheduler import router as scheduler_router
from app.api.v1.schema import router as schema_router

api_router = APIRouter()

# Include all routers
api_router.include_router(connection_router)
api_router.include_router(schema_router)
api_router.include_router(dashboards_router)
api_router.include_router(scheduler_router)


@api_router.get("/")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Smart Business Oracle API",
        "version": "1.0.0",
        "endpoints": {
            "connection": "/api/v1/connection",
            "schema": "/api/v1/schema",
            "dashboards": "/api/v1/dashboards",
            "insights": "/api/v1/insights",
            "scheduler": "/api/v1/scheduler",
        },
    }
