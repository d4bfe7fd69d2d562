"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.core.logging_config import setup_logging
from app.services.scheduler import RefreshScheduler
from app.services.session import DashboardSession

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    session = DashboardSession(settings.connection_config(), settings=settings)
    scheduler = RefreshScheduler(session, settings.REFRESH_INTERVAL_SECONDS)
    app.state.session = session
    app.state.scheduler = scheduler
    scheduler.start()
    yield
    # Shutdown
    logger.info("Shutting down application")
    await scheduler.stop()
    await session.close()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="AI-assisted business intelligence dashboards synthesized from a live database schema",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:8080"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.APP_VERSION}


# Import and include routers after app is created to avoid circular imports
from app.api.v1.router import api_router

app.include_router(api_router, prefix="/api/v1")
