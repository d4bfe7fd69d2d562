"""Connection management endpoints."""

from typing import Dict

from fastapi import APIRouter

from app.api.deps import Session
from app.schemas.connection import ConnectionConfig, ConnectionTestResult, ConnectionView
from app.schemas.pipeline import SessionStatusResponse

router = APIRouter(prefix="/connection", tags=["connection"])


def _status(session) -> SessionStatusResponse:
    return SessionStatusResponse(
        status=session.status,
        message=session.status_message,
        generation=session.generation,
        cycle_state=session.result.state if session.result else None,
        table_count=len(session.schema.tables) if session.schema else 0,
    )


@router.get("/", response_model=ConnectionView)
async def get_connection(session: Session) -> ConnectionView:
    """Current connection config (password omitted)."""
    return ConnectionView.from_config(session.config)


@router.put("/", response_model=ConnectionView)
async def update_connection(config: ConnectionConfig, session: Session) -> ConnectionView:
    """
    Replace the connection config.

    Any cycle in flight is abandoned and the session returns to disconnected.
    """
    await session.update_config(config)
    return ConnectionView.from_config(session.config)


@router.get("/status", response_model=SessionStatusResponse)
async def connection_status(session: Session) -> SessionStatusResponse:
    """Connection status and last cycle outcome."""
    return _status(session)


@router.post("/test", response_model=Dict[str, ConnectionTestResult])
async def test_connection(session: Session) -> Dict[str, ConnectionTestResult]:
    """Probe the database and the model endpoint."""
    return await session.test_connections()


@router.post("/connect", response_model=SessionStatusResponse)
async def connect(session: Session) -> SessionStatusResponse:
    """Connect and discover the schema."""
    await session.connect()
    return _status(session)
