"""Synthesis cycle schemas."""

import enum
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.schemas.dashboard import DashboardSpec
from app.schemas.descriptor import SchemaDescriptor
from app.schemas.insight import InsightRecord


class CycleState(enum.Enum):
    """States of one synthesis cycle; READY and DEGRADED are terminal."""

    IDLE = "idle"
    PROMPTING = "prompting"
    AWAITING_MODEL = "awaiting_model"
    VALIDATING = "validating"
    READY = "ready"
    DEGRADED = "degraded"


class SessionStatus(enum.Enum):
    """Connection-level status of a dashboard session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class SynthesisResult(BaseModel):
    """Everything one cycle produced, applied to the session in one step."""

    generation: int
    state: CycleState
    insights: List[InsightRecord] = Field(default_factory=list)
    dashboards: List[DashboardSpec] = Field(default_factory=list)
    insights_degraded: bool = False
    dashboards_degraded: bool = False
    errors: List[str] = Field(default_factory=list)
    transitions: List[CycleState] = Field(default_factory=list)
    schema_snapshot: Optional[SchemaDescriptor] = None
    completed_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def degraded(self) -> bool:
        return self.state == CycleState.DEGRADED


class DashboardsResponse(BaseModel):
    """Current dashboard model plus display strings for numeric widgets."""

    generation: int
    state: CycleState
    degraded: bool
    last_updated: Optional[datetime]
    dashboards: List[DashboardSpec]
    display: List[Dict[str, Dict[str, str]]] = Field(
        default_factory=list,
        description="Per dashboard: widget id -> formatted values",
    )


class InsightsResponse(BaseModel):
    """Current insight list."""

    generation: int
    degraded: bool
    last_updated: Optional[datetime]
    insights: List[InsightRecord]


class SessionStatusResponse(BaseModel):
    """Connection status and the last cycle outcome."""

    status: SessionStatus
    message: Optional[str] = None
    generation: int
    cycle_state: Optional[CycleState] = None
    table_count: int = 0


class SchedulerStatusResponse(BaseModel):
    """Periodic refresh status."""

    running: bool
    paused: bool
    interval_seconds: float
    last_run: Optional[datetime]
    runs: int
