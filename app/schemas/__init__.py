"""Pydantic schemas for request/response validation."""

from app.schemas.connection import (
    AIConfig,
    ConnectionConfig,
    ConnectionTestResult,
    ConnectionView,
    DatabaseConfig,
)
from app.schemas.dashboard import (
    ChartWidget,
    DashboardModel,
    DashboardSpec,
    GaugeWidget,
    MetricWidget,
    TableWidget,
    WidgetSpec,
)
from app.schemas.descriptor import (
    ColumnDescriptor,
    RelationshipEdge,
    SchemaDescriptor,
    TableDescriptor,
)
from app.schemas.insight import InsightRecord
from app.schemas.pipeline import CycleState, SessionStatus, SynthesisResult

__all__ = [
    "AIConfig",
    "ConnectionConfig",
    "ConnectionTestResult",
    "ConnectionView",
    "DatabaseConfig",
    "ChartWidget",
    "DashboardModel",
    "DashboardSpec",
    "GaugeWidget",
    "MetricWidget",
    "TableWidget",
    "WidgetSpec",
    "ColumnDescriptor",
    "RelationshipEdge",
    "SchemaDescriptor",
    "TableDescriptor",
    "InsightRecord",
    "CycleState",
    "SessionStatus",
    "SynthesisResult",
]
