"""Dashboard and widget schemas.

Widgets form a closed set of four kinds discriminated by ``type``. Anything
that reaches these models has already been projected out of untyped model
output, so rendering can dispatch on ``type`` without further checks.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

Number = Union[StrictInt, StrictFloat]

ChartType = Literal["line", "bar", "pie", "area"]
GaugeStatus = Literal["good", "warning", "critical"]

# Keys a chart record is expected to carry as its x-axis / label
TIME_SERIES_KEYS = ("date",)
CATEGORY_KEYS = ("category", "name")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class MetricData(BaseModel):
    """Single headline value, optionally with a period-over-period change."""

    value: Number
    change: Optional[Number] = None
    period: Optional[StrictStr] = None
    currency: Optional[StrictBool] = None


class GaugeData(BaseModel):
    """Value on a 0-100 scale with a traffic-light status."""

    value: Number
    max: Number = 100
    status: GaugeStatus

    @field_validator("max")
    @classmethod
    def positive_max(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("max must be positive")
        return value


class _WidgetBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: StrictStr = Field(..., min_length=1)
    title: StrictStr = Field(..., min_length=1)
    config: Optional[Dict[str, Any]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


class MetricWidget(_WidgetBase):
    type: Literal["metric"] = "metric"
    data: MetricData


class GaugeWidget(_WidgetBase):
    type: Literal["gauge"] = "gauge"
    data: GaugeData


class ChartWidget(_WidgetBase):
    type: Literal["chart"] = "chart"
    chart_type: ChartType = Field(..., alias="chartType")
    data: List[Dict[str, Any]] = Field(default_factory=list)

    @model_validator(mode="after")
    def records_match_chart_type(self) -> "ChartWidget":
        label_keys = TIME_SERIES_KEYS if self.chart_type in ("line", "area") else CATEGORY_KEYS
        for record in self.data:
            if not any(key in record for key in label_keys):
                raise ValueError(
                    f"{self.chart_type} chart records need one of {', '.join(label_keys)}"
                )
            if not any(_is_number(v) for k, v in record.items() if k not in label_keys):
                raise ValueError("chart records need at least one numeric series")
        return self


class TableWidget(_WidgetBase):
    type: Literal["table"] = "table"
    data: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("data")
    @classmethod
    def homogeneous_rows(cls, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if rows:
            keys = set(rows[0])
            for row in rows[1:]:
                if set(row) != keys:
                    raise ValueError("table rows must share the same columns")
        return rows

    @property
    def columns(self) -> List[str]:
        return list(self.data[0]) if self.data else []


WidgetSpec = Annotated[
    Union[MetricWidget, ChartWidget, TableWidget, GaugeWidget],
    Field(discriminator="type"),
]


class DashboardSpec(BaseModel):
    """An ordered group of widgets rendered together."""

    title: StrictStr
    description: StrictStr
    widgets: List[WidgetSpec] = Field(default_factory=list)

    @field_validator("widgets")
    @classmethod
    def unique_widget_ids(cls, widgets: List[Any]) -> List[Any]:
        ids = [w.id for w in widgets]
        if len(ids) != len(set(ids)):
            raise ValueError("widget ids must be unique within a dashboard")
        return widgets


# Final artifact handed to rendering: ordered dashboards, replaced wholesale per cycle
DashboardModel = List[DashboardSpec]
