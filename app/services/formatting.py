"""Display formatting for numeric widget values.

All formatters fail closed: missing or non-numeric input renders as a zero
string. Percentages are expected on a 0-100 scale (15.3 renders as "15.3%").
"""

import math
from decimal import Decimal
from typing import Any, Dict, Optional

from app.schemas.dashboard import GaugeWidget, MetricWidget

CURRENCY_SYMBOL = "R"

ZERO_CURRENCY = "R 0.00"
ZERO_NUMBER = "0"
ZERO_PERCENTAGE = "0%"


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    number = float(value)
    if not math.isfinite(number):
        return None
    return number


def format_currency(value: Any) -> str:
    """Rand amount with two decimals and comma thousands separators."""
    number = _as_float(value)
    if number is None:
        return ZERO_CURRENCY
    sign = "-" if round(number, 2) < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL} {abs(number):,.2f}"


def format_number(value: Any) -> str:
    """Plain number with up to two decimals."""
    number = _as_float(value)
    if number is None:
        return ZERO_NUMBER
    text = f"{number:,.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_percentage(value: Any) -> str:
    """Percentage from a 0-100 value, one decimal place."""
    number = _as_float(value)
    if number is None:
        return ZERO_PERCENTAGE
    return f"{number / 100:,.1%}"


def metric_display(widget: MetricWidget) -> Dict[str, str]:
    """Formatted strings for a metric widget; currency unless it opts out."""
    data = widget.data
    display = {
        "value": format_number(data.value)
        if data.currency is False
        else format_currency(data.value)
    }
    if data.change is not None:
        display["change"] = format_percentage(abs(data.change))
        display["direction"] = "up" if data.change >= 0 else "down"
    if data.period:
        display["period"] = data.period
    return display


def gauge_display(widget: GaugeWidget) -> Dict[str, str]:
    """Formatted strings for a gauge widget."""
    data = widget.data
    return {
        "value": format_percentage(data.value / data.max * 100),
        "status": data.status.upper(),
    }


def widget_display(widget: Any) -> Optional[Dict[str, str]]:
    """Display strings for widgets carrying a single numeric value."""
    if widget.type == "metric":
        return metric_display(widget)
    if widget.type == "gauge":
        return gauge_display(widget)
    # chart and table widgets hand their records to the renderer unchanged
    return None
