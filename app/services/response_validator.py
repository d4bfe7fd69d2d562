"""Validation of raw model output into insights and dashboards.

Model output is treated as untyped JSON only inside this module. Each element
is projected onto the strict schemas; elements that do not fit are dropped and
logged. Validation fails only when the text is not JSON, is not an array, or
nothing in it survives.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ResponseValidationError, ValidationErrorKind
from app.schemas.dashboard import DashboardSpec, WidgetSpec
from app.schemas.insight import InsightRecord, InsightValue

logger = logging.getLogger("pipeline")

CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)

_widget_adapter = TypeAdapter(WidgetSpec)
_insight_data_adapter = TypeAdapter(Optional[Dict[str, InsightValue]])


def _loads(text: str) -> Any:
    text = text.strip()
    fenced = CODE_FENCE.search(text)
    if fenced:
        text = fenced.group(1)

    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        pass

    # Prose around the payload: retry on the outermost array
    start, end = text.find("["), text.rfind("]")
    if 0 <= start < end:
        try:
            return json.loads(text[start : end + 1])
        except (ValueError, RecursionError):
            pass

    raise ResponseValidationError(
        ValidationErrorKind.MALFORMED_SYNTAX, "Model output is not valid JSON"
    )


def _parse_array(raw: str) -> List[Any]:
    if not isinstance(raw, str):
        raise ResponseValidationError(
            ValidationErrorKind.MALFORMED_SYNTAX, "Model output is not text"
        )
    value = _loads(raw)
    if not isinstance(value, list):
        raise ResponseValidationError(
            ValidationErrorKind.WRONG_SHAPE,
            f"Expected a JSON array, got {type(value).__name__}",
        )
    return value


def _clean_insight_data(item: Dict[str, Any]) -> Dict[str, Any]:
    """Drop an unusable ``data`` field instead of the whole insight."""
    if "data" not in item:
        return item
    try:
        _insight_data_adapter.validate_python(item["data"])
    except PydanticValidationError:
        logger.debug(f"Discarding unusable insight data: {item['data']!r}")
        return {k: v for k, v in item.items() if k != "data"}
    return item


def validate_insights(raw: str) -> List[InsightRecord]:
    """
    Parse model output into insight records.

    Raises:
        ResponseValidationError: when the output is unusable as a whole
    """
    items = _parse_array(raw)
    records: List[InsightRecord] = []

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.info(f"Dropping insight #{index}: not an object")
            continue
        try:
            records.append(InsightRecord.model_validate(_clean_insight_data(item)))
        except PydanticValidationError as e:
            logger.info(f"Dropping insight #{index}: {e.error_count()} invalid field(s)")

    if not records:
        raise ResponseValidationError(
            ValidationErrorKind.NO_VALID_ELEMENTS,
            f"None of the {len(items)} insight element(s) were usable",
        )
    return records


def _validate_widgets(raw_widgets: List[Any], dashboard_index: int) -> List[Any]:
    widgets = []
    seen_ids = set()

    for index, raw_widget in enumerate(raw_widgets):
        try:
            widget = _widget_adapter.validate_python(raw_widget)
        except PydanticValidationError as e:
            logger.info(
                f"Dropping widget #{index} of dashboard #{dashboard_index}: "
                f"{e.error_count()} invalid field(s)"
            )
            continue
        if widget.id in seen_ids:
            logger.info(f"Dropping widget '{widget.id}': duplicate id")
            continue
        seen_ids.add(widget.id)
        widgets.append(widget)

    return widgets


def validate_dashboards(raw: str) -> List[DashboardSpec]:
    """
    Parse model output into dashboard specs.

    Raises:
        ResponseValidationError: when the output is unusable as a whole
    """
    items = _parse_array(raw)
    dashboards: List[DashboardSpec] = []

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.info(f"Dropping dashboard #{index}: not an object")
            continue

        title = item.get("title")
        description = item.get("description")
        raw_widgets = item.get("widgets")
        if not isinstance(title, str) or not isinstance(description, str):
            logger.info(f"Dropping dashboard #{index}: missing title or description")
            continue
        if not isinstance(raw_widgets, list):
            logger.info(f"Dropping dashboard #{index}: widgets is not an array")
            continue

        widgets = _validate_widgets(raw_widgets, index)
        if not widgets:
            logger.info(f"Dropping dashboard #{index}: no usable widgets")
            continue

        dashboards.append(
            DashboardSpec(title=title, description=description, widgets=widgets)
        )

    if not dashboards:
        raise ResponseValidationError(
            ValidationErrorKind.NO_VALID_ELEMENTS,
            f"None of the {len(items)} dashboard element(s) were usable",
        )
    return dashboards
