"""
Synthesis pipeline - turns one schema snapshot into insights and dashboards.

One cycle walks IDLE -> PROMPTING -> AWAITING_MODEL -> VALIDATING and ends in
READY or DEGRADED. Insights and dashboards are requested concurrently; either
one falls back to deterministic output when the model call fails or its output
does not validate. A cycle where every model call failed skips VALIDATING.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Tuple

from app.core.exceptions import GatewayError, ResponseValidationError
from app.schemas.descriptor import SchemaDescriptor
from app.schemas.pipeline import CycleState, SynthesisResult
from app.services.fallback import (
    DEFAULT_MAX_INSIGHT_TABLES,
    fallback_dashboards,
    fallback_insights,
)
from app.services.model_gateway import ModelGateway
from app.services.prompt_builder import (
    DEFAULT_PROMPT_SAMPLE_ROWS,
    build_dashboard_prompt,
    build_insight_prompt,
)
from app.services.response_validator import validate_dashboards, validate_insights

logger = logging.getLogger("pipeline")

GatewayOutcome = Tuple[Optional[str], Optional[GatewayError]]


class SynthesisPipeline:
    """
    Runs synthesis cycles against one model gateway.

    Holds no state between cycles besides the current cycle's state, which is
    reset to IDLE at the start of every run.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        prompt_sample_rows: int = DEFAULT_PROMPT_SAMPLE_ROWS,
        fallback_insight_tables: int = DEFAULT_MAX_INSIGHT_TABLES,
        timeout: Optional[float] = None,
    ):
        self.gateway = gateway
        self.prompt_sample_rows = prompt_sample_rows
        self.fallback_insight_tables = fallback_insight_tables
        self.timeout = timeout
        self.state = CycleState.IDLE
        self._transitions: List[CycleState] = []

    def _transition(self, state: CycleState, generation: int) -> None:
        logger.info(f"Cycle {generation}: {self.state.value} -> {state.value}")
        self.state = state
        self._transitions.append(state)

    async def run(self, schema: SchemaDescriptor, generation: int = 0) -> SynthesisResult:
        """
        Run one synthesis cycle.

        Args:
            schema: Schema snapshot for this cycle
            generation: Cycle token carried into the result

        Returns:
            SynthesisResult in state READY or DEGRADED; never raises for
            model or validation failures
        """
        self.state = CycleState.IDLE
        self._transitions = [CycleState.IDLE]
        errors: List[str] = []

        if schema.is_empty:
            logger.warning(f"Cycle {generation}: schema has no tables, using fallback")
            errors.append("schema: no tables discovered")
            return self._finish(
                generation,
                schema,
                insights=(fallback_insights(schema, self.fallback_insight_tables), True),
                dashboards=(fallback_dashboards(schema), True),
                errors=errors,
            )

        self._transition(CycleState.PROMPTING, generation)
        insight_prompt = build_insight_prompt(schema, self.prompt_sample_rows)
        dashboard_prompt = build_dashboard_prompt(schema)

        self._transition(CycleState.AWAITING_MODEL, generation)
        insight_call, dashboard_call = await asyncio.gather(
            self.gateway.invoke(insight_prompt, timeout=self.timeout),
            self.gateway.invoke(dashboard_prompt, timeout=self.timeout),
        )

        if insight_call[0] is not None or dashboard_call[0] is not None:
            self._transition(CycleState.VALIDATING, generation)

        insights = self._resolve(
            "insights",
            insight_call,
            validate_insights,
            lambda: fallback_insights(schema, self.fallback_insight_tables),
            errors,
        )
        dashboards = self._resolve(
            "dashboards",
            dashboard_call,
            validate_dashboards,
            lambda: fallback_dashboards(schema),
            errors,
        )
        return self._finish(generation, schema, insights, dashboards, errors)

    def _resolve(
        self,
        label: str,
        outcome: GatewayOutcome,
        validate: Callable[[str], list],
        fallback: Callable[[], list],
        errors: List[str],
    ) -> Tuple[list, bool]:
        raw, error = outcome
        if error is not None:
            errors.append(f"{label}: {error.kind.value}: {error.message}")
            logger.warning(f"Falling back for {label}: gateway {error.kind.value}")
            return fallback(), True

        try:
            return validate(raw), False
        except ResponseValidationError as e:
            errors.append(f"{label}: {e.kind.value}: {e.message}")
            logger.warning(f"Falling back for {label}: {e.kind.value}")
            return fallback(), True

    def _finish(
        self,
        generation: int,
        schema: SchemaDescriptor,
        insights: Tuple[list, bool],
        dashboards: Tuple[list, bool],
        errors: List[str],
    ) -> SynthesisResult:
        degraded = insights[1] or dashboards[1]
        self._transition(CycleState.DEGRADED if degraded else CycleState.READY, generation)
        return SynthesisResult(
            generation=generation,
            state=self.state,
            insights=insights[0],
            dashboards=dashboards[0],
            insights_degraded=insights[1],
            dashboards_degraded=dashboards[1],
            errors=errors,
            transitions=list(self._transitions),
            schema_snapshot=schema,
        )
