"""Dashboard session - owns the current dashboard model and serializes cycles."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from app.config import Settings, get_settings
from app.core.exceptions import SchemaError
from app.schemas.connection import (
    AIConfig,
    ConnectionConfig,
    ConnectionTestResult,
    DatabaseConfig,
)
from app.schemas.descriptor import SchemaDescriptor
from app.schemas.pipeline import SessionStatus, SynthesisResult
from app.services.model_gateway import ModelGateway
from app.services.pipeline import SynthesisPipeline
from app.services.schema_service import SchemaService, SchemaSource

logger = logging.getLogger("pipeline")

SourceFactory = Callable[[DatabaseConfig], SchemaSource]
GatewayFactory = Callable[[AIConfig], ModelGateway]


class DashboardSession:
    """
    Single-user dashboard session.

    Every cycle carries a generation number. Starting a cycle or abandoning
    the current one bumps the session generation, and a cycle result is only
    applied while its generation is still current, so late results from an
    abandoned cycle are discarded. The current result is swapped in one
    assignment; readers see either the previous model or the new one.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        settings: Optional[Settings] = None,
        source_factory: Optional[SourceFactory] = None,
        gateway_factory: Optional[GatewayFactory] = None,
    ):
        self.settings = settings or get_settings()
        self.config = config
        self.source_factory = source_factory or self._default_source
        self.gateway_factory = gateway_factory or ModelGateway

        self.status = SessionStatus.DISCONNECTED
        self.status_message: Optional[str] = None
        self.generation = 0
        self.schema: Optional[SchemaDescriptor] = None
        self.result: Optional[SynthesisResult] = None
        self.last_updated: Optional[datetime] = None

        self._source: Optional[SchemaSource] = None
        self._gateway: Optional[ModelGateway] = None
        self._task: Optional[asyncio.Task] = None
        self._task_generation: Optional[int] = None

    def _default_source(self, config: DatabaseConfig) -> SchemaSource:
        return SchemaService.from_config(config, self.settings.SAMPLE_ROW_LIMIT)

    @property
    def source(self) -> SchemaSource:
        if self._source is None:
            self._source = self.source_factory(self.config.database)
        return self._source

    @property
    def gateway(self) -> ModelGateway:
        if self._gateway is None:
            self._gateway = self.gateway_factory(self.config.ai)
        return self._gateway

    @property
    def is_connected(self) -> bool:
        return self.status == SessionStatus.CONNECTED

    @property
    def cycle_in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def _set_status(self, status: SessionStatus, message: Optional[str] = None) -> None:
        if status != self.status:
            logger.info(f"Session status: {self.status.value} -> {status.value}")
        self.status = status
        self.status_message = message

    async def test_connections(self) -> Dict[str, ConnectionTestResult]:
        """Probe the database and the model endpoint."""
        database, ai = await asyncio.gather(
            self.source.test_connection(), self.gateway.test_connection()
        )
        return {"database": database, "ai": ai}

    async def connect(self) -> SessionStatus:
        """
        Test both connections and discover the schema.

        The model endpoint being down does not block the session: cycles
        degrade to fallback output until it comes back.
        """
        self._set_status(SessionStatus.CONNECTING)
        results = await self.test_connections()

        if not results["database"].success:
            self._set_status(SessionStatus.ERROR, results["database"].message)
            return self.status

        try:
            self.schema = await self.source.discover_schema()
        except SchemaError as e:
            self._set_status(SessionStatus.ERROR, e.message)
            return self.status

        message = None if results["ai"].success else results["ai"].message
        self._set_status(SessionStatus.CONNECTED, message)
        logger.info(f"Connected; {len(self.schema.tables)} table(s) discovered")
        return self.status

    async def refresh(self) -> Optional[SynthesisResult]:
        """
        Run a synthesis cycle, or join the one already running.

        Returns:
            The applied result, or None when the cycle was abandoned or the
            schema could not be read
        """
        if self.cycle_in_flight and self._task_generation == self.generation:
            logger.info(f"Cycle {self.generation} already running; joining it")
            task = self._task
        else:
            self.generation += 1
            task = asyncio.create_task(self._run_cycle(self.generation))
            self._task = task
            self._task_generation = self.generation

        # Waiting does not cancel the cycle if our caller goes away
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    async def _run_cycle(self, generation: int) -> Optional[SynthesisResult]:
        logger.info(f"Cycle {generation} started")
        try:
            schema = await self.source.get_all_tables_data()
        except SchemaError as e:
            logger.error(f"Cycle {generation}: schema unavailable: {e.message}")
            if generation == self.generation:
                # No schema means nothing to build from, not even fallbacks
                self.result = None
                self.schema = None
                self._set_status(SessionStatus.ERROR, e.message)
            return None

        pipeline = SynthesisPipeline(
            self.gateway,
            prompt_sample_rows=self.settings.PROMPT_SAMPLE_ROWS,
            fallback_insight_tables=self.settings.FALLBACK_INSIGHT_TABLES,
            timeout=self.config.ai.timeout_seconds,
        )
        result = await pipeline.run(schema, generation)
        return result if self.apply_result(generation, result) else None

    def apply_result(self, generation: int, result: SynthesisResult) -> bool:
        """Install a cycle result if its generation is still current."""
        if generation != self.generation:
            logger.info(
                f"Discarding result of cycle {generation}; "
                f"current cycle is {self.generation}"
            )
            return False

        self.result = result
        self.schema = result.schema_snapshot
        self.last_updated = result.completed_at
        self._set_status(SessionStatus.CONNECTED, self.status_message)
        logger.info(f"Cycle {generation} applied ({result.state.value})")
        return True

    def abandon(self) -> None:
        """Invalidate and cancel the in-flight cycle, if any."""
        self.generation += 1
        if self.cycle_in_flight:
            logger.info(f"Abandoning cycle {self._task_generation}")
            self._task.cancel()

    async def update_config(self, config: ConnectionConfig) -> None:
        """Replace the connection config; the session starts over disconnected."""
        await self.close()
        self.config = config
        self.result = None
        self.schema = None
        self.last_updated = None
        self._set_status(SessionStatus.DISCONNECTED)

    async def close(self) -> None:
        """Abandon work in flight and release the data source."""
        self.abandon()
        if self._source is not None:
            await self._source.close()
        self._source = None
        self._gateway = None
