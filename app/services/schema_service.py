"""Schema discovery and data sampling service."""

import json
import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Tuple

import pandas as pd
from sqlalchemy import func, inspect, select, table, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from app.core.exceptions import SchemaError
from app.database import create_engine_for
from app.schemas.connection import ConnectionTestResult, DatabaseConfig
from app.schemas.descriptor import (
    SAMPLE_ROW_CAP,
    ColumnDescriptor,
    RelationshipEdge,
    SchemaDescriptor,
    TableDescriptor,
)

logger = logging.getLogger(__name__)

# Only plain reads may be run through execute_query
READ_ONLY_STATEMENT = re.compile(r"^\s*(select|with)\b", re.IGNORECASE)

SYSTEM_TABLE_PREFIXES = ("pg_", "sql_", "sqlite_", "information_schema")

TableStructure = Tuple[str, List[ColumnDescriptor], List[RelationshipEdge]]


class SchemaSource(ABC):
    """Where schema snapshots and table data come from."""

    @abstractmethod
    async def test_connection(self) -> ConnectionTestResult:
        """Probe the data source"""

    @abstractmethod
    async def discover_schema(self) -> SchemaDescriptor:
        """Describe tables, columns and relationships"""

    @abstractmethod
    async def get_all_tables_data(self) -> SchemaDescriptor:
        """Describe the schema with sample rows populated"""

    @abstractmethod
    async def execute_query(self, query: str) -> List[Dict[str, Any]]:
        """Run a read-only query"""

    async def close(self) -> None:
        """Release connections held by the source."""


def records_from_rows(columns: List[str], rows: List[Any]) -> List[Dict[str, Any]]:
    """Convert driver rows into JSON-safe records (ISO dates, floats, nulls)."""
    if not rows:
        return []
    df = pd.DataFrame([tuple(row) for row in rows], columns=columns)
    return json.loads(
        df.to_json(orient="records", date_format="iso", default_handler=str)
    )


class SchemaService(SchemaSource):
    """SQLAlchemy-backed schema source for PostgreSQL, MySQL and SQLite."""

    def __init__(
        self,
        engine: AsyncEngine,
        sample_row_limit: int = SAMPLE_ROW_CAP,
        database_label: str = "",
    ):
        self.engine = engine
        self.sample_row_limit = min(sample_row_limit, SAMPLE_ROW_CAP)
        self.database_label = database_label

    @classmethod
    def from_config(
        cls, config: DatabaseConfig, sample_row_limit: int = SAMPLE_ROW_CAP
    ) -> "SchemaService":
        return cls(
            create_engine_for(config),
            sample_row_limit=sample_row_limit,
            database_label=config.database,
        )

    async def test_connection(self) -> ConnectionTestResult:
        """Run a trivial query against the database."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database connection test failed: {e}")
            return ConnectionTestResult(
                success=False, message=f"Database connection failed: {e}"
            )

        return ConnectionTestResult(
            success=True,
            message="Database connection successful",
            details={
                "dialect": self.engine.dialect.name,
                "host": self.engine.url.host,
                "database": self.database_label or self.engine.url.database,
                "connected_at": datetime.utcnow().isoformat(),
            },
        )

    async def discover_schema(self) -> SchemaDescriptor:
        """Describe every user table without sample data."""
        return await self._describe(with_samples=False)

    async def get_all_tables_data(self) -> SchemaDescriptor:
        """Describe every user table with up to ``sample_row_limit`` sample rows."""
        return await self._describe(with_samples=True)

    async def execute_query(self, query: str) -> List[Dict[str, Any]]:
        """Run a read-only query and return its rows as records."""
        statement = query.strip().rstrip(";")
        if not READ_ONLY_STATEMENT.match(statement) or ";" in statement:
            raise SchemaError("Only single SELECT statements can be executed")

        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text(statement))
                return records_from_rows(list(result.keys()), result.fetchall())
        except (SQLAlchemyError, OSError) as e:
            raise SchemaError(f"Query failed: {e}", cause=e) from e

    async def close(self) -> None:
        await self.engine.dispose()

    async def _describe(self, with_samples: bool) -> SchemaDescriptor:
        logger.info("Discovering database schema...")
        try:
            async with self.engine.connect() as conn:
                structure = await conn.run_sync(self._inspect)
                tables = []
                for name, columns, relationships in structure:
                    row_count = await self._row_count(conn, name)
                    sample_rows = (
                        await self._sample_rows(conn, name) if with_samples else []
                    )
                    tables.append(
                        TableDescriptor(
                            name=name,
                            columns=columns,
                            row_count=row_count,
                            sample_rows=sample_rows,
                            relationships=relationships,
                        )
                    )
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Schema discovery failed: {e}")
            raise SchemaError(f"Failed to discover database schema: {e}", cause=e) from e

        logger.info(f"Discovered {len(tables)} table(s)")
        return SchemaDescriptor(tables=tables)

    def _inspect(self, sync_conn: Connection) -> List[TableStructure]:
        inspector = inspect(sync_conn)
        structure = []

        for table_name in inspector.get_table_names():
            if self.is_system_table(table_name):
                logger.debug(f"Skipping system table: {table_name}")
                continue

            pk_constraint = inspector.get_pk_constraint(table_name) or {}
            primary_keys = set(pk_constraint.get("constrained_columns") or [])

            relationships = []
            for fk in inspector.get_foreign_keys(table_name):
                for from_column, to_column in zip(
                    fk["constrained_columns"], fk["referred_columns"]
                ):
                    relationships.append(
                        RelationshipEdge(
                            from_table=table_name,
                            from_column=from_column,
                            to_table=fk["referred_table"],
                            to_column=to_column,
                        )
                    )
            foreign_keys = {edge.from_column for edge in relationships}

            columns = [
                ColumnDescriptor(
                    name=col["name"],
                    type=str(col["type"]),
                    nullable=bool(col.get("nullable", True)),
                    is_primary_key=col["name"] in primary_keys,
                    is_foreign_key=col["name"] in foreign_keys,
                )
                for col in inspector.get_columns(table_name)
            ]
            structure.append((table_name, columns, relationships))

        return structure

    async def _row_count(self, conn: AsyncConnection, table_name: str) -> int:
        result = await conn.execute(select(func.count()).select_from(table(table_name)))
        return result.scalar() or 0

    async def _sample_rows(
        self, conn: AsyncConnection, table_name: str
    ) -> List[Dict[str, Any]]:
        result = await conn.execute(
            select(text("*")).select_from(table(table_name)).limit(self.sample_row_limit)
        )
        return records_from_rows(list(result.keys()), result.fetchall())

    @staticmethod
    def is_system_table(name: str) -> bool:
        """Catalog and engine bookkeeping tables, which are never analysed."""
        return name.lower().startswith(SYSTEM_TABLE_PREFIXES)
