"""Deterministic insights and dashboards built from the schema alone.

Used whenever the generative path fails so the dashboard is never empty. Only
table names, row counts, column counts and the already-sampled rows are used.
"""

from typing import Any, Dict, List

from app.schemas.dashboard import DashboardSpec, TableWidget
from app.schemas.descriptor import SchemaDescriptor, TableDescriptor
from app.schemas.insight import InsightRecord

DEFAULT_MAX_INSIGHT_TABLES = 4

OVERVIEW_TITLE = "Data Overview"
OVERVIEW_DESCRIPTION = "Sample records from every discovered table"


def fallback_insights(
    schema: SchemaDescriptor, max_tables: int = DEFAULT_MAX_INSIGHT_TABLES
) -> List[InsightRecord]:
    """One summary/trend insight per table, or a single alert for an empty schema."""
    if schema.is_empty:
        return [
            InsightRecord(
                title="No Data Available",
                description="No tables were found in the connected database, "
                "so there is nothing to analyse yet.",
                type="alert",
                confidence=1.0,
                data={"tables": 0},
            )
        ]

    insights = []
    for index, table in enumerate(schema.tables[:max_tables]):
        column_count = len(table.columns)
        insights.append(
            InsightRecord(
                title=f"{table.name} overview",
                description=f"Table '{table.name}' holds {table.row_count:,} rows "
                f"across {column_count} columns.",
                # Even positions summarize, odd positions read as a trend
                type="summary" if index % 2 == 0 else "trend",
                confidence=1.0,
                data={"rows": table.row_count, "columns": column_count},
            )
        )
    return insights


def _uniform_rows(table: TableDescriptor) -> List[Dict[str, Any]]:
    """Sample rows projected onto one key order, missing values as None."""
    keys = list(table.column_names)
    for row in table.sample_rows:
        for key in row:
            if key not in keys:
                keys.append(key)
    return [{key: row.get(key) for key in keys} for row in table.sample_rows]


def fallback_dashboards(schema: SchemaDescriptor) -> List[DashboardSpec]:
    """A single overview dashboard with one table widget per table."""
    if schema.is_empty:
        return []

    widgets = [
        TableWidget(
            id=f"table-{table.name}",
            title=table.name.strip() or f"Table {index + 1}",
            data=_uniform_rows(table),
        )
        for index, table in enumerate(schema.tables)
    ]
    return [
        DashboardSpec(
            title=OVERVIEW_TITLE,
            description=OVERVIEW_DESCRIPTION,
            widgets=widgets,
        )
    ]
