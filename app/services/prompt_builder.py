"""
Prompt builder that renders a discovered schema into the two generation prompts.

Both builders are pure: the same descriptor always renders to the same text.
Tables and columns are emitted in descriptor order, sample rows keep their key
order, and non-JSON values (dates, decimals) are rendered with ``str``.
"""

import json
from typing import Any, Dict, List

from app.schemas.descriptor import ColumnDescriptor, SchemaDescriptor

DEFAULT_PROMPT_SAMPLE_ROWS = 3

INSIGHT_CONTRACT = """Respond with ONLY a JSON array (no prose, no markdown) where every element has this shape:
{
  "title": string (short, non-empty),
  "description": string (non-empty, cite concrete numbers from the data),
  "type": one of "trend" | "alert" | "opportunity" | "summary",
  "confidence": number between 0.0 and 1.0,
  "data": optional object mapping metric name -> number or string
}"""

DASHBOARD_CONTRACT = """Respond with ONLY a JSON array (no prose, no markdown) of dashboards where every element has this shape:
{
  "title": string,
  "description": string,
  "widgets": array of widgets, each with
    "id": string unique within the dashboard,
    "type": one of "metric" | "chart" | "table" | "gauge",
    "title": string (non-empty),
    "chartType": one of "line" | "bar" | "pie" | "area" (required when type is "chart"),
    "data": depends on type:
      metric -> {"value": number, "change": number (optional, percent), "period": string (optional), "currency": boolean (optional)}
      chart  -> array of records; line/area records have "date" plus numeric series keys, bar/pie records have "category" or "name" plus a numeric key such as "sales"
      table  -> array of records that all share the same keys
      gauge  -> {"value": number from 0 to 100, "max": number, "status": one of "good" | "warning" | "critical"}
}"""


def _render_row(row: Dict[str, Any]) -> str:
    return json.dumps(row, default=str, ensure_ascii=False)


def _render_column(column: ColumnDescriptor) -> str:
    flags: List[str] = []
    if column.is_primary_key:
        flags.append("PRIMARY KEY")
    if column.is_foreign_key:
        flags.append("FOREIGN KEY")
    flags.append("NULL" if column.nullable else "NOT NULL")
    return f"    - {column.name} ({column.type}) {', '.join(flags)}"


def build_insight_prompt(
    schema: SchemaDescriptor, sample_rows: int = DEFAULT_PROMPT_SAMPLE_ROWS
) -> str:
    """Prompt asking for business insights grounded in sampled rows."""
    lines: List[str] = [
        "You are a business intelligence analyst. Study the database tables below "
        "and produce concise, actionable business insights.",
        "",
        "DATABASE TABLES:",
    ]
    if schema.is_empty:
        lines.append("(no tables were discovered)")
    for table in schema.tables:
        lines.append(f"- Table: {table.name}")
        lines.append(f"  Rows: {table.row_count}")
        lines.append(f"  Columns: {', '.join(table.column_names)}")
        rows = table.sample_rows[:sample_rows]
        if rows:
            lines.append("  Sample rows:")
            lines.extend(f"    {_render_row(row)}" for row in rows)
    lines.append("")
    lines.append(INSIGHT_CONTRACT)
    return "\n".join(lines)


def build_dashboard_prompt(schema: SchemaDescriptor) -> str:
    """Prompt asking for dashboard layouts derived from the schema structure."""
    lines: List[str] = [
        "You are a dashboard designer. Based on the database structure below, "
        "design dashboards that give a business owner a clear picture of performance.",
        "",
        "DATABASE STRUCTURE:",
    ]
    if schema.is_empty:
        lines.append("(no tables were discovered)")
    for table in schema.tables:
        lines.append(f"- Table: {table.name} ({table.row_count} rows)")
        lines.append("  Columns:")
        lines.extend(_render_column(column) for column in table.columns)
        for edge in table.relationships:
            lines.append(
                f"  References: {edge.from_table}.{edge.from_column} -> "
                f"{edge.to_table}.{edge.to_column}"
            )
    lines.append("")
    lines.append(DASHBOARD_CONTRACT)
    return "\n".join(lines)
