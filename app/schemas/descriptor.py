"""Schema descriptor models.

A ``SchemaDescriptor`` is produced once per successful discovery and is frozen
for the rest of the synthesis cycle. Table and column order is discovery order;
prompts and fallbacks rely on it being stable.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Upper bound on sample rows carried per table
SAMPLE_ROW_CAP = 10


class ColumnDescriptor(BaseModel):
    """A single column of a discovered table."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str
    nullable: bool = True
    is_primary_key: bool = False
    is_foreign_key: bool = False


class RelationshipEdge(BaseModel):
    """Foreign-key reference from one column to another."""

    model_config = ConfigDict(frozen=True)

    from_table: str
    from_column: str
    to_table: str
    to_column: str


class TableDescriptor(BaseModel):
    """A discovered table with bounded sample data."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    columns: Tuple[ColumnDescriptor, ...] = ()
    row_count: int = Field(default=0, ge=0)
    sample_rows: Tuple[Dict[str, Any], ...] = ()
    relationships: Tuple[RelationshipEdge, ...] = ()

    @field_validator("sample_rows", mode="before")
    @classmethod
    def cap_sample_rows(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(value[:SAMPLE_ROW_CAP])
        return value

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def primary_key(self) -> Optional[ColumnDescriptor]:
        return next((c for c in self.columns if c.is_primary_key), None)


class SchemaDescriptor(BaseModel):
    """Normalized description of a relational schema."""

    model_config = ConfigDict(frozen=True)

    tables: Tuple[TableDescriptor, ...] = ()

    @field_validator("tables")
    @classmethod
    def unique_table_names(
        cls, value: Tuple[TableDescriptor, ...]
    ) -> Tuple[TableDescriptor, ...]:
        names = [t.name for t in value]
        if len(names) != len(set(names)):
            raise ValueError("table names must be unique within a schema")
        return value

    @property
    def is_empty(self) -> bool:
        return not self.tables

    def get_table(self, name: str) -> Optional[TableDescriptor]:
        return next((t for t in self.tables if t.name == name), None)

    def list_tables(self) -> List[str]:
        return [t.name for t in self.tables]

    def relationships(self) -> List[RelationshipEdge]:
        return [edge for t in self.tables for edge in t.relationships]

    def without_samples(self) -> "SchemaDescriptor":
        """Copy of this descriptor with sample rows removed."""
        return SchemaDescriptor(
            tables=tuple(t.model_copy(update={"sample_rows": ()}) for t in self.tables)
        )
