"""Schema explorer endpoints."""

from fastapi import APIRouter, Query

from app.api.deps import Session
from app.core.exceptions import BadRequest, NotFound
from app.schemas.descriptor import SchemaDescriptor, TableDescriptor
from app.services.schema_service import SchemaService

router = APIRouter(prefix="/schema", tags=["schema"])


@router.get("/", response_model=SchemaDescriptor)
async def get_schema(
    session: Session,
    include_samples: bool = Query(default=False),
) -> SchemaDescriptor:
    """Last discovered schema snapshot."""
    if session.schema is None:
        raise NotFound("Schema")
    return session.schema if include_samples else session.schema.without_samples()


@router.get("/tables/{table_name}", response_model=TableDescriptor)
async def get_table(table_name: str, session: Session) -> TableDescriptor:
    """One table of the last snapshot, with its sample rows."""
    if SchemaService.is_system_table(table_name):
        raise BadRequest("System tables are not part of the schema")
    if session.schema is None:
        raise NotFound("Schema")

    table = session.schema.get_table(table_name)
    if table is None:
        raise NotFound(f"Table '{table_name}'")
    return table
