"""Pytest configuration and fixtures."""

import json
from typing import AsyncGenerator, Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from pydantic import SecretStr

from app.config import Settings
from app.core.exceptions import SchemaError
from app.main import app
from app.schemas.connection import (
    AIConfig,
    ConnectionConfig,
    ConnectionTestResult,
    DatabaseConfig,
)
from app.schemas.descriptor import (
    ColumnDescriptor,
    RelationshipEdge,
    SchemaDescriptor,
    TableDescriptor,
)
from app.services.model_gateway import ModelGateway
from app.services.scheduler import RefreshScheduler
from app.services.schema_service import SchemaSource
from app.services.session import DashboardSession

INSIGHTS_RESPONSE = [
    {
        "title": "Electronics drive revenue",
        "description": "Electronics account for 42% of total sales.",
        "type": "opportunity",
        "confidence": 0.85,
        "data": {"share": 42},
    },
    {
        "title": "Low stock on 12 products",
        "description": "12 products have fewer than 5 units in stock.",
        "type": "alert",
        "confidence": 0.9,
    },
]

DASHBOARDS_RESPONSE = [
    {
        "title": "Sales Overview",
        "description": "Headline sales figures",
        "widgets": [
            {
                "id": "revenue",
                "type": "metric",
                "title": "Revenue",
                "data": {"value": 1234.5, "change": -3.2, "period": "vs last month"},
            },
            {
                "id": "stock-health",
                "type": "gauge",
                "title": "Stock health",
                "data": {"value": 72, "max": 100, "status": "good"},
            },
            {
                "id": "daily-sales",
                "type": "chart",
                "chartType": "line",
                "title": "Daily sales",
                "data": [
                    {"date": "2024-01-01", "sales": 120},
                    {"date": "2024-01-02", "sales": 98},
                ],
            },
            {
                "id": "top-products",
                "type": "table",
                "title": "Top products",
                "data": [
                    {"name": "Galaxy S24", "units": 31},
                    {"name": "iPhone 15", "units": 28},
                ],
            },
        ],
    }
]

PRODUCT_ROWS = [
    {"id": 1, "name": "iPhone 15", "brand": "Apple", "price": 18999.0, "cost": 14500.0, "stock_quantity": 12, "category_id": 1},
    {"id": 2, "name": "Galaxy S24", "brand": "Samsung", "price": 16999.0, "cost": 12800.0, "stock_quantity": 4, "category_id": 1},
    {"id": 3, "name": "WH-1000XM5", "brand": "Sony", "price": 6499.0, "cost": 4100.0, "stock_quantity": 27, "category_id": 3},
]


def is_dashboard_prompt(request: httpx.Request) -> bool:
    return "dashboard designer" in json.loads(request.content)["prompt"]


def model_reply(text: str) -> httpx.Response:
    """Ollama-style non-streaming reply."""
    return httpx.Response(200, json={"model": "test-model", "response": text, "done": True})


def ollama_handler(
    insights: Any = INSIGHTS_RESPONSE, dashboards: Any = DASHBOARDS_RESPONSE
) -> Callable[[httpx.Request], httpx.Response]:
    """Mock endpoint answering /api/tags and both generation prompts."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": [{"name": "test-model"}]})
        payload = dashboards if is_dashboard_prompt(request) else insights
        return model_reply(payload if isinstance(payload, str) else json.dumps(payload))

    return handler


class FakeSchemaSource(SchemaSource):
    """In-memory schema source."""

    def __init__(self, schema: SchemaDescriptor, fail: bool = False):
        self.schema = schema
        self.fail = fail
        self.closed = False
        self.calls = 0

    async def test_connection(self) -> ConnectionTestResult:
        if self.fail:
            return ConnectionTestResult(success=False, message="Database connection failed")
        return ConnectionTestResult(success=True, message="Database connection successful")

    async def discover_schema(self) -> SchemaDescriptor:
        if self.fail:
            raise SchemaError("Failed to discover database schema")
        return self.schema.without_samples()

    async def get_all_tables_data(self) -> SchemaDescriptor:
        self.calls += 1
        if self.fail:
            raise SchemaError("Failed to discover database schema")
        return self.schema

    async def execute_query(self, query: str) -> List[Dict[str, Any]]:
        return []

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def products_table() -> TableDescriptor:
    """The products table with three sample rows."""
    return TableDescriptor(
        name="products",
        columns=[
            ColumnDescriptor(name="id", type="INT", nullable=False, is_primary_key=True),
            ColumnDescriptor(name="name", type="VARCHAR(255)", nullable=False),
            ColumnDescriptor(name="brand", type="VARCHAR(100)"),
            ColumnDescriptor(name="price", type="DECIMAL(10,2)", nullable=False),
            ColumnDescriptor(name="cost", type="DECIMAL(10,2)", nullable=False),
            ColumnDescriptor(name="stock_quantity", type="INT", nullable=False),
            ColumnDescriptor(name="category_id", type="INT", is_foreign_key=True),
        ],
        row_count=15420,
        sample_rows=PRODUCT_ROWS,
        relationships=[
            RelationshipEdge(
                from_table="products",
                from_column="category_id",
                to_table="categories",
                to_column="id",
            )
        ],
    )


@pytest.fixture
def products_schema(products_table) -> SchemaDescriptor:
    """Single-table schema."""
    return SchemaDescriptor(tables=[products_table])


@pytest.fixture
def inventory_schema(products_table) -> SchemaDescriptor:
    """Products, sales, categories and customers."""
    return SchemaDescriptor(
        tables=[
            products_table,
            TableDescriptor(
                name="sales",
                columns=[
                    ColumnDescriptor(name="id", type="INT", nullable=False, is_primary_key=True),
                    ColumnDescriptor(name="product_id", type="INT", nullable=False, is_foreign_key=True),
                    ColumnDescriptor(name="quantity", type="INT", nullable=False),
                    ColumnDescriptor(name="total_amount", type="DECIMAL(10,2)", nullable=False),
                    ColumnDescriptor(name="sale_date", type="DATETIME", nullable=False),
                ],
                row_count=89340,
                sample_rows=[
                    {"id": 1, "product_id": 1, "quantity": 2, "total_amount": 37998.0, "sale_date": "2024-01-15T10:30:00"},
                ],
                relationships=[
                    RelationshipEdge(
                        from_table="sales",
                        from_column="product_id",
                        to_table="products",
                        to_column="id",
                    )
                ],
            ),
            TableDescriptor(
                name="categories",
                columns=[
                    ColumnDescriptor(name="id", type="INT", nullable=False, is_primary_key=True),
                    ColumnDescriptor(name="name", type="VARCHAR(100)", nullable=False),
                ],
                row_count=45,
                sample_rows=[{"id": 1, "name": "Electronics"}, {"id": 3, "name": "Audio"}],
            ),
            TableDescriptor(
                name="customers",
                columns=[
                    ColumnDescriptor(name="id", type="INT", nullable=False, is_primary_key=True),
                    ColumnDescriptor(name="name", type="VARCHAR(255)", nullable=False),
                    ColumnDescriptor(name="total_spent", type="DECIMAL(12,2)", nullable=False),
                ],
                row_count=3205,
                sample_rows=[{"id": 1, "name": "Thandi Mokoena", "total_spent": 45230.5}],
            ),
        ]
    )


@pytest.fixture
def empty_schema() -> SchemaDescriptor:
    return SchemaDescriptor(tables=[])


@pytest.fixture
def ai_config() -> AIConfig:
    return AIConfig(endpoint="ollama.test:11434", model="test-model", timeout_seconds=5)


@pytest.fixture
def connection_config(ai_config) -> ConnectionConfig:
    return ConnectionConfig(
        database=DatabaseConfig(
            dialect="mysql",
            host="db.test",
            database="inventory",
            username="oracle",
            password=SecretStr("s3cret-pw"),
        ),
        ai=ai_config,
    )


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(LOG_DIR=str(tmp_path / "logs"), REFRESH_INTERVAL_SECONDS=3600)


@pytest.fixture
def make_gateway(ai_config) -> Callable[..., ModelGateway]:
    """Build a gateway whose HTTP traffic goes to a mock handler."""

    def build(handler: Optional[Callable] = None, **overrides) -> ModelGateway:
        config = ai_config.model_copy(update=overrides)
        return ModelGateway(config, transport=httpx.MockTransport(handler or ollama_handler()))

    return build


@pytest.fixture
def make_session(connection_config, test_settings, make_gateway):
    """Build a session over a fake schema source and a mocked model endpoint."""

    def build(
        schema: SchemaDescriptor,
        handler: Optional[Callable] = None,
        source: Optional[FakeSchemaSource] = None,
    ) -> DashboardSession:
        source = source or FakeSchemaSource(schema)
        gateway = make_gateway(handler)
        return DashboardSession(
            connection_config,
            settings=test_settings,
            source_factory=lambda config: source,
            gateway_factory=lambda config: gateway,
        )

    return build


@pytest_asyncio.fixture(scope="function")
async def session(make_session, inventory_schema) -> AsyncGenerator[DashboardSession, None]:
    """Session over the inventory schema with a well-behaved model."""
    session = make_session(inventory_schema)
    yield session
    await session.close()


@pytest_asyncio.fixture(scope="function")
async def client(session, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """Get test HTTP client."""
    scheduler = RefreshScheduler(session, test_settings.REFRESH_INTERVAL_SECONDS)
    app.state.session = session
    app.state.scheduler = scheduler

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await scheduler.stop()
