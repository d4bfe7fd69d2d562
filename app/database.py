"""Async SQLAlchemy engines for the analysed database."""

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from app.config import get_settings
from app.schemas.connection import DatabaseConfig

settings = get_settings()

ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "mysql": "mysql+aiomysql",
    "sqlite": "sqlite+aiosqlite",
}

DEFAULT_PORTS = {"postgresql": 5432, "mysql": 3306}


def build_database_url(config: DatabaseConfig) -> URL:
    """Build the async driver URL for a database config."""
    drivername = ASYNC_DRIVERS[config.dialect]
    if config.dialect == "sqlite":
        return URL.create(drivername, database=config.database or ":memory:")

    # Accept "host:port" as typed into a connection form
    host, port = config.host, config.port
    if port is None and ":" in host:
        host, _, raw_port = host.rpartition(":")
        port = int(raw_port) if raw_port.isdigit() else None

    return URL.create(
        drivername,
        username=config.username,
        password=config.password.get_secret_value() if config.password else None,
        host=host,
        port=port or DEFAULT_PORTS[config.dialect],
        database=config.database,
    )


def create_engine_for(config: DatabaseConfig) -> AsyncEngine:
    """Create an async engine for the configured database."""
    options = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if config.dialect != "sqlite":
        options.update(pool_size=5, max_overflow=10, pool_recycle=3600)
    return create_async_engine(build_database_url(config), **options)
