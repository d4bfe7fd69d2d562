"""Connection configuration schemas."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, SecretStr


class DatabaseConfig(BaseModel):
    """Target database the dashboards are synthesized from."""

    dialect: Literal["postgresql", "mysql", "sqlite"] = "mysql"
    host: str = Field(default="localhost", min_length=1)
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    database: str = ""
    username: Optional[str] = None
    password: Optional[SecretStr] = None


class AIConfig(BaseModel):
    """Generative model endpoint (host:port) and model name."""

    endpoint: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    timeout_seconds: float = Field(default=60.0, gt=0)


class ConnectionConfig(BaseModel):
    """Everything one synthesis cycle needs to reach its collaborators."""

    database: DatabaseConfig
    ai: AIConfig


class ConnectionTestResult(BaseModel):
    """Outcome of a connection probe."""

    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class ConnectionView(BaseModel):
    """Connection config as exposed over the API (password never echoed)."""

    dialect: str
    host: str
    port: Optional[int]
    database: str
    username: Optional[str]
    has_password: bool
    ai_endpoint: str
    ai_model: str
    ai_timeout_seconds: float

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> "ConnectionView":
        return cls(
            dialect=config.database.dialect,
            host=config.database.host,
            port=config.database.port,
            database=config.database.database,
            username=config.database.username,
            has_password=config.database.password is not None,
            ai_endpoint=config.ai.endpoint,
            ai_model=config.ai.model,
            ai_timeout_seconds=config.ai.timeout_seconds,
        )
