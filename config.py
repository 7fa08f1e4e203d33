"""Configuration management for URL shortener."""

from typing import Any, Dict, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration, read from SHORTENER_* environment variables."""

    # Database settings
    db_user: str = Field(default="postgres", description="Database user")
    db_password: SecretStr = Field(default=SecretStr("postgres"), description="Database password")
    db_host: str = Field(default="localhost", description="Database host")
    db_port: int = Field(default=5432, description="Database port")
    db_name: str = Field(default="postgres", description="Database name")

    db_pool_min_size: int = Field(default=1, ge=0, description="Minimum connections kept in the pool")
    db_pool_max_size: int = Field(default=10, ge=1, description="Maximum connections in the pool")

    db_disable_tls: bool = Field(default=True, description="Connect without TLS")

    db_connect_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for establishing database connections"
    )

    db_create_tables: bool = Field(
        default=False,
        description="Create the urls table at startup"
    )

    # Server settings
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=3000, description="Port to listen on")

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes (each has its own DB pool)"
    )

    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Deadline for store calls made while serving a request"
    )

    readiness_timeout_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Deadline for the readiness database check"
    )

    shutdown_timeout_seconds: int = Field(
        default=20,
        ge=0,
        description="Time given to outstanding requests on shutdown"
    )

    build: str = Field(default="develop", description="Build version reported by /liveness")

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(default=False, description="Use JSON format for logs")

    model_config = {
        "env_prefix": "SHORTENER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def safe_dump(self) -> Dict[str, Any]:
        """Settings as a dict with the database password masked."""
        data = self.model_dump()
        data["db_password"] = "xxxxxx"
        return data


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
