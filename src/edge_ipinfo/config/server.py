"""Server configuration settings."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from edge_ipinfo.core.logging import LOG_LEVELS


class ServerSettings(BaseModel):
    """Server-specific configuration settings."""

    host: str = Field(default="127.0.0.1", description="Server host address")

    port: int = Field(default=8787, ge=1, le=65535, description="Server port number")

    reload: bool = Field(default=False, description="Enable auto-reload for development")

    log_level: str = Field(default="INFO", description="Logging level")

    log_file: Path | None = Field(
        default=None,
        description="Optional file receiving JSON-formatted log events",
    )

    json_logs: bool = Field(default=False, description="Render console logs as JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {LOG_LEVELS}")
        return level
