"""Logging configuration schema."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogFileConfig(BaseModel):
    """Rotating log file configuration."""

    path: str = Field("logs/wirebox.log", description="Log file path (environment variables are expanded)")
    max_size_mb: int = Field(10, description="Maximum size of a log file before rotation")
    backup_count: int = Field(5, description="Number of rotated files to keep")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(extra="forbid")

    level: str = Field("WARNING", description="Root log level")
    destination: Literal["stdout", "file", "both"] = Field("stdout", description="Where log records are written")
    file: LogFileConfig = Field(default_factory=LogFileConfig, description="File destination settings")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()
