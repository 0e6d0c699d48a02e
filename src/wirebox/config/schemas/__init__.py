"""Configuration schemas package."""

from .container_schema import ContainerConfig, ContainerDefaults, ServiceConfig, TagConfig
from .logging_schema import LogFileConfig, LoggingConfig

__all__ = [
    # Container configuration
    "ContainerConfig",
    "ContainerDefaults",
    "ServiceConfig",
    "TagConfig",
    # Logging configuration
    "LoggingConfig",
    "LogFileConfig",
]
