"""Container configuration: schemas and file loading."""
from .loader import load_container_config, parse_container_config
from .schemas import ContainerConfig, ContainerDefaults, LogFileConfig, LoggingConfig, ServiceConfig

__all__ = [
    "ContainerConfig",
    "ContainerDefaults",
    "LogFileConfig",
    "LoggingConfig",
    "ServiceConfig",
    "load_container_config",
    "parse_container_config",
]
