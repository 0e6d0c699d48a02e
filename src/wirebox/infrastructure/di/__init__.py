"""Dependency Injection package."""
from .container import (
    Container,
    get_container,
    reset_container
)
from .exceptions import (
    CircularDependencyError,
    ConfigException,
    ContainerError,
    DependencyInjectionException,
    InstantiationError,
    NotFoundException,
)

__all__ = [
    'Container',
    'get_container',
    'reset_container',
    'CircularDependencyError',
    'ConfigException',
    'ContainerError',
    'DependencyInjectionException',
    'InstantiationError',
    'NotFoundException',
]
