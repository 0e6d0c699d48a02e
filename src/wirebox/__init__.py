"""wirebox - Root Package.

A dependency injection container: services are registered as classes,
factories or pre-built instances and built on demand, with their constructor
dependencies resolved from explicit arguments, ``%parameter%`` placeholders,
references to other services and type-hint autowiring.

Key Components:
    - domain: Definition and Reference models
    - infrastructure.di: The container, its registry, resolver and cache
    - config: Configuration schemas and file loading

Usage:
    >>> from wirebox import Container
    >>> container = Container()
    >>> container.set_parameters({"director": {"name": "James", "age": 26}})
    >>> container.register("director", Director).set_arguments(["%director.name%", "%director.age%"])
    >>> container.get("director").age
    26
"""

from ._version import __version__
from .domain import Definition, Reference
from .infrastructure.di import (
    CircularDependencyError,
    ConfigException,
    Container,
    ContainerError,
    DependencyInjectionException,
    InstantiationError,
    NotFoundException,
    get_container,
    reset_container,
)
from .infrastructure.logging import get_logger, setup_logging

__all__ = [
    "__version__",
    "CircularDependencyError",
    "ConfigException",
    "Container",
    "ContainerError",
    "Definition",
    "DependencyInjectionException",
    "InstantiationError",
    "NotFoundException",
    "Reference",
    "get_container",
    "get_logger",
    "reset_container",
    "setup_logging",
]
