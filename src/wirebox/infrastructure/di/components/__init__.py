"""
DI Container components package.

This package provides modular dependency injection components:
- DefinitionRegistry: Definitions, aliases and type bindings
- ParameterStore: Parameters and placeholder resolution
- DependencyResolver: Argument resolution and autowiring
- InstanceCache: Shared service instances
"""

from .definition_registry import DefinitionRegistry
from .dependency_resolver import DependencyResolver
from .instance_cache import InstanceCache
from .parameter_store import ParameterStore

__all__ = [
    "DefinitionRegistry",
    "DependencyResolver",
    "InstanceCache",
    "ParameterStore",
]
