"""
Dependency Injection Container implementation.

The container maps service identifiers to definitions and builds services on
demand, resolving constructor and factory parameters from explicit arguments,
configuration parameters and other services.
"""
import inspect
import os
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError

from wirebox.config.schemas import ContainerConfig, ContainerDefaults, ServiceConfig
from wirebox.domain.definition import Definition, ServiceId, SourceKind
from wirebox.domain.reference import Reference
from wirebox.infrastructure.di import reflection
from wirebox.infrastructure.di.components import (
    DefinitionRegistry,
    DependencyResolver,
    InstanceCache,
    ParameterStore,
)
from wirebox.infrastructure.di.exceptions import (
    CircularDependencyError,
    ConfigException,
    ContainerError,
    InstantiationError,
    NotFoundException,
)
from wirebox.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

_MISSING = object()


@contextmanager
def timed_operation(operation_name: str) -> Iterator[None]:
    """Context manager to time and log an operation."""
    start_time = time.time()
    try:
        yield
    finally:
        elapsed_time = time.time() - start_time
        logger.debug(f"{operation_name} completed in {elapsed_time:.4f}s")


class Container:
    """
    Dependency injection container.

    Features:
    - Classes, factories and pre-built instances as service sources
    - Explicit arguments by name or position, with ``%parameter%`` placeholders
      and References to other services
    - Autowiring of class-typed constructor parameters, with Optional fallback
    - Shared services cached per container, aliases and interface bindings
    - Circular dependency detection

    Usage:
        container = Container()
        container.set_parameters({"director": {"name": "James"}})
        container.register("director", Director).set_arguments({"name": "%director.name%"})
        director = container.get("director")
    """

    # Reserved id under which the container registers itself
    SERVICE_ID = "service_container"

    def __init__(self, defaults: Optional[ContainerDefaults] = None, parameters: Optional[Mapping[str, Any]] = None):
        """Initialize an empty container that can inject itself."""
        self._registry = DefinitionRegistry()
        self._parameters = ParameterStore(parameters)
        self._instances = InstanceCache()
        self._resolver = DependencyResolver(self, self._parameters)
        self._defaults = defaults or ContainerDefaults()

        # Serializes cache check, build and cache store for first resolutions
        self._lock = threading.RLock()
        self._resolution_stack: List[str] = []

        self.register_instance(self.SERVICE_ID, self)
        # Subclasses are registered under their own class id; parameters typed
        # with the base class must still receive this container.
        self.bind_type(Container, self.SERVICE_ID)

    # Registration

    def register(self, service_id: Any, source: Any = None) -> Definition:
        """
        Register a service.

        Args:
            service_id: Identifier (string or class). If ``source`` is omitted,
                a class or dotted class path is registered as its own source and
                any other object is registered as a pre-built instance under the
                id of its class.
            source: Class, dotted class path, factory callable,
                ``(target, "method")`` tuple, or pre-built instance. A tuple is
                a factory only if its target is a class, a dotted path or an
                object with that method; other tuples are instances.

        Returns:
            The definition, for fluent configuration
        """
        if source is None:
            if isinstance(service_id, str) or inspect.isclass(service_id):
                source = service_id
            else:
                return self.register_instance(type(service_id), service_id)

        return self._store_definition(
            service_id,
            source,
            shared=self._defaults.share,
            autowired=self._defaults.autowire,
        )

    def register_instance(self, service_id: ServiceId, instance: Any) -> Definition:
        """Register a pre-built instance; it is returned as-is by every ``get``."""
        return self._store_definition(
            service_id,
            instance,
            shared=True,
            autowired=self._defaults.autowire,
            kind=SourceKind.INSTANCE,
        )

    def _store_definition(self, service_id: ServiceId, source: Any, **options: Any) -> Definition:
        with self._lock:
            definition = self._registry.register(service_id, source, **options)
            # Instances built from a replaced definition must not be served again
            self._instances.remove(definition.id)
            if definition.kind is SourceKind.INSTANCE:
                self._instances.remove(reflection.class_id(type(source)))
        return definition

    def set_alias(self, alias: ServiceId, service_id: ServiceId) -> None:
        self._registry.set_alias(alias, service_id)

    def get_alias(self, alias: ServiceId) -> str:
        return self._registry.get_alias(alias)

    def bind_type(self, interface: ServiceId, service_id: ServiceId) -> None:
        """Resolve requests for ``interface`` (and parameters typed with it) with ``service_id``."""
        self._registry.bind_type(interface, service_id)

    def set_defaults(self, defaults: Union[ContainerDefaults, Mapping[str, Any]]) -> None:
        """
        Change the defaults applied to definitions registered from now on.

        Args:
            defaults: ``{"share": bool, "autowire": bool}``; omitted keys keep
                their current value

        Raises:
            ConfigException: If the defaults contain unknown keys or invalid values
        """
        if isinstance(defaults, ContainerDefaults):
            self._defaults = defaults
            return
        try:
            self._defaults = ContainerDefaults.model_validate({**self._defaults.model_dump(), **defaults})
        except ValidationError as e:
            raise ConfigException(f"Invalid container defaults: {e}", e.errors()) from e
        logger.debug("Container defaults changed", share=self._defaults.share, autowire=self._defaults.autowire)

    def get_defaults(self) -> ContainerDefaults:
        return self._defaults

    # Definitions

    def has_definition(self, service_id: ServiceId) -> bool:
        return self._registry.has_definition(service_id)

    def get_definition(self, service_id: ServiceId) -> Definition:
        return self._registry.get_definition(service_id)

    def get_definitions(self) -> Dict[str, Definition]:
        return self._registry.get_definitions()

    def remove_definition(self, service_id: ServiceId) -> bool:
        """Remove a definition and any shared instance built from it. Returns True if one was removed."""
        with self._lock:
            canonical = self._registry.normalize_id(service_id)
            self._instances.remove(canonical)
            return self._registry.remove_definition(canonical)

    def find_tagged_service_ids(self, tag: str) -> Dict[str, List[Dict[str, Any]]]:
        """Map the ids of services tagged ``tag`` to the attributes of each tag occurrence."""
        return self._registry.find_tagged_ids(tag)

    # Parameters

    def set_parameters(self, parameters: Mapping[str, Any]) -> None:
        self._parameters.set_all(parameters)

    def add_parameters(self, parameters: Mapping[str, Any]) -> None:
        self._parameters.add(parameters)

    def set_parameter(self, name: str, value: Any) -> None:
        self._parameters.set(name, value)

    def get_parameter(self, path: str, default: Any = None) -> Any:
        return self._parameters.get(path, default)

    def has_parameter(self, path: str) -> bool:
        return self._parameters.has(path)

    def get_parameters(self) -> Dict[str, Any]:
        return self._parameters.get_all()

    def resolve(self, value: Any) -> Any:
        """Resolve placeholders and References in an arbitrary value."""
        return self._resolver.resolve_value(value)

    # Resolution

    def has(self, service_id: ServiceId) -> bool:
        """
        Check if a service can be requested.

        True for registered ids, aliases, bound interfaces and concrete classes
        the container can build without registration.
        """
        return self._registry.has(service_id)

    def get(self, service_id: ServiceId) -> Any:
        """
        Get a service.

        Args:
            service_id: Identifier, alias, bound interface or concrete class

        Returns:
            The service; the same object on every call for shared services

        Raises:
            NotFoundException: If nothing is registered or buildable for the id
            DependencyInjectionException: If a parameter cannot be satisfied
            CircularDependencyError: If the service depends on itself
            ConfigException: If a placeholder references a missing parameter
            InstantiationError: If the class or factory raises
        """
        canonical = self._registry.resolve_alias(service_id)

        cached = self._get_cached(canonical)
        if cached is not _MISSING:
            return cached

        with self._lock:
            if canonical in self._resolution_stack:
                chain = self._resolution_stack[self._resolution_stack.index(canonical):]
                raise CircularDependencyError(chain + [canonical])

            self._resolution_stack.append(canonical)
            try:
                return self._resolve(canonical)
            finally:
                self._resolution_stack.pop()

    def reset(self) -> None:
        """Drop all built shared instances; definitions and parameters are kept."""
        with self._lock:
            self._instances.clear()
        logger.debug("Shared instances cleared")

    def _get_cached(self, canonical: str) -> Any:
        definition = self._registry.find_definition(canonical)
        if definition is None:
            return _MISSING
        if definition.kind is SourceKind.INSTANCE:
            return definition.source
        if definition.is_shared() and self._instances.has(canonical):
            return self._instances.get(canonical)
        return _MISSING

    def _resolve(self, canonical: str) -> Any:
        definition = self._registry.find_definition(canonical)

        if definition is None:
            bound = self._registry.get_type_binding(canonical)
            if bound is not None:
                logger.debug("Resolving bound type", interface=canonical, service_id=bound)
                return self.get(bound)
            definition = self._auto_register(canonical)

        # Another thread may have built it while we waited for the lock
        cached = self._get_cached(canonical)
        if cached is not _MISSING:
            return cached

        instance = self._build(definition)
        if definition.is_shared():
            self._instances.set(canonical, instance)
        return instance

    def _auto_register(self, canonical: str) -> Definition:
        cls = self._registry.find_class(canonical)
        if not reflection.is_instantiable(cls):
            raise NotFoundException(canonical)
        logger.debug("Auto-registering class", service_id=canonical)
        return self.register(cls)

    def _build(self, definition: Definition) -> Any:
        logger.debug("Building service", service_id=definition.id, kind=definition.kind.value)

        try:
            target = reflection.get_call_target(definition.source)
        except (ImportError, AttributeError) as e:
            raise NotFoundException(
                definition.id, f'Cannot load source "{definition.source}" of service "{definition.id}": {e}'
            ) from e

        if inspect.isclass(target) and reflection.is_abstract(target):
            raise NotFoundException(
                definition.id, f'Class "{reflection.class_id(target)}" of service "{definition.id}" is not instantiable'
            )

        with timed_operation(f"Build {definition.id}"):
            try:
                parameters = reflection.get_parameters(target)
            except (TypeError, ValueError) as e:
                logger.error(f"Failed to get signature for {definition.id}: {str(e)}")
                raise InstantiationError(definition.id, f"Failed to get signature: {str(e)}", e) from e

            args, kwargs = self._resolver.resolve_arguments(definition, parameters)

            try:
                return target(*args, **kwargs)
            except ContainerError:
                raise
            except Exception as e:
                logger.error(f"Failed to build {definition.id}: {str(e)}")
                raise InstantiationError(definition.id, str(e), e) from e

    # Configuration

    def configure(self, config: ContainerConfig) -> None:
        """
        Apply a configuration: defaults, parameters, services, aliases and bindings.

        String arguments starting with ``@`` become References to the named
        service; ``@@`` escapes a literal ``@``.

        Raises:
            ConfigException: If a factory path cannot be imported
        """
        if config.logging is not None:
            from wirebox.infrastructure.logging.logger import setup_logging
            setup_logging(config.logging)

        self.set_defaults(config.defaults)
        self.add_parameters(config.parameters)

        for service_id, service in config.services.items():
            self._configure_service(service_id, service)

        for alias, service_id in config.aliases.items():
            self.set_alias(alias, service_id)

        for interface, service_id in config.bindings.items():
            self.bind_type(interface, service_id)

        logger.debug(
            "Container configured",
            services=len(config.services),
            aliases=len(config.aliases),
            bindings=len(config.bindings),
        )

    @classmethod
    def from_config(cls, config: Union[ContainerConfig, Mapping[str, Any], str, os.PathLike]) -> "Container":
        """
        Create a container from a configuration object, mapping or file path.

        Raises:
            ConfigException: If the configuration cannot be loaded or is invalid
        """
        from wirebox.config.loader import load_container_config, parse_container_config

        if isinstance(config, (str, os.PathLike)):
            config = load_container_config(os.fspath(config))
        elif not isinstance(config, ContainerConfig):
            config = parse_container_config(dict(config))

        container = cls()
        container.configure(config)
        return container

    def _configure_service(self, service_id: str, service: ServiceConfig) -> None:
        if service.factory:
            try:
                source = reflection.import_string(service.factory)
            except ImportError as e:
                raise ConfigException(f'Cannot import factory "{service.factory}" of service "{service_id}": {e}') from e
        else:
            source = service.class_ or service_id

        definition = self.register(service_id, source)
        definition.set_arguments(_to_references(service.arguments))
        if service.shared is not None:
            definition.set_shared(service.shared)
        if service.autowired is not None:
            definition.set_autowired(service.autowired)
        for tag in service.tags:
            attributes = tag.model_dump(exclude={"name"})
            definition.add_tag(tag.name, **attributes)


def _to_references(value: Any) -> Any:
    """Turn ``@id`` strings into References, recursively."""
    if isinstance(value, str) and value.startswith("@"):
        return value[1:] if value.startswith("@@") else Reference(value[1:])
    if isinstance(value, dict):
        return {key: _to_references(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_references(item) for item in value]
    return value


# Global container instance
_container: Optional[Container] = None


def get_container() -> Container:
    """
    Get the global container instance.

    Returns:
        Global container instance
    """
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Reset the global container instance."""
    global _container
    if _container:
        _container.reset()
    _container = None
