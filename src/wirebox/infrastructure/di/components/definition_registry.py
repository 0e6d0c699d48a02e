"""Definition registration management for the DI container."""

import inspect
import threading
from typing import Any, Dict, List, Optional

from wirebox.domain.definition import Definition, ServiceId, SourceKind
from wirebox.infrastructure.di import reflection
from wirebox.infrastructure.di.exceptions import ConfigException, NotFoundException
from wirebox.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


class DefinitionRegistry:
    """
    Manages service definitions, aliases and type bindings.

    Identifiers are strings; classes passed as identifiers are normalized to
    ``module.QualifiedName`` and remembered, so classes that cannot be
    imported by path (for instance ones defined inside a function) still
    resolve.
    """

    def __init__(self):
        self._definitions: Dict[str, Definition] = {}
        self._aliases: Dict[str, str] = {}
        self._type_bindings: Dict[str, str] = {}
        self._known_classes: Dict[str, type] = {}
        self._lock = threading.RLock()

    def normalize_id(self, service_id: ServiceId) -> str:
        """Convert a class or string identifier to its canonical string form."""
        if inspect.isclass(service_id):
            canonical = reflection.class_id(service_id)
            with self._lock:
                self._known_classes.setdefault(canonical, service_id)
            return canonical
        if isinstance(service_id, str):
            return service_id
        raise TypeError(f"Service id must be a string or a class, got {type(service_id).__name__}")

    def register(
        self,
        service_id: ServiceId,
        source: Any,
        shared: bool,
        autowired: bool,
        kind: Optional[SourceKind] = None,
    ) -> Definition:
        """
        Register or replace a definition.

        Registering a literal instance also registers it under the canonical
        id of its class, so it can be looked up by type.

        Args:
            service_id: Identifier of the service
            source: Class, dotted class path, factory or literal instance
            shared: Shared flag (container default or explicit)
            autowired: Autowire flag (container default or explicit)
            kind: Forces the source kind instead of inferring it from the source

        Returns:
            The new definition, for fluent configuration
        """
        canonical = self.normalize_id(service_id)
        if inspect.isclass(source):
            self.normalize_id(source)

        definition = Definition(canonical, source, shared=shared, autowired=autowired, kind=kind)
        with self._lock:
            self._definitions[canonical] = definition
            self._aliases.pop(canonical, None)

            # Literal scalars and containers are not looked up by type
            if definition.kind is SourceKind.INSTANCE and not reflection.is_primitive_type(type(source)):
                type_id = self.normalize_id(type(source))
                if type_id != canonical:
                    self._definitions[type_id] = Definition(
                        type_id, source, shared=True, autowired=autowired, kind=SourceKind.INSTANCE
                    )
                    self._aliases.pop(type_id, None)

        logger.debug("Registered definition", service_id=canonical, kind=definition.kind.value)
        return definition

    def has_definition(self, service_id: ServiceId) -> bool:
        with self._lock:
            return self.normalize_id(service_id) in self._definitions

    def find_definition(self, service_id: ServiceId) -> Optional[Definition]:
        """Get the definition for an id, or None if it is not registered."""
        with self._lock:
            return self._definitions.get(self.normalize_id(service_id))

    def get_definition(self, service_id: ServiceId) -> Definition:
        """
        Get the definition for an id.

        Raises:
            NotFoundException: If the id is not registered
        """
        definition = self.find_definition(service_id)
        if definition is None:
            raise NotFoundException(self.normalize_id(service_id))
        return definition

    def get_definitions(self) -> Dict[str, Definition]:
        with self._lock:
            return self._definitions.copy()

    def remove_definition(self, service_id: ServiceId) -> bool:
        """Remove a definition. Returns True if one was removed."""
        canonical = self.normalize_id(service_id)
        with self._lock:
            if canonical in self._definitions:
                del self._definitions[canonical]
                logger.debug("Removed definition", service_id=canonical)
                return True
            return False

    def set_alias(self, alias: ServiceId, target: ServiceId) -> None:
        """Make ``alias`` resolve to ``target``."""
        alias_id = self.normalize_id(alias)
        target_id = self.normalize_id(target)
        if alias_id == target_id:
            raise ConfigException(f'An alias cannot reference itself: "{alias_id}"')
        with self._lock:
            self._aliases[alias_id] = target_id
        logger.debug("Registered alias", alias=alias_id, target=target_id)

    def has_alias(self, alias: ServiceId) -> bool:
        with self._lock:
            return self.normalize_id(alias) in self._aliases

    def get_alias(self, alias: ServiceId) -> str:
        """
        Get the target of an alias.

        Raises:
            NotFoundException: If no such alias exists
        """
        alias_id = self.normalize_id(alias)
        with self._lock:
            if alias_id not in self._aliases:
                raise NotFoundException(alias_id, f'Alias "{alias_id}" is not defined')
            return self._aliases[alias_id]

    def get_aliases(self) -> Dict[str, str]:
        with self._lock:
            return self._aliases.copy()

    def resolve_alias(self, service_id: ServiceId) -> str:
        """
        Follow aliases until a non-alias id is reached.

        Raises:
            ConfigException: If the aliases form a loop
        """
        current = self.normalize_id(service_id)
        seen = [current]
        with self._lock:
            while current in self._aliases:
                current = self._aliases[current]
                if current in seen:
                    raise ConfigException(f"Circular alias: {' -> '.join(seen + [current])}")
                seen.append(current)
        return current

    def bind_type(self, interface: ServiceId, service_id: ServiceId) -> None:
        """Record that requests for ``interface`` resolve ``service_id``."""
        interface_id = self.normalize_id(interface)
        target_id = self.normalize_id(service_id)
        with self._lock:
            self._type_bindings[interface_id] = target_id
        logger.debug("Registered type binding", interface=interface_id, service_id=target_id)

    def get_type_binding(self, interface: ServiceId) -> Optional[str]:
        with self._lock:
            return self._type_bindings.get(self.normalize_id(interface))

    def find_class(self, service_id: ServiceId) -> Optional[type]:
        """
        Find the class an identifier names.

        Known classes are returned directly; other dotted ids are imported.

        Returns:
            The class, or None if the id does not name an importable class
        """
        canonical = self.normalize_id(service_id)
        with self._lock:
            if canonical in self._known_classes:
                return self._known_classes[canonical]

        try:
            found = reflection.import_string(canonical)
        except ImportError as e:
            logger.debug("Identifier is not an importable class", service_id=canonical, error=str(e))
            return None
        if not inspect.isclass(found):
            return None

        with self._lock:
            self._known_classes[canonical] = found
        return found

    def is_instantiable(self, service_id: ServiceId) -> bool:
        return reflection.is_instantiable(self.find_class(service_id))

    def has(self, service_id: ServiceId) -> bool:
        """True for definitions, aliases, type bindings and instantiable classes."""
        canonical = self.normalize_id(service_id)
        with self._lock:
            if canonical in self._definitions or canonical in self._aliases or canonical in self._type_bindings:
                return True
        return self.is_instantiable(canonical)

    def find_tagged_ids(self, tag: str) -> Dict[str, List[Dict[str, Any]]]:
        """Map the ids of definitions carrying ``tag`` to that tag's attribute lists."""
        with self._lock:
            return {
                service_id: definition.get_tag(tag)
                for service_id, definition in self._definitions.items()
                if definition.has_tag(tag)
            }

    def clear(self) -> None:
        """Clear all registrations."""
        with self._lock:
            self._definitions.clear()
            self._aliases.clear()
            self._type_bindings.clear()
            logger.info("Definition registry cleared")

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics."""
        with self._lock:
            return {
                "total_definitions": len(self._definitions),
                "aliases": len(self._aliases),
                "type_bindings": len(self._type_bindings),
                "source_kinds": {
                    kind.value: sum(1 for d in self._definitions.values() if d.kind is kind)
                    for kind in SourceKind
                },
            }
