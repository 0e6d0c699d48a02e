"""
Service definition model.

A Definition is the recipe the container follows to build one service: what to
call (a class, a factory or nothing at all for a pre-built instance), which
arguments to pass explicitly, and whether the result is shared and autowired.
"""
import functools
import inspect
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

ServiceId = Union[str, type]
ArgumentKey = Union[int, str]


class SourceKind(str, Enum):
    """How a definition produces its service."""

    CLASS = "class"
    FACTORY = "factory"
    INSTANCE = "instance"


def classify_source(source: Any) -> SourceKind:
    """
    Decide which kind of source a registration value is.

    Classes and dotted class paths are constructed; functions, methods,
    partials and ``(target, "method")`` tuples are called; anything else is a
    pre-built instance. A tuple is a factory only when its target is a class,
    a dotted path, or an object that has the named method, so plain string
    pairs such as ``("a", "b")`` stay instances.
    """
    if inspect.isclass(source) or isinstance(source, str):
        return SourceKind.CLASS
    if isinstance(source, tuple) and len(source) == 2 and isinstance(source[1], str):
        if _is_method_target(*source):
            return SourceKind.FACTORY
        return SourceKind.INSTANCE
    if inspect.isroutine(source) or isinstance(source, functools.partial):
        return SourceKind.FACTORY
    return SourceKind.INSTANCE


def _is_method_target(target: Any, method_name: str) -> bool:
    if inspect.isclass(target):
        return True
    if isinstance(target, str):
        return "." in target
    return callable(getattr(target, method_name, None))


class Definition:
    """Registered recipe for building a single service."""

    def __init__(
        self,
        service_id: str,
        source: Any,
        shared: bool = True,
        autowired: bool = True,
        kind: Optional[SourceKind] = None,
    ):
        self.id = service_id
        self.source = source
        self.kind = kind or classify_source(source)
        self._arguments: Dict[ArgumentKey, Any] = {}
        self._shared = shared
        self._autowired = autowired
        self._tags: Dict[str, List[Dict[str, Any]]] = {}

    def set_arguments(self, arguments: Union[Dict[ArgumentKey, Any], Sequence[Any]]) -> "Definition":
        """
        Replace the explicit arguments.

        Args:
            arguments: Mapping keyed by parameter name or positional index, or
                a list/tuple whose positions become the index keys.

        Returns:
            This definition, for chaining.
        """
        if isinstance(arguments, dict):
            self._arguments = dict(arguments)
        else:
            self._arguments = dict(enumerate(arguments))
        return self

    def set_argument(self, key: ArgumentKey, value: Any) -> "Definition":
        self._arguments[key] = value
        return self

    def get_arguments(self) -> Dict[ArgumentKey, Any]:
        return dict(self._arguments)

    def has_argument(self, key: ArgumentKey) -> bool:
        return key in self._arguments

    def get_argument(self, key: ArgumentKey) -> Any:
        return self._arguments[key]

    def set_shared(self, shared: bool) -> "Definition":
        self._shared = shared
        return self

    def is_shared(self) -> bool:
        # A literal instance has a fixed identity.
        return self._shared or self.kind is SourceKind.INSTANCE

    def set_autowired(self, autowired: bool) -> "Definition":
        self._autowired = autowired
        return self

    def is_autowired(self) -> bool:
        return self._autowired

    def add_tag(self, name: str, **attributes: Any) -> "Definition":
        """Attach a tag; the same tag may be added several times with different attributes."""
        self._tags.setdefault(name, []).append(attributes)
        return self

    def has_tag(self, name: str) -> bool:
        return name in self._tags

    def get_tag(self, name: str) -> List[Dict[str, Any]]:
        return list(self._tags.get(name, []))

    def get_tags(self) -> Dict[str, List[Dict[str, Any]]]:
        return {name: list(attributes) for name, attributes in self._tags.items()}

    def __repr__(self) -> str:
        return (
            f"Definition(id={self.id!r}, kind={self.kind.value}, "
            f"shared={self.is_shared()}, autowired={self._autowired})"
        )
