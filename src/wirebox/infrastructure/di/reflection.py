"""
Signature introspection for autowiring.

Turns a class or factory into an ordered list of ParameterInfo records and
maps classes to the string identifiers the registry uses for them.
"""
import importlib
import inspect
import types
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union, get_args, get_origin, get_type_hints

from wirebox.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

_PRIMITIVE_TYPES = {str, int, float, bool, bytes, complex, list, dict, tuple, set, frozenset, type(None), object}


@dataclass(frozen=True)
class ParameterInfo:
    """Static description of one parameter of a constructor or factory."""

    name: str
    kind: Any
    annotation: Any
    declared_type: Optional[type]
    has_default: bool
    default: Any
    is_optional: bool

    @property
    def is_variadic(self) -> bool:
        return self.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def class_id(cls: type) -> str:
    """Canonical identifier of a class: ``module.QualifiedName``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def import_string(path: str) -> Any:
    """
    Import an object from a dotted path such as ``package.module.Name``.

    Nested attributes (``package.module.Class.factory``) are supported; the
    longest importable module prefix is used.

    Raises:
        ImportError: If no prefix of the path is importable or an attribute is missing
    """
    parts = path.split(".")
    for index in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:index])
        try:
            target = importlib.import_module(module_name)
        except ImportError:
            continue
        try:
            for attribute in parts[index:]:
                target = getattr(target, attribute)
        except AttributeError as e:
            raise ImportError(f"Module '{module_name}' has no attribute path '{path[len(module_name) + 1:]}'") from e
        return target
    raise ImportError(f"Could not import '{path}'")


def is_primitive_type(annotation: Any) -> bool:
    """Check if a type annotation represents a primitive type that shouldn't be resolved from DI."""
    if annotation in _PRIMITIVE_TYPES or annotation is Any:
        return True

    # Generic aliases of primitives, e.g. List[str]
    origin = get_origin(annotation)
    if origin in _PRIMITIVE_TYPES:
        return True

    return inspect.isclass(annotation) and annotation.__module__ == "builtins"


def is_optional_type(annotation: Any) -> bool:
    """Check if a type annotation represents Optional[T]."""
    if get_origin(annotation) is Union or _is_union_type(annotation):
        args = get_args(annotation)
        return len(args) == 2 and type(None) in args
    return False


def extract_optional_inner_type(annotation: Any) -> Any:
    """Extract T from Optional[T]."""
    args = get_args(annotation)
    return next(arg for arg in args if arg is not type(None))


def is_abstract(cls: type) -> bool:
    # typing.Protocol classes cannot be instantiated either
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))


def is_instantiable(cls: Any) -> bool:
    """A concrete class the container may construct on demand."""
    if not inspect.isclass(cls) or is_primitive_type(cls):
        return False
    return not is_abstract(cls)


def get_call_target(source: Any) -> Callable:
    """
    Turn a class or factory source into the callable to invoke.

    Accepts classes, dotted class paths, callables and ``(target, "method")``
    tuples where target is a class, an object or a dotted class path.
    """
    if isinstance(source, str):
        return import_string(source)
    if isinstance(source, tuple):
        target, method_name = source
        if isinstance(target, str):
            target = import_string(target)
        return getattr(target, method_name)
    return source


def get_parameters(target: Callable) -> List[ParameterInfo]:
    """
    Describe the parameters of a class constructor or a factory callable.

    Args:
        target: Class or callable to inspect

    Returns:
        Parameters in declaration order (``self``/``cls`` excluded)

    Raises:
        TypeError: If no signature can be obtained
    """
    signature = inspect.signature(target)

    hints_source = target.__init__ if inspect.isclass(target) else target
    try:
        hints = get_type_hints(hints_source)
    except Exception as e:
        # Unresolvable forward references fall back to the raw annotations
        logger.debug("Could not evaluate type hints", target=repr(target), error=str(e))
        hints = {}

    parameters = []
    for name, param in signature.parameters.items():
        annotation = hints.get(name, param.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = None
        if isinstance(annotation, str):
            annotation = _resolve_string_annotation(annotation, target)

        nullable = annotation is not None and is_optional_type(annotation)
        candidate = extract_optional_inner_type(annotation) if nullable else annotation
        declared_type = candidate if inspect.isclass(candidate) and not is_primitive_type(candidate) else None

        has_default = param.default is not inspect.Parameter.empty
        parameters.append(
            ParameterInfo(
                name=name,
                kind=param.kind,
                annotation=annotation,
                declared_type=declared_type,
                has_default=has_default,
                default=param.default if has_default else None,
                is_optional=has_default or nullable,
            )
        )
    return parameters


def _is_union_type(annotation: Any) -> bool:
    # PEP 604 unions (X | None)
    return isinstance(annotation, types.UnionType)


def _resolve_string_annotation(annotation: str, target: Callable) -> Any:
    """
    Resolve a string annotation left over after get_type_hints failed.

    Looks the name up in the module where the target is defined; unresolvable
    annotations are returned unchanged and treated as untyped.
    """
    module = inspect.getmodule(target)
    if module is not None and annotation in vars(module):
        resolved = vars(module)[annotation]
        if inspect.isclass(resolved):
            return resolved
    logger.debug("Could not resolve string annotation", annotation=annotation, target=repr(target))
    return annotation
