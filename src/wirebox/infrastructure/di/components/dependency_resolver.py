"""Argument resolution and autowiring for service construction."""
import inspect
from typing import TYPE_CHECKING, Any, Dict, List, Set, Tuple

from wirebox.domain.definition import ArgumentKey, Definition
from wirebox.domain.reference import Reference
from wirebox.infrastructure.di.components.parameter_store import ParameterStore
from wirebox.infrastructure.di.exceptions import (
    CircularDependencyError,
    DependencyInjectionException,
    NotFoundException,
)
from wirebox.infrastructure.di.reflection import ParameterInfo, class_id
from wirebox.infrastructure.logging.logger import get_logger

if TYPE_CHECKING:
    from wirebox.infrastructure.di.container import Container

logger = get_logger(__name__)


class DependencyResolver:
    """
    Computes the call arguments for a definition.

    For each parameter, in declaration order:

    1. An explicit argument keyed by the parameter's name or position wins.
       It is passed through placeholder resolution and Reference expansion.
    2. Otherwise, if the definition is autowired and the parameter is typed
       with a class, the container resolves that class (or the service bound
       to it). If that fails, an optional parameter falls back to its default
       and a required one is an error.
    3. Otherwise the parameter's default is used.
    4. Otherwise the parameter cannot be satisfied.
    """

    def __init__(self, container: "Container", parameters: ParameterStore):
        self._container = container
        self._parameters = parameters

    def resolve_arguments(
        self, definition: Definition, parameters: List[ParameterInfo]
    ) -> Tuple[List[Any], Dict[str, Any]]:
        """
        Build positional and keyword arguments for a definition's callable.

        Args:
            definition: The definition being built
            parameters: Parameters of its class constructor or factory

        Returns:
            Tuple of (positional arguments, keyword arguments)

        Raises:
            DependencyInjectionException: If a parameter cannot be satisfied or
                an explicit argument matches no parameter
        """
        overrides = definition.get_arguments()
        used: Set[ArgumentKey] = set()
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        accepts_var_positional = accepts_var_keyword = False

        for index, param in enumerate(parameters):
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                accepts_var_positional = True
                extra = sorted(k for k in overrides if isinstance(k, int) and k >= index and k not in used)
                args.extend(self.resolve_value(overrides[k]) for k in extra)
                used.update(extra)
                continue
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                accepts_var_keyword = True
                continue

            value = self._resolve_parameter(definition, param, index, overrides, used)
            if param.kind is inspect.Parameter.KEYWORD_ONLY:
                kwargs[param.name] = value
            else:
                args.append(value)

        unmatched = [key for key in overrides if key not in used]
        if accepts_var_keyword:
            for key in [k for k in unmatched if isinstance(k, str)]:
                kwargs[key] = self.resolve_value(overrides[key])
                unmatched.remove(key)
        if unmatched:
            raise DependencyInjectionException(
                f'Arguments {unmatched} of service "{definition.id}" do not match any parameter',
                service_id=definition.id,
            )

        return args, kwargs

    def resolve_value(self, value: Any) -> Any:
        """Resolve placeholders in a value, then replace any References with their services."""
        return self._expand_references(self._parameters.resolve(value))

    def _resolve_parameter(
        self,
        definition: Definition,
        param: ParameterInfo,
        index: int,
        overrides: Dict[ArgumentKey, Any],
        used: Set[ArgumentKey],
    ) -> Any:
        # Keyword-only parameters cannot be addressed by position
        keys = (param.name,) if param.kind is inspect.Parameter.KEYWORD_ONLY else (param.name, index)
        for key in keys:
            if key in overrides:
                used.add(key)
                return self.resolve_value(overrides[key])

        if param.declared_type is not None and definition.is_autowired():
            return self._autowire(definition, param)

        if param.is_optional:
            return param.default if param.has_default else None

        reason = (
            "autowiring is disabled for this service"
            if param.declared_type is not None
            else "it has no argument, no class type hint and no default value"
        )
        raise DependencyInjectionException(
            f'Cannot resolve parameter "{param.name}" of service "{definition.id}": {reason}',
            service_id=definition.id,
            parameter_name=param.name,
        )

    def _autowire(self, definition: Definition, param: ParameterInfo) -> Any:
        type_id = class_id(param.declared_type)
        logger.debug("Autowiring parameter", service_id=definition.id, parameter=param.name, type_id=type_id)

        try:
            if self._container.has(param.declared_type):
                return self._container.get(param.declared_type)
            error: Exception = NotFoundException(type_id)
        except CircularDependencyError:
            raise
        except (NotFoundException, DependencyInjectionException) as e:
            error = e

        if param.is_optional:
            logger.debug(
                "Optional dependency not resolvable, using default",
                service_id=definition.id,
                parameter=param.name,
                error=str(error),
            )
            return param.default if param.has_default else None

        raise DependencyInjectionException(
            f'Cannot autowire parameter "{param.name}" of service "{definition.id}": '
            f'no service satisfies type "{type_id}" ({error})',
            service_id=definition.id,
            parameter_name=param.name,
            cause=error,
        ) from error

    def _expand_references(self, value: Any) -> Any:
        if isinstance(value, Reference):
            return self._container.get(value.id)
        if isinstance(value, dict):
            return {key: self._expand_references(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._expand_references(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self._expand_references(item) for item in value)
        return value
