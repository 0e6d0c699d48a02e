"""Exceptions raised by the dependency injection container."""
from typing import Any, List, Optional


class ContainerError(Exception):
    """Base exception for container-related errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class NotFoundException(ContainerError):
    """Raised when an identifier has no definition, alias or instantiable class."""

    def __init__(self, service_id: str, message: Optional[str] = None):
        super().__init__(message or f'Service "{service_id}" is not defined', service_id)
        self.service_id = service_id


class ConfigException(ContainerError):
    """Raised when parameters, defaults or configuration files are invalid."""
    pass


class DependencyInjectionException(ContainerError):
    """Raised when a constructor or factory parameter cannot be satisfied."""

    def __init__(
        self,
        message: str,
        service_id: Optional[str] = None,
        parameter_name: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, {"service_id": service_id, "parameter_name": parameter_name})
        self.service_id = service_id
        self.parameter_name = parameter_name
        self.cause = cause


class CircularDependencyError(DependencyInjectionException):
    """Raised when a service depends on itself, directly or transitively."""

    def __init__(self, chain: List[str]):
        self.chain = list(chain)
        super().__init__(
            f"Circular dependency detected: {' -> '.join(self.chain)}",
            service_id=self.chain[-1] if self.chain else None,
        )


class InstantiationError(ContainerError):
    """Raised when a class constructor or factory fails while building a service."""

    def __init__(self, service_id: str, message: str, cause: Optional[Exception] = None):
        super().__init__(f'Failed to build service "{service_id}": {message}', service_id)
        self.service_id = service_id
        self.cause = cause
