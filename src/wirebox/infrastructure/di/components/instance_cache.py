"""Cache of built shared services."""
import threading
from typing import Any, Dict, Optional


class InstanceCache:
    """Maps canonical service ids to their shared instances."""

    def __init__(self):
        self._instances: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def has(self, service_id: str) -> bool:
        with self._lock:
            return service_id in self._instances

    def get(self, service_id: str) -> Optional[Any]:
        """Get a cached instance, or None if the id has not been built yet."""
        with self._lock:
            return self._instances.get(service_id)

    def set(self, service_id: str, instance: Any) -> None:
        with self._lock:
            self._instances[service_id] = instance

    def remove(self, service_id: str) -> None:
        with self._lock:
            self._instances.pop(service_id, None)

    def clear(self) -> None:
        with self._lock:
            self._instances.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)
