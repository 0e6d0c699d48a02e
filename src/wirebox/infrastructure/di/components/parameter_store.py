"""Parameter storage and ``%placeholder%`` resolution."""
import re
import threading
from typing import Any, Dict, Mapping

from wirebox.infrastructure.di.exceptions import ConfigException

# A placeholder is %path% where path has no whitespace or percent signs; %% is a literal %.
PLACEHOLDER_PATTERN = re.compile(r"%%|%([^%\s]+)%")
WHOLE_PLACEHOLDER_PATTERN = re.compile(r"%([^%\s]+)%")

# The top-level pass plus one further pass over values fetched from the store.
MAX_RESOLVE_DEPTH = 2

_MISSING = object()


class ParameterStore:
    """
    Holds configuration parameters and substitutes them into values.

    Parameters form a tree of dicts, lists and scalars addressed by dotted
    paths (``director.age``). ``resolve`` walks arbitrary nested values and
    replaces ``%path%`` placeholders inside strings.
    """

    def __init__(self, parameters: Mapping[str, Any] = None):
        self._parameters: Dict[str, Any] = dict(parameters or {})
        self._lock = threading.RLock()

    def set_all(self, parameters: Mapping[str, Any]) -> None:
        """Replace all parameters."""
        with self._lock:
            self._parameters = dict(parameters)

    def add(self, parameters: Mapping[str, Any]) -> None:
        """Merge parameters, overwriting existing top-level keys."""
        with self._lock:
            self._parameters.update(parameters)

    def set(self, name: str, value: Any) -> None:
        with self._lock:
            self._parameters[name] = value

    def remove(self, name: str) -> None:
        with self._lock:
            self._parameters.pop(name, None)

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a parameter value by path.

        Args:
            path: Parameter name or dotted path into nested dicts/lists
            default: Value returned when the path is not defined

        Returns:
            The raw (unresolved) value
        """
        value = self._lookup(path)
        return default if value is _MISSING else value

    def has(self, path: str) -> bool:
        return self._lookup(path) is not _MISSING

    def get_all(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._parameters)

    def resolve(self, value: Any) -> Any:
        """
        Substitute placeholders in a value.

        Dicts (values only), lists and tuples are walked recursively. A string
        that is exactly one placeholder becomes the referenced value with its
        type preserved; any other string containing placeholders becomes the
        concatenation of its text and the ``str()`` of each referenced value.

        Values fetched from the store are resolved once more, so a parameter
        may itself refer to other parameters one level deep. Placeholders
        left after that pass are kept verbatim.

        Raises:
            ConfigException: If a referenced path is not defined
        """
        return self._resolve(value, 1)

    def _resolve(self, value: Any, depth: int) -> Any:
        if isinstance(value, str):
            return self._resolve_string(value, depth)
        if isinstance(value, dict):
            return {key: self._resolve(item, depth) for key, item in value.items()}
        if isinstance(value, list):
            return [self._resolve(item, depth) for item in value]
        if isinstance(value, tuple):
            return tuple(self._resolve(item, depth) for item in value)
        return value

    def _resolve_string(self, value: str, depth: int) -> Any:
        whole = WHOLE_PLACEHOLDER_PATTERN.fullmatch(value)
        if whole:
            return self._fetch(whole.group(1), depth)

        def substitute(match: "re.Match[str]") -> str:
            if match.group(0) == "%%":
                return "%"
            return str(self._fetch(match.group(1), depth))

        return PLACEHOLDER_PATTERN.sub(substitute, value)

    def _fetch(self, path: str, depth: int) -> Any:
        value = self._lookup(path)
        if value is _MISSING:
            raise ConfigException(f'Parameter "{path}" is not defined', path)
        if depth < MAX_RESOLVE_DEPTH:
            return self._resolve(value, depth + 1)
        return value

    def _lookup(self, path: str) -> Any:
        with self._lock:
            if path in self._parameters:
                return self._parameters[path]

            value: Any = self._parameters
            for key in path.split("."):
                if isinstance(value, dict) and key in value:
                    value = value[key]
                elif isinstance(value, (list, tuple)) and key.isdecimal() and int(key) < len(value):
                    value = value[int(key)]
                else:
                    return _MISSING
            return value
