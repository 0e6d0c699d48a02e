"""Reference marker for service arguments."""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Reference:
    """
    Points at another service by identifier.

    When a Reference appears in a definition's arguments, the container
    replaces it with the result of ``container.get(reference.id)`` instead of
    passing the marker itself.

    Usage:
        container.register("movie", Movie).set_arguments({"actor": Reference("lead_actor")})
    """

    id: Union[str, type]
