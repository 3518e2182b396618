"""Domain models used throughout the library."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Optional

__all__ = ["ServiceKey", "Lifetime", "BindingSpec"]


ServiceKey = Hashable
"""Type alias for keys identifying a requested service.

Any hashable value may be used: a class, a string name or a ``typing`` construct.

Example:
    >>> container.resolve(Database)     # Keyed by type
    >>> container.resolve("database")   # Keyed by name
"""


class Lifetime(Enum):
    """How long a constructed service instance is kept.

    Attributes:
        TRANSIENT: A new instance is constructed on every resolution.
        SHARED: One instance is constructed and reused for the lifetime of the container.
    """

    TRANSIENT = "transient"
    SHARED = "shared"


@dataclass(frozen=True)
class BindingSpec:
    """The registered recipe for building the service bound to a key.

    Attributes:
        target: The class or factory callable that builds the service.
        lifetime: Whether the built instance is shared or rebuilt per resolution.
        dependencies: Optional explicit, ordered keys of the target's dependencies.
            When None, the resolver's signature provider discovers them instead.
    """

    target: Callable[..., Any]
    lifetime: Lifetime = Lifetime.TRANSIENT
    dependencies: Optional[tuple[ServiceKey, ...]] = None

    @property
    def is_shared(self) -> bool:
        return self.lifetime is Lifetime.SHARED
