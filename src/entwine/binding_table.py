"""Storage for the bindings registered with a container."""

import threading
from typing import Iterator, Optional

from entwine.domain import BindingSpec, ServiceKey

__all__ = ["BindingTable"]


class BindingTable:
    """Ordered mapping of service keys to their bindings.

    Keys are kept in first-registration order. Registering a key again replaces its
    binding (last write wins) without moving the key.

    Example:
        >>> table = BindingTable()
        >>> table.register(Database, BindingSpec(Database, Lifetime.SHARED))
        >>> table.lookup(Database)
        BindingSpec(target=<class 'Database'>, lifetime=<Lifetime.SHARED: 'shared'>, dependencies=None)
        >>> table.lookup(Cache) is None
        True
    """

    def __init__(self):
        self._bindings: dict[ServiceKey, BindingSpec] = {}
        self._lock = threading.Lock()

    def register(self, key: ServiceKey, spec: BindingSpec):
        """Store the binding for a key, replacing any previous binding.

        Args:
            key: The key the binding is registered under.
            spec: The binding to store.
        """
        with self._lock:
            self._bindings[key] = spec

    def lookup(self, key: ServiceKey) -> Optional[BindingSpec]:
        """Return the binding registered for a key, or None if there is none."""
        return self._bindings.get(key)

    def keys(self) -> list[ServiceKey]:
        with self._lock:
            return list(self._bindings)

    def clear(self):
        with self._lock:
            self._bindings.clear()

    def __contains__(self, key: ServiceKey) -> bool:
        return key in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[ServiceKey]:
        return iter(self.keys())
