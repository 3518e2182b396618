"""Cache of constructed instances for services with a shared lifetime.

Construction of a shared service may race between threads, but insertion into the
cache is an atomic compare-and-set: the first instance stored for a key is kept and
handed to every caller, and any instance constructed concurrently is discarded.
"""

import logging
import threading
from typing import Any, Optional

from entwine.domain import ServiceKey
from entwine.errors import describe_key

__all__ = ["LifecycleCache"]

logger = logging.getLogger(__name__)


class LifecycleCache:
    """Thread-safe store of shared service instances, written at most once per key."""

    def __init__(self):
        self._instances: dict[ServiceKey, Any] = {}
        self._lock = threading.Lock()

    def get_or_none(self, key: ServiceKey) -> Optional[Any]:
        """Return the cached instance for a key, or None if it has not been cached."""
        return self._instances.get(key)

    def get(self, key: ServiceKey, default: Any = None) -> Any:
        """Return the cached instance for a key in a single read, or ``default``.

        Unlike :meth:`get_or_none`, a cached None can be told apart from a miss by
        passing a sentinel default.
        """
        return self._instances.get(key, default)

    def put(self, key: ServiceKey, instance: Any) -> Any:
        """Cache an instance unless the key already has one.

        Args:
            key: The key the instance was constructed for.
            instance: The newly constructed instance.

        Returns:
            The authoritative instance for the key: ``instance`` if it was stored, or
            the previously cached instance if another resolution got there first.
        """
        with self._lock:
            existing = self._instances.get(key, _MISSING)
            if existing is _MISSING:
                self._instances[key] = instance
                return instance

        logger.debug(
            "Discarding duplicate instance of %s constructed concurrently",
            describe_key(key),
        )
        return existing

    def clear(self):
        with self._lock:
            self._instances.clear()

    def __contains__(self, key: ServiceKey) -> bool:
        return key in self._instances

    def __len__(self) -> int:
        return len(self._instances)


_MISSING = object()
