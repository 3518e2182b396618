"""
Depth-first resolution of services and their dependencies.

The resolver looks up the binding for a requested key, resolves the keys its target
depends on in order, and hands the resolved instances to an instantiator. Shared
services are built once and then served from a :class:`LifecycleCache`.

Cycle detection uses a :class:`ResolutionPath` holding the keys currently being
resolved. A new path is created for every top-level call, so concurrent resolutions
on the same resolver never see each other's keys.
"""

import logging
from typing import Any, Iterable, Iterator, Optional

from entwine.binding_table import BindingTable
from entwine.domain import BindingSpec, ServiceKey
from entwine.errors import (
    CircularDependency,
    ConstructionFailed,
    UnregisteredService,
    describe_key,
)
from entwine.instantiators import Instantiator
from entwine.lifecycle_cache import LifecycleCache
from entwine.signatures import SignatureProvider

__all__ = ["ResolutionPath", "Resolver"]

logger = logging.getLogger(__name__)

_NOT_CACHED = object()


class ResolutionPath:
    """The chain of keys under resolution, outermost first.

    Only ancestors of the key being resolved are held: each key is pushed before its
    dependencies are resolved and popped once they are.

    Args:
        prefix: Keys that led to this path from a child container. They are reported
            in errors but take no part in cycle detection.
    """

    def __init__(self, prefix: Iterable[ServiceKey] = ()):
        self._prefix: list[ServiceKey] = list(prefix)
        self._keys: list[ServiceKey] = []
        self._members: set[ServiceKey] = set()

    def push(self, key: ServiceKey):
        self._keys.append(key)
        self._members.add(key)

    def pop(self) -> ServiceKey:
        key = self._keys.pop()
        self._members.discard(key)
        return key

    def cycle_from(self, key: ServiceKey) -> list[ServiceKey]:
        """Return the keys from the first occurrence of ``key`` to the end of the path."""
        return self._keys[self._keys.index(key):]

    def keys(self) -> list[ServiceKey]:
        """Return the keys leading to the current resolution, including any prefix."""
        return self._prefix + self._keys

    def __contains__(self, key: ServiceKey) -> bool:
        return key in self._members

    def __iter__(self) -> Iterator[ServiceKey]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)


class Resolver:
    """Resolve service keys into instances using a table of bindings.

    Args:
        bindings: The bindings to resolve keys against.
        cache: Storage for instances of shared services.
        signature_provider: Discovers the dependency keys of targets whose binding
            does not declare them explicitly.
        instantiator: Builds instances from targets and resolved dependencies.
        parent: Optional resolver consulted for keys with no binding in ``bindings``.
            The parent resolves such keys entirely with its own bindings and cache.
    """

    def __init__(
        self,
        bindings: BindingTable,
        cache: LifecycleCache,
        signature_provider: SignatureProvider,
        instantiator: Instantiator,
        parent: Optional["Resolver"] = None,
    ):
        self._bindings = bindings
        self._cache = cache
        self._signature_provider = signature_provider
        self._instantiator = instantiator
        self._parent = parent

    def resolve(self, key: ServiceKey) -> Any:
        """Build or retrieve the instance bound to a key.

        Resolution is all-or-nothing: the first failure anywhere in the dependency
        tree aborts the call. Shared services that were fully built before the
        failure remain cached.

        Args:
            key: The key of the requested service.

        Returns:
            The service instance.

        Raises:
            UnregisteredService: If the key, or any key it depends on, has no binding.
            CircularDependency: If a key depends on itself, directly or indirectly.
            ConstructionFailed: If the instantiator raised while building a service.
        """
        return self._resolve(key, ResolutionPath())

    def plan(self, key: ServiceKey) -> list[ServiceKey]:
        """List the keys that resolving ``key`` would construct, leaf first.

        Nothing is constructed. Keys whose instance is already cached are omitted,
        shared keys are listed at most once and transient keys once per request.

        Raises:
            UnregisteredService: If the key, or any key it depends on, has no binding.
            CircularDependency: If a key depends on itself, directly or indirectly.
        """
        build_order: list[ServiceKey] = []
        self._plan(key, ResolutionPath(), build_order, set())
        return build_order

    def can_resolve(self, key: ServiceKey) -> bool:
        """Whether this resolver or one of its ancestors has a binding for the key."""
        return (
            key in self._bindings
            or key in self._cache
            or (self._parent is not None and self._parent.can_resolve(key))
        )

    def _resolve(self, key: ServiceKey, path: ResolutionPath) -> Any:
        if key in path:
            raise CircularDependency(path.cycle_from(key), path.keys())

        cached = self._cache.get(key, _NOT_CACHED)
        if cached is not _NOT_CACHED:
            logger.debug("Serving cached instance of %s", describe_key(key))
            return cached

        spec = self._bindings.lookup(key)
        if spec is None:
            if self._delegates(key):
                return self._parent._resolve(key, ResolutionPath(path.keys()))
            raise UnregisteredService(key, path.keys())

        path.push(key)
        try:
            dependencies = [
                self._resolve(dependency_key, path)
                for dependency_key in self._dependency_keys(spec)
            ]
        finally:
            path.pop()

        instance = self._construct(key, spec, dependencies, path)
        if spec.is_shared:
            return self._cache.put(key, instance)
        return instance

    def _plan(
        self,
        key: ServiceKey,
        path: ResolutionPath,
        build_order: list[ServiceKey],
        planned_shared: set[tuple["Resolver", ServiceKey]],
    ):
        if key in path:
            raise CircularDependency(path.cycle_from(key), path.keys())

        if key in self._cache or (self, key) in planned_shared:
            return

        spec = self._bindings.lookup(key)
        if spec is None:
            if self._delegates(key):
                self._parent._plan(
                    key, ResolutionPath(path.keys()), build_order, planned_shared
                )
                return
            raise UnregisteredService(key, path.keys())

        path.push(key)
        try:
            for dependency_key in self._dependency_keys(spec):
                self._plan(dependency_key, path, build_order, planned_shared)
        finally:
            path.pop()

        build_order.append(key)
        if spec.is_shared:
            planned_shared.add((self, key))

    def _delegates(self, key: ServiceKey) -> bool:
        return self._parent is not None and self._parent.can_resolve(key)

    def _dependency_keys(self, spec: BindingSpec) -> list[ServiceKey]:
        if spec.dependencies is not None:
            return list(spec.dependencies)
        return self._signature_provider.dependencies_of(spec.target)

    def _construct(
        self,
        key: ServiceKey,
        spec: BindingSpec,
        dependencies: list[Any],
        path: ResolutionPath,
    ) -> Any:
        logger.debug(
            "Constructing %s instance of %s", spec.lifetime.value, describe_key(key)
        )
        try:
            return self._instantiator.construct(spec.target, dependencies)
        except Exception as e:
            raise ConstructionFailed(key, path.keys(), e) from e
