"""
The host-facing container: a binding table, a lifecycle cache and a resolver.

Containers are plain objects; there is no process-wide registry, and any number of
independent containers may live side by side. A container may be layered on a parent
with :meth:`Container.child`, in which case keys the child has no binding for are
resolved by the parent, using the parent's bindings and cache.
"""

import inspect
import logging
from typing import Any, Callable, Optional, Sequence

from entwine.binding_table import BindingTable
from entwine.domain import BindingSpec, Lifetime, ServiceKey
from entwine.errors import DependencyError, describe_key
from entwine.instantiators import CallableInstantiator, Instantiator
from entwine.lifecycle_cache import LifecycleCache
from entwine.resolver import Resolver
from entwine.signatures import SignatureProvider, TypeHintSignatureProvider

__all__ = ["Container"]

logger = logging.getLogger(__name__)


class Container:
    """
    Registers service bindings and resolves them into instances.

    Args:
        signature_provider: Discovers the dependencies of registered targets.
            Defaults to :class:`TypeHintSignatureProvider`.
        instantiator: Builds instances of registered targets.
            Defaults to :class:`CallableInstantiator`.
        parent: Optional container resolving keys this container has no binding for.

    Example:
        >>> container = Container()
        >>> container.register_shared(Logger)
        >>> container.register(Repository)
        >>> container.register("greeting", lambda: "hello")
        >>> repository = container.resolve(Repository)
        >>> container["greeting"]
        'hello'
    """

    def __init__(
        self,
        signature_provider: Optional[SignatureProvider] = None,
        instantiator: Optional[Instantiator] = None,
        parent: Optional["Container"] = None,
    ):
        self._signature_provider = signature_provider or TypeHintSignatureProvider()
        self._instantiator = instantiator or CallableInstantiator()
        self._parent = parent
        self._bindings = BindingTable()
        self._cache = LifecycleCache()
        self._resolver = Resolver(
            self._bindings,
            self._cache,
            self._signature_provider,
            self._instantiator,
            parent._resolver if parent is not None else None,
        )

    @property
    def parent(self) -> Optional["Container"]:
        return self._parent

    def register(
        self,
        key: ServiceKey,
        target: Optional[Callable[..., Any]] = None,
        lifetime: Lifetime = Lifetime.TRANSIENT,
        dependencies: Optional[Sequence[ServiceKey]] = None,
    ) -> "Container":
        """Bind a key to a class or factory, replacing any previous binding.

        Re-registering a key only affects later resolutions. In particular, a shared
        instance that is already cached keeps being served until
        :meth:`unregister_all` is called.

        Args:
            key: The key the service is requested by.
            target: The class or factory building the service. Defaults to the key
                itself, which must then be a class.
            lifetime: Whether one instance is shared or a new one built per resolution.
            dependencies: Optional explicit keys of the target's dependencies, in the
                order the target takes them. When omitted, they are discovered by the
                signature provider.

        Returns:
            The container, so registrations can be chained.

        Raises:
            DependencyError: If no target is given and the key is not a class.
        """
        if target is None:
            if not inspect.isclass(key):
                raise DependencyError(
                    f"No target given for {describe_key(key)}, which is not a class"
                )
            target = key

        spec = BindingSpec(
            target,
            lifetime,
            tuple(dependencies) if dependencies is not None else None,
        )
        return self.register_spec(key, spec)

    def register_spec(self, key: ServiceKey, spec: BindingSpec) -> "Container":
        """Bind a key to a pre-built :class:`BindingSpec`."""
        logger.debug(
            "Registering %s binding for %s", spec.lifetime.value, describe_key(key)
        )
        self._bindings.register(key, spec)
        return self

    def register_shared(
        self,
        key: ServiceKey,
        target: Optional[Callable[..., Any]] = None,
        dependencies: Optional[Sequence[ServiceKey]] = None,
    ) -> "Container":
        """Bind a key to a service built once and reused for the container's lifetime."""
        return self.register(key, target, Lifetime.SHARED, dependencies)

    def register_transient(
        self,
        key: ServiceKey,
        target: Optional[Callable[..., Any]] = None,
        dependencies: Optional[Sequence[ServiceKey]] = None,
    ) -> "Container":
        """Bind a key to a service built anew on every resolution."""
        return self.register(key, target, Lifetime.TRANSIENT, dependencies)

    def register_instance(self, key: ServiceKey, instance: Any) -> "Container":
        """Bind a key to an already constructed instance, served as a shared service."""

        def existing_instance() -> Any:
            return instance

        return self.register(key, existing_instance, Lifetime.SHARED, ())

    def resolve(self, key: ServiceKey) -> Any:
        """Build or retrieve the instance bound to a key.

        See :meth:`Resolver.resolve` for the errors raised.
        """
        return self._resolver.resolve(key)

    def plan(self, key: ServiceKey) -> list[ServiceKey]:
        """List, leaf first, the keys that resolving ``key`` would construct."""
        return self._resolver.plan(key)

    def validate(self):
        """Check every registered binding can be resolved, without constructing anything.

        Raises:
            UnregisteredService: If a binding depends on a key with no binding.
            CircularDependency: If the bindings contain a dependency cycle.
        """
        for key in self._bindings.keys():
            self._resolver.plan(key)

    def is_registered(self, key: ServiceKey) -> bool:
        """Whether the key has a binding in this container or one of its ancestors."""
        return key in self._bindings or (
            self._parent is not None and self._parent.is_registered(key)
        )

    def registered_keys(self) -> list[ServiceKey]:
        """Keys bound in this container, in registration order."""
        return self._bindings.keys()

    def child(self) -> "Container":
        """Create a container layered on this one, sharing its collaborators."""
        return Container(self._signature_provider, self._instantiator, parent=self)

    def unregister_all(self):
        """Drop every binding and every cached instance held by this container.

        Parent containers are left untouched.
        """
        logger.debug(
            "Clearing %d bindings and %d cached instances",
            len(self._bindings),
            len(self._cache),
        )
        self._bindings.clear()
        self._cache.clear()

    def __getitem__(self, key: ServiceKey) -> Any:
        return self.resolve(key)

    def __contains__(self, key: ServiceKey) -> bool:
        return self.is_registered(key)
