"""High level entry points for constructing containers."""

from typing import Any, Mapping, Optional

from entwine.container import Container
from entwine.domain import BindingSpec, Lifetime, ServiceKey
from entwine.instantiators import Instantiator
from entwine.signatures import SignatureProvider

__all__ = ["make_container"]


def make_container(
    bindings: Mapping[ServiceKey, Any],
    lifetime: Lifetime = Lifetime.TRANSIENT,
    signature_provider: Optional[SignatureProvider] = None,
    instantiator: Optional[Instantiator] = None,
    parent: Optional[Container] = None,
) -> Container:
    """Construct a :class:`Container` with the given bindings registered.

    Args:
        bindings: Mapping of keys to their targets. A :class:`BindingSpec` value is
            registered as is; any other value is taken as the target class or factory.
        lifetime: The lifetime given to targets that are not already a BindingSpec.
        signature_provider: Optional signature provider for the container.
        instantiator: Optional instantiator for the container.
        parent: Optional parent container.

    Returns:
        The populated :class:`Container`.

    Example:
        >>> container = make_container(
        ...     {
        ...         Logger: BindingSpec(Logger, Lifetime.SHARED),
        ...         Repository: Repository,
        ...     }
        ... )
        >>> container.validate()
    """
    container = Container(signature_provider, instantiator, parent)
    for key, value in bindings.items():
        if isinstance(value, BindingSpec):
            container.register_spec(key, value)
        else:
            container.register(key, value, lifetime)
    return container
