"""Invocation of a binding's target to produce a service instance."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

__all__ = ["Instantiator", "CallableInstantiator"]


class Instantiator(ABC):
    """Builds a service instance from a target and its resolved dependencies."""

    @abstractmethod
    def construct(self, target: Callable[..., Any], dependencies: Sequence[Any]) -> Any:
        """Build an instance of the target.

        Args:
            target: The class or factory callable registered for the service.
            dependencies: Resolved dependency instances, in the order the signature
                provider listed their keys.

        Returns:
            The constructed instance. Any exception raised is reported by the
            resolver as a construction failure.
        """


class CallableInstantiator(Instantiator):
    """Call the target with the resolved dependencies as positional arguments."""

    def construct(self, target: Callable[..., Any], dependencies: Sequence[Any]) -> Any:
        return target(*dependencies)
