"""Exceptions raised while registering and resolving services."""

from typing import Any, Iterable

__all__ = [
    "DependencyError",
    "UnregisteredService",
    "CircularDependency",
    "ConstructionFailed",
    "InvalidSignature",
    "describe_key",
    "describe_path",
]


def describe_key(key: Any) -> str:
    """Render a service key for use in error messages.

    Example:
        >>> describe_key(Database)   # "Database"
        >>> describe_key("db")       # "'db'"
    """
    qualified_name = getattr(key, "__qualname__", None)
    if isinstance(qualified_name, str):
        return qualified_name
    return repr(key)


def describe_path(path: Iterable[Any]) -> str:
    return " -> ".join(describe_key(key) for key in path)


class DependencyError(Exception):
    """Raised when a service's dependency cannot be resolved or is misannotated."""

    pass


class UnregisteredService(DependencyError, KeyError):
    """Raised when a requested key has no binding.

    Attributes:
        key: The key that has no binding.
        path: The keys under resolution that led to the request, outermost first.
            Empty when the key was requested directly.
    """

    def __init__(self, key: Any, path: Iterable[Any] = ()):
        self.key = key
        self.path = list(path)
        message = f"No binding registered for {describe_key(key)}"
        if self.path:
            message += f" (required by {describe_path(self.path)})"
        super().__init__(message)

    def __reduce__(self):
        return self.__class__, (self.key, self.path)

    def __str__(self) -> str:
        # KeyError would otherwise render the message with quotes around it
        return self.args[0]


class CircularDependency(DependencyError):
    """Raised when a key recurs within its own resolution path.

    Attributes:
        cycle: The keys forming the cycle, starting with the recurring key.
        path: The full resolution path at the point the cycle was found.
    """

    def __init__(self, cycle: Iterable[Any], path: Iterable[Any]):
        self.cycle = list(cycle)
        self.path = list(path)
        closed_cycle = self.cycle + self.cycle[:1]
        super().__init__(f"Circular dependency: {describe_path(closed_cycle)}")

    def __reduce__(self):
        return self.__class__, (self.cycle, self.path)


class ConstructionFailed(DependencyError):
    """Raised when the instantiator fails to build a service.

    Attributes:
        key: The key whose construction failed.
        path: The keys under resolution that led to the request, outermost first.
        error: The exception raised by the instantiator.
    """

    def __init__(self, key: Any, path: Iterable[Any], error: BaseException):
        self.key = key
        self.path = list(path)
        self.error = error
        message = f"Failed to construct {describe_key(key)}: {error!r}"
        if self.path:
            message += f" (required by {describe_path(self.path)})"
        super().__init__(message)

    def __reduce__(self):
        return self.__class__, (self.key, self.path, self.error)


class InvalidSignature(DependencyError):
    """Raised when a target's signature cannot be mapped onto dependency keys."""

    pass
