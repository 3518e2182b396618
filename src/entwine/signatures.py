"""Discovery of the dependencies a binding's target requires.

A :class:`SignatureProvider` maps a target (a class or factory callable) onto the
ordered list of service keys whose instances must be passed to it. The resolver only
depends on the abstract interface; :class:`TypeHintSignatureProvider` is the default
used by containers and derives keys from parameter annotations.
"""

import inspect
import threading
import weakref
from abc import ABC, abstractmethod
from typing import (
    Annotated,
    Any,
    Callable,
    Mapping,
    Optional,
    Sequence,
    get_args,
    get_origin,
    get_type_hints,
)

from entwine.domain import ServiceKey
from entwine.errors import InvalidSignature, describe_key

__all__ = [
    "SignatureProvider",
    "TypeHintSignatureProvider",
    "MappingSignatureProvider",
]


class SignatureProvider(ABC):
    """Maps a target onto the ordered keys of the dependencies it requires."""

    @abstractmethod
    def dependencies_of(self, target: Callable[..., Any]) -> list[ServiceKey]:
        """Return the keys of the target's dependencies, in parameter order."""


class TypeHintSignatureProvider(SignatureProvider):
    """Derive dependency keys from the type hints of a target's parameters.

    For classes the ``__init__`` signature is inspected; for other callables, the
    callable itself. Each positional parameter maps onto a key:

    - ``Annotated[T, "name"]`` depends on the key ``"name"``;
    - any other annotation depends on the annotation itself;
    - unannotated parameters with a default value are skipped and left to the default.

    Results are memoised per target for as long as the target is alive.

    Example:
        >>> class Service:
        ...     def __init__(self, db: Database, cache: Annotated[Cache, "redis"], retries=3):
        ...         ...
        >>> TypeHintSignatureProvider().dependencies_of(Service)
        [<class 'Database'>, 'redis']

    Raises:
        InvalidSignature: If a required parameter is unannotated, variadic or
            keyword-only, or the target cannot be inspected.
    """

    def __init__(self):
        self._memo: "weakref.WeakKeyDictionary[Any, list[ServiceKey]]" = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def dependencies_of(self, target: Callable[..., Any]) -> list[ServiceKey]:
        with self._lock:
            memoised = _memo_get(self._memo, target)
        if memoised is not None:
            return list(memoised)

        dependencies = _get_dependencies(target)

        with self._lock:
            try:
                self._memo.setdefault(target, dependencies)
            except TypeError:
                # builtins and other targets that cannot be weakly referenced
                pass
        return list(dependencies)


class MappingSignatureProvider(SignatureProvider):
    """Look dependency keys up in an explicit table of ``target -> keys``.

    Targets missing from the table are taken to have no dependencies.

    Example:
        >>> provider = MappingSignatureProvider({Service: [Database, "redis"]})
        >>> provider.dependencies_of(Service)
        [<class 'Database'>, 'redis']
    """

    def __init__(self, dependencies: Mapping[Any, Sequence[ServiceKey]]):
        self._dependencies = {
            target: list(keys) for target, keys in dependencies.items()
        }

    def dependencies_of(self, target: Callable[..., Any]) -> list[ServiceKey]:
        return list(self._dependencies.get(target, []))


def _memo_get(
    memo: weakref.WeakKeyDictionary, target: Any
) -> Optional[list[ServiceKey]]:
    try:
        return memo.get(target)
    except TypeError:
        return None


def _get_dependencies(target: Callable[..., Any]) -> list[ServiceKey]:
    """Extract dependency keys from a target's signature and type annotations.

    Args:
        target: The class or callable to analyse.

    Returns:
        The dependency keys, in parameter order.
    """
    if not callable(target):
        raise InvalidSignature(f"{target!r} is not a class or callable")

    if inspect.isclass(target) and target.__init__ is object.__init__:
        return []

    introspected = target.__init__ if inspect.isclass(target) else target
    try:
        signature = inspect.signature(target)
        hints = get_type_hints(introspected, include_extras=True)
    except (TypeError, ValueError, NameError) as e:
        raise InvalidSignature(
            f"Cannot inspect the signature of {describe_key(target)}: {e}"
        ) from e

    dependencies = []
    for parameter in signature.parameters.values():
        key = _dependency_key(target, parameter, hints.get(parameter.name))
        if key is not None:
            dependencies.append(key)
    return dependencies


def _dependency_key(
    target: Any, parameter: inspect.Parameter, annotation: Any
) -> Optional[ServiceKey]:
    has_default = parameter.default is not inspect.Parameter.empty

    if parameter.kind in (
        inspect.Parameter.VAR_POSITIONAL,
        inspect.Parameter.VAR_KEYWORD,
    ):
        raise InvalidSignature(
            f"Dependency {parameter.name} of {describe_key(target)} is variadic"
        )

    if parameter.kind is inspect.Parameter.KEYWORD_ONLY:
        if has_default:
            return None
        raise InvalidSignature(
            f"Dependency {parameter.name} of {describe_key(target)} is keyword-only"
        )

    if annotation is None:
        if has_default:
            return None
        raise InvalidSignature(
            f"Dependency {parameter.name} of {describe_key(target)} is not annotated"
        )

    if get_origin(annotation) is Annotated:
        base_type, *metadata = get_args(annotation)
        return next((m for m in metadata), base_type)
    return annotation
