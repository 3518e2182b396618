"""Entwine dependency resolution engine.

Entwine resolves requested services into object graphs. Each service key is bound to
a class or factory and a lifetime; resolving a key recursively resolves the keys its
target depends on, builds the target, and caches the result if the service is shared.
Cyclic dependency graphs are detected while they are walked, before anything in the
cycle is built.

Key Features:
    - Explicit, independent containers with no process-wide state
    - Transient and shared lifetimes, with at most one cached instance per shared key
      even under concurrent resolution
    - Pluggable discovery of dependencies (type hints, explicit tables) and
      pluggable instantiation
    - Cycle detection reporting the full cycle
    - Layered containers falling back to a parent

Basic Usage:
    >>> from entwine.container import Container
    >>>
    >>> container = Container()
    >>> container.register_shared(Logger)
    >>> container.register(Repository)
    >>>
    >>> repository = container.resolve(Repository)

The library consists of several modules:
    - container: The host-facing container
    - builders: High-level container construction functions
    - resolver: Depth-first resolution with cycle detection
    - binding_table: Storage for registered bindings
    - lifecycle_cache: Storage for shared instances
    - signatures: Dependency discovery for targets
    - instantiators: Construction of targets
    - domain: Core domain models (BindingSpec, Lifetime, ServiceKey)
    - errors: Library-specific exceptions
"""
