"""Reflective dependency injection factory.

This package builds objects from their constructor type hints: each annotated
constructor parameter is itself built (recursively) and passed in, so callers
never write the wiring by hand.

Exports:
- `Factory`: the container. `secure` returns one cached instance per class,
  `obtain` reuses a cached instance or builds an uncached one, `make` always
  builds a new one.
- `Resolver`: protocol a constructor can depend on to receive the factory.
- `Inspector`: describes classes by reflection or explicit registration.
- `InstanceCache`: class-keyed instance store indexed by ancestor classes.
"""

from ._cache import InstanceCache
from ._errors import AbstractInstantiationError, ResolutionError, UnknownClassReference, UnresolvableParameterType
from ._factory import Factory, Resolver
from ._inspect import Dependency, Inspector, TypeDescriptor, load_class


__all__ = [
    "AbstractInstantiationError",
    "Dependency",
    "Factory",
    "InstanceCache",
    "Inspector",
    "ResolutionError",
    "Resolver",
    "TypeDescriptor",
    "UnknownClassReference",
    "UnresolvableParameterType",
    "load_class",
]
