from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, overload, runtime_checkable

from ._cache import InstanceCache
from ._errors import AbstractInstantiationError
from ._inspect import Inspector, load_class


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    T = TypeVar("T")

    ClassRef = type[T] | str

_MISSING = object()


@runtime_checkable
class Resolver(Protocol):
    """What a constructed object can ask of the factory that built it."""

    def secure(self, ref: Any) -> Any: ...

    def obtain(self, ref: Any) -> Any: ...

    def make(self, ref: Any) -> Any: ...


class Factory:
    """Reflective DI container.

    - secure: build once, then return the cached instance
    - obtain: return the cached instance if any, else a fresh uncached one
    - make: always build a fresh instance
    Constructor dependencies are always resolved with `secure`.
    """

    def __init__(self, *objects: object, namespace: str | None = None, inspector: Inspector | None = None) -> None:
        self._namespace = namespace
        self._inspector = inspector if inspector is not None else Inspector()
        self._cache = InstanceCache(self._inspector.ancestors_of)
        self._lock = threading.RLock()

        self.inject_objects(*objects)

    @property
    def inspector(self) -> Inspector:
        return self._inspector

    def inject_objects(self, *objects: object) -> None:
        """Register pre-built instances under their class and its ancestors."""
        with self._lock:
            for obj in objects:
                self._cache.put(type(obj), obj)

    @overload
    def secure(self, ref: type[T]) -> T: ...

    @overload
    def secure(self, ref: str) -> Any: ...

    def secure(self, ref: ClassRef[T]) -> Any:
        return self._resolve(ref, read=True, write=True)

    @overload
    def obtain(self, ref: type[T]) -> T: ...

    @overload
    def obtain(self, ref: str) -> Any: ...

    def obtain(self, ref: ClassRef[T]) -> Any:
        return self._resolve(ref, read=True, write=False)

    @overload
    def make(self, ref: type[T]) -> T: ...

    @overload
    def make(self, ref: str) -> Any: ...

    def make(self, ref: ClassRef[T]) -> Any:
        return self._resolve(ref, read=False, write=False)

    def _resolve(self, ref: ClassRef[T], *, read: bool, write: bool) -> Any:
        cls = load_class(ref, self._namespace) if isinstance(ref, str) else ref

        if self._provides_self(cls):
            return self

        with self._lock:
            if read:
                cached = self._cache.get(cls, _MISSING)
                if cached is not _MISSING:
                    return cached

            if self._inspector.is_abstract(cls):
                raise AbstractInstantiationError(cls)

            descriptor = self._inspector.describe(cls)
            values = [self.secure(dep) for dep in descriptor.dependencies]
            instance = descriptor.construct(*values)

            if write:
                self._cache.put(cls, instance)

            logger.debug("built %s (%s)", cls.__qualname__, "cached" if write else "transient")
            return instance

    def _provides_self(self, cls: type) -> bool:
        # nominal bases only; structural protocols other than Resolver never match
        return cls is Resolver or (cls is not object and cls in type(self).__mro__)
