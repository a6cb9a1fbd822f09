from __future__ import annotations

import importlib
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, cast, get_type_hints

from ._errors import ResolutionError, UnknownClassReference, UnresolvableParameterType


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

# Bases every class shares; never used as cache keys.
_ROOTS: tuple[type, ...] = (object, cast("type", typing.Generic), cast("type", Protocol))


class Dependency(NamedTuple):
    name: str
    cls: type
    keyword_only: bool = False


@dataclass(frozen=True)
class TypeDescriptor:
    """Static metadata needed to build one class.

    `parameters` lists the constructor dependencies in declaration order.
    `build` replaces the class itself as the constructor when given.
    """

    cls: type
    parameters: tuple[Dependency, ...] = ()
    abstract: bool = False
    build: Callable[..., object] | None = None

    @property
    def dependencies(self) -> tuple[type, ...]:
        return tuple(p.cls for p in self.parameters)

    def construct(self, *values: object) -> object:
        if len(values) != len(self.parameters):
            msg = f"{self.cls.__name__} takes {len(self.parameters)} dependencies, got {len(values)}"
            raise TypeError(msg)

        args: list[object] = []
        kwargs: dict[str, object] = {}
        for param, value in zip(self.parameters, values):
            if param.keyword_only:
                kwargs[param.name] = value
            else:
                args.append(value)

        build = self.build if self.build is not None else self.cls
        return build(*args, **kwargs)


class Inspector:
    """Describes classes for the factory.

    Descriptors come from explicit `register()` calls first, then from
    reflection over the class constructor (memoised per class).
    """

    def __init__(self) -> None:
        self._descriptors: dict[type, TypeDescriptor] = {}
        self._ancestors: dict[type, tuple[type, ...]] = {}

    def register(
        self,
        cls: type,
        *dependencies: type,
        build: Callable[..., object] | None = None,
        abstract: bool = False,
    ) -> TypeDescriptor:
        """Describe `cls` explicitly instead of inspecting its constructor.

        Example:
          inspector.register(Clock, build=SystemClock.from_env)
          inspector.register(Mailer, Transport, Templates)

        """
        parameters = []
        for index, dep in enumerate(dependencies):
            name = f"arg{index}"
            if not is_class_reference(dep):
                raise UnresolvableParameterType(cls, name, dep)
            parameters.append(Dependency(name, dep))

        descriptor = TypeDescriptor(
            cls=cls,
            parameters=tuple(parameters),
            abstract=abstract,
            build=build,
        )
        self._descriptors[cls] = descriptor
        return descriptor

    def describe(self, cls: type) -> TypeDescriptor:
        descriptor = self._descriptors.get(cls)
        if descriptor is None:
            descriptor = TypeDescriptor(
                cls=cls,
                parameters=self._reflect_parameters(cls),
                abstract=_is_abstract(cls),
            )
            self._descriptors[cls] = descriptor
        return descriptor

    def dependencies_of(self, cls: type) -> tuple[type, ...]:
        return self.describe(cls).dependencies

    def is_abstract(self, cls: type) -> bool:
        descriptor = self._descriptors.get(cls)
        if descriptor is not None:
            return descriptor.abstract
        return _is_abstract(cls)

    def ancestors_of(self, cls: type) -> tuple[type, ...]:
        ancestors = self._ancestors.get(cls)
        if ancestors is None:
            ancestors = tuple(base for base in cls.__mro__[1:] if base not in _ROOTS)
            self._ancestors[cls] = ancestors
        return ancestors

    def _reflect_parameters(self, cls: type) -> tuple[Dependency, ...]:
        if not _declares_constructor(cls):
            return ()

        try:
            sig = inspect.signature(cls)
        except (TypeError, ValueError) as e:
            msg = f"Cannot inspect the constructor of {cls.__name__}: {e}"
            raise ResolutionError(msg) from e

        hints = _get_constructor_type_hints(cls)

        parameters = []
        for name, p in sig.parameters.items():
            # nothing to wire into *args/**kwargs; they stay empty
            if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
                continue

            ann = hints.get(name, p.annotation)
            if ann is inspect.Parameter.empty:
                raise UnresolvableParameterType(cls, name)
            if not is_class_reference(ann):
                raise UnresolvableParameterType(cls, name, ann)

            parameters.append(Dependency(name, ann, keyword_only=p.kind is p.KEYWORD_ONLY))

        return tuple(parameters)


def is_class_reference(ann: Any) -> bool:
    """True for classes the factory can build; builtin scalars and generic aliases excluded."""
    return (
        inspect.isclass(ann)
        and typing.get_origin(ann) is None
        and getattr(ann, "__module__", "") != "builtins"
    )


def load_class(name: str, namespace: str | None = None) -> type:
    """Resolve a dotted class name, relative to `namespace` unless already inside it."""
    qualified = name
    if namespace and not name.startswith(f"{namespace}."):
        qualified = f"{namespace}.{name}"

    parts = qualified.split(".")
    target: Any = None
    for index in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:index])
        try:
            target = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # a missing import inside an existing module is not ours to hide
            if exc.name is None or not (module_name == exc.name or module_name.startswith(f"{exc.name}.")):
                raise
            continue

        for attr in parts[index:]:
            try:
                target = getattr(target, attr)
            except AttributeError:
                raise UnknownClassReference(qualified) from None
        break

    if not inspect.isclass(target):
        raise UnknownClassReference(qualified)
    return target


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: type) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def _is_protocol(tp: type) -> bool:
        """Detect whether 'tp' is a typing.Protocol subclass (safe)."""
        return inspect.isclass(tp) and bool(getattr(tp, "_is_protocol", False)) and tp is not Protocol


def _is_abstract(cls: type) -> bool:
    return inspect.isabstract(cls) or _is_protocol(cls)


def _declares_constructor(cls: type) -> bool:
    """True when a non-builtin class in the MRO defines `__init__` or `__new__`."""
    return any(
        "__init__" in vars(base) or "__new__" in vars(base)
        for base in cls.__mro__
        if base not in _ROOTS and base.__module__ != "builtins"
    )


def _get_constructor_type_hints(cls: type) -> dict[str, Any]:
    constructors = [inspect.getattr_static(cls, "__init__")]
    if cls.__new__ is not object.__new__:
        constructors.insert(0, cls.__new__)

    hints: dict[str, Any] = {}
    for constructor in constructors:
        try:
            hints.update(get_type_hints(constructor))
        except TypeError:
            continue
        except NameError as exc:
            logger.warning("'%s' name error retrieving %s (%s) type hints", exc.name, cls.__name__, cls.__qualname__)

    return hints
