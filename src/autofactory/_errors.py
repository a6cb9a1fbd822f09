from __future__ import annotations

from typing import Any


class ResolutionError(RuntimeError):
    pass


class UnresolvableParameterType(ResolutionError):
    """A constructor parameter is not typed with a class the factory can build."""

    def __init__(self, cls: type, parameter: str, annotation: Any = None) -> None:
        self.cls = cls
        self.parameter = parameter
        self.annotation = annotation
        ann_repr = getattr(annotation, "__name__", repr(annotation)) if annotation is not None else "no-annotation"
        msg = (
            f"Cannot resolve constructor parameter '{parameter}' of {cls.__name__}: "
            f"it is not annotated with a class (annotation: {ann_repr})."
        )
        super().__init__(msg)


class AbstractInstantiationError(ResolutionError):
    def __init__(self, cls: type) -> None:
        self.cls = cls
        super().__init__(f"Cannot instantiate abstract class {cls.__name__}")


class UnknownClassReference(ResolutionError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No class found for reference {name!r}")
