from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)


class InstanceCache:
    """Instances keyed by class.

    Writes index an instance under its own class and every ancestor class, so
    reads are plain lookups. Last write wins per key; nothing is ever evicted.
    """

    def __init__(self, ancestors_of: Callable[[type], tuple[type, ...]]) -> None:
        self._ancestors_of = ancestors_of
        self._instances: dict[type, object] = {}

    def put(self, cls: type, instance: object) -> None:
        runtime_type = type(instance)
        keys = dict.fromkeys((cls, runtime_type, *self._ancestors_of(runtime_type)))
        for key in keys:
            self._instances[key] = instance
        logger.debug("cached %s under %s", runtime_type.__qualname__, ", ".join(k.__qualname__ for k in keys))

    def get(self, cls: type, default: Any = None) -> Any:
        return self._instances.get(cls, default)

    def __contains__(self, cls: object) -> bool:
        return cls in self._instances

    def __len__(self) -> int:
        return len(self._instances)
