"""Name -> class mapping for random sources.

``ScorePickConfig.random_source_type`` names one of the classes registered
here; :meth:`RandomSourceRegistry.build` turns a config into a ready source
and forwards ``random_seed`` to sources whose constructor takes ``seed``.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from scorepick.config import ScorePickConfig
    from scorepick.random.base import RandomSource


class RandomSourceRegistry:
    """Registry of RandomSource classes keyed by config name.

    The built-in ``system``, ``seeded`` and ``fixed`` sources register
    themselves on import of :mod:`scorepick.random`. Application code can
    add its own with ``@register_random_source("name")``.
    """

    _registry: ClassVar[dict[str, type[RandomSource]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[RandomSource]], type[RandomSource]]:
        """Decorator registering a source class under *name*.

        Raises:
            ValueError: If *name* already maps to a different class.
        """

        def decorator(source_cls: type[RandomSource]) -> type[RandomSource]:
            existing = cls._registry.get(name)
            if existing is not None and existing is not source_cls:
                raise ValueError(f"Random source {name!r} is already registered")
            cls._registry[name] = source_cls
            return source_cls

        return decorator

    @classmethod
    def unregister(cls, name: str) -> None:
        """Drop *name* from the registry; unknown names are ignored."""
        cls._registry.pop(name, None)

    @classmethod
    def get(cls, name: str) -> type[RandomSource]:
        """Return the class registered under *name*.

        Raises:
            KeyError: If *name* is not registered.
        """
        try:
            return cls._registry[name]
        except KeyError:
            available = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(f"Unknown random source: {name!r}. Available: {available}") from None

    @classmethod
    def list_available(cls) -> list[str]:
        return sorted(cls._registry)

    @classmethod
    def build(cls, config: ScorePickConfig) -> RandomSource:
        """Instantiate the source named by ``config.random_source_type``.

        ``config.random_seed`` is passed as ``seed`` when it is set and the
        source constructor accepts a ``seed`` parameter; otherwise the seed
        is ignored.
        """
        source_cls = cls.get(config.random_source_type)
        if config.random_seed is not None and _accepts_seed(source_cls):
            return source_cls(seed=config.random_seed)  # type: ignore[call-arg]
        return source_cls()


def _accepts_seed(source_cls: type) -> bool:
    try:
        sig = inspect.signature(source_cls)
    except (ValueError, TypeError):
        return False
    return "seed" in sig.parameters


register_random_source = RandomSourceRegistry.register
