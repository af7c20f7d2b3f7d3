"""Adapters turning plain callables into random sources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorepick.exceptions import RandomSourceUnavailableError
from scorepick.random.base import RandomSource

if TYPE_CHECKING:
    from collections.abc import Callable


class CallableRandomSource(RandomSource):
    """Wraps a zero-argument callable returning a uniform value in [0, 1).

    Values outside [0, 1) are rejected with RandomSourceUnavailableError
    rather than silently clamped.
    """

    def __init__(self, draw: Callable[[], float], name: str = "callable") -> None:
        self._draw = draw
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return True

    def random(self) -> float:
        value = float(self._draw())
        if not 0.0 <= value < 1.0:
            raise RandomSourceUnavailableError(
                f"Random source {self._name!r} produced {value!r}, outside [0, 1)"
            )
        return value

    def close(self) -> None:
        """No-op, the wrapped callable owns its resources."""


def as_random_source(source: RandomSource | Callable[[], float] | None) -> RandomSource:
    """Normalize an injected randomness capability to a RandomSource.

    Args:
        source: ``None`` for the system source, an existing RandomSource,
            or any callable returning a uniform float.

    Returns:
        A RandomSource instance.

    Raises:
        TypeError: If *source* is neither a RandomSource nor callable.
    """
    if source is None:
        from scorepick.random.system import SystemRandomSource

        return SystemRandomSource()
    if isinstance(source, RandomSource):
        return source
    if callable(source):
        return CallableRandomSource(source)
    raise TypeError(f"Expected a RandomSource or callable, got {type(source).__name__}")
