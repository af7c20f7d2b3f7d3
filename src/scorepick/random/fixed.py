"""Fixed-sequence random source for deterministic tests.

Replays a caller-supplied sequence of draws, wrapping around at the end.
Lets tests pin the exact inverse-CDF position of every stochastic selection.
"""

from __future__ import annotations

from collections.abc import Sequence

from scorepick.random.base import RandomSource
from scorepick.random.registry import register_random_source


@register_random_source("fixed")
class FixedSequenceSource(RandomSource):
    """Cycles through a fixed sequence of uniform values.

    Args:
        values: Draws to replay, each in [0, 1). Must be non-empty.

    Raises:
        ValueError: If *values* is empty or contains a value outside [0, 1).
    """

    def __init__(self, values: Sequence[float] = (0.5,)) -> None:
        if len(values) == 0:
            raise ValueError("FixedSequenceSource requires at least one value")
        for value in values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Draw {value!r} is outside [0, 1)")
        self._values = tuple(float(v) for v in values)
        self._position = 0

    @property
    def name(self) -> str:
        """Return ``'fixed'``."""
        return "fixed"

    @property
    def is_available(self) -> bool:
        """Always returns ``True``."""
        return True

    @property
    def draws_taken(self) -> int:
        """Number of draws served so far."""
        return self._position

    def random(self) -> float:
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value

    def close(self) -> None:
        """No-op, no resources to release."""
