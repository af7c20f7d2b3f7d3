"""Abstract base class for all random-draw sources.

The sampler never generates randomness itself: it asks an injected source
for one uniform draw in [0, 1) per stochastic selection. Subclasses must
implement ``name``, ``is_available``, ``random()`` and ``close()``.
Calling a source directly (``source()``) is the same as ``source.random()``,
so any ``RandomSource`` also satisfies a plain ``Callable[[], float]``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RandomSource(ABC):
    """Abstract base for uniform random-draw providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source identifier (e.g., ``'system'``, ``'seeded'``)."""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the source can currently produce draws."""

    @abstractmethod
    def random(self) -> float:
        """Return one uniform value in [0, 1).

        Raises:
            RandomSourceUnavailableError: If the source cannot produce a draw.
        """

    def __call__(self) -> float:
        return self.random()

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the source."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this source.

        Returns:
            Dictionary with at least ``'source'`` and ``'healthy'`` keys.
        """
        return {"source": self.name, "healthy": self.is_available}
