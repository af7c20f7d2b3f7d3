"""Seeded pseudo-random source for reproducible sampling runs."""

from __future__ import annotations

import numpy as np

from scorepick.random.base import RandomSource
from scorepick.random.registry import register_random_source


@register_random_source("seeded")
class SeededRandomSource(RandomSource):
    """numpy ``Generator`` backed source.

    Two sources built with the same *seed* produce identical draw sequences.

    Args:
        seed: Optional RNG seed. ``None`` seeds from OS entropy.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def name(self) -> str:
        """Return ``'seeded'``."""
        return "seeded"

    @property
    def is_available(self) -> bool:
        """Always returns ``True``."""
        return True

    @property
    def seed(self) -> int | None:
        return self._seed

    def random(self) -> float:
        return float(self._rng.random())

    def close(self) -> None:
        """No-op, no resources to release."""
