"""System random source using ``os.urandom()``.

This is the default source. It is cryptographically secure and always
available, but not reproducible.
"""

from __future__ import annotations

import os

from scorepick.random.base import RandomSource
from scorepick.random.registry import register_random_source

# 53 bits fill the float64 mantissa exactly.
_MANTISSA_BITS = 53
_SCALE = 1.0 / (1 << _MANTISSA_BITS)


@register_random_source("system")
class SystemRandomSource(RandomSource):
    """``os.urandom()`` wrapper producing uniform floats in [0, 1)."""

    @property
    def name(self) -> str:
        """Return ``'system'``."""
        return "system"

    @property
    def is_available(self) -> bool:
        """Always returns ``True``."""
        return True

    def random(self) -> float:
        """Return a uniform float built from 53 bits of OS entropy."""
        raw = int.from_bytes(os.urandom(8), "big") >> (64 - _MANTISSA_BITS)
        return raw * _SCALE

    def close(self) -> None:
        """No-op, no resources to release."""
