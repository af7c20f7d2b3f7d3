"""Random-draw sources for scorepick.

Re-exports the ABC, registry, and all built-in source implementations::

    from scorepick.random import RandomSource, RandomSourceRegistry
    from scorepick.random import SystemRandomSource, SeededRandomSource
"""

from scorepick.random.adapter import CallableRandomSource, as_random_source
from scorepick.random.base import RandomSource
from scorepick.random.fixed import FixedSequenceSource
from scorepick.random.registry import RandomSourceRegistry, register_random_source
from scorepick.random.seeded import SeededRandomSource
from scorepick.random.system import SystemRandomSource

__all__ = [
    "CallableRandomSource",
    "FixedSequenceSource",
    "RandomSource",
    "RandomSourceRegistry",
    "SeededRandomSource",
    "SystemRandomSource",
    "as_random_source",
    "register_random_source",
]
