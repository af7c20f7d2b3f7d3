"""Diagnostic logging subsystem for scorepick.

Provides immutable per-call selection records and a configurable logger
that supports none/summary/full verbosity and in-memory diagnostic mode.
"""

from scorepick.logging.logger import SelectionLogger
from scorepick.logging.types import SelectionRecord

__all__ = [
    "SelectionLogger",
    "SelectionRecord",
]
