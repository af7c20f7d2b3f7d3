"""Exception hierarchy for scorepick.

All exceptions derive from ScorePickError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.
None of these conditions are transient, so nothing is retried internally.
"""

from __future__ import annotations


class ScorePickError(Exception):
    """Base exception for all scorepick errors."""


class EmptyInputError(ScorePickError):
    """A score vector or query vector has zero length.

    Raised before any pipeline stage runs, so no state is mutated.
    """


class DimensionMismatchError(ScorePickError, ValueError):
    """Two vectors that must be compared have different lengths.

    Attributes:
        expected: Length of the reference vector.
        actual: Length of the offending vector.
    """

    def __init__(self, expected: int, actual: int, context: str = "") -> None:
        self.expected = expected
        self.actual = actual
        message = f"Dimension mismatch: expected {expected}, got {actual}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class DegenerateDistributionError(ScorePickError):
    """A filtering stage removed all probability mass.

    Raised when softmax, top-k or top-p leaves nothing to renormalize
    or sample from (e.g., scores containing NaN).
    """


class ConfigValidationError(ScorePickError):
    """Configuration override validation failed.

    Raised when per-call overrides contain unknown keys, attempt to
    override infrastructure fields, or fail type validation.
    """


class RandomSourceUnavailableError(ScorePickError):
    """A random source cannot produce a uniform draw."""
