"""scorepick: rank or sample from a scored candidate set.

Turns raw score vectors into decisions. Two front doors share the same
filtering ideas: a history-aware distribution sampler for next-token
selection (repetition penalty, temperature, top-k, top-p) and a ranked
retriever returning the top-k candidates by cosine similarity.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("scorepick")
except PackageNotFoundError:
    __version__ = "0.0.0"

from scorepick.config import (
    GenerationPolicy,
    ScorePickConfig,
    resolve_policy,
    validate_overrides,
)
from scorepick.exceptions import (
    ConfigValidationError,
    DegenerateDistributionError,
    DimensionMismatchError,
    EmptyInputError,
    RandomSourceUnavailableError,
    ScorePickError,
)
from scorepick.generation import GenerationResult, generate
from scorepick.retrieval import Candidate, RankedRetriever, ScoredCandidate, format_context
from scorepick.sampling import DistributionSampler, SampleResult, SamplerState
from scorepick.scoring import cosine_similarity

__all__ = [
    "Candidate",
    "ConfigValidationError",
    "DegenerateDistributionError",
    "DimensionMismatchError",
    "DistributionSampler",
    "EmptyInputError",
    "GenerationPolicy",
    "GenerationResult",
    "RandomSourceUnavailableError",
    "RankedRetriever",
    "SampleResult",
    "SamplerState",
    "ScorePickConfig",
    "ScorePickError",
    "ScoredCandidate",
    "__version__",
    "cosine_similarity",
    "format_context",
    "generate",
    "resolve_policy",
    "validate_overrides",
]
