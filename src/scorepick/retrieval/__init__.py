"""Ranked retrieval subsystem for scorepick.

Scores stored candidate vectors against a query by cosine similarity and
returns the top-k, highest first.
"""

from scorepick.retrieval.retriever import RankedRetriever, format_context
from scorepick.retrieval.types import Candidate, RetrieverStats, ScoredCandidate

__all__ = [
    "Candidate",
    "RankedRetriever",
    "RetrieverStats",
    "ScoredCandidate",
    "format_context",
]
