"""In-memory ranked retriever.

Holds candidates in insertion order and ranks them against a query by
cosine similarity. Every search scores the whole collection and returns a
freshly built list; nothing is cached.

Candidates whose embedding length differs from the query are handled by
the ``mismatch_policy``: ``"skip"`` (default) leaves them out of the
ranking, ``"abort"`` fails the whole search with DimensionMismatchError.

The collection is not locked. Callers that share a retriever across
threads must serialize writers (``add``, ``remove_by_group``, ``clear``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Literal

import numpy as np

from scorepick.exceptions import DimensionMismatchError, EmptyInputError
from scorepick.retrieval.types import Candidate, RetrieverStats, ScoredCandidate
from scorepick.scoring import cosine_similarities

if TYPE_CHECKING:
    from scorepick.config import ScorePickConfig

logger = logging.getLogger("scorepick")

MismatchPolicy = Literal["skip", "abort"]
_MISMATCH_POLICIES: frozenset[str] = frozenset({"skip", "abort"})


class RankedRetriever:
    """Insertion-ordered candidate collection with top-k cosine search.

    Args:
        mismatch_policy: ``"skip"`` or ``"abort"`` on dimension mismatch.
    """

    def __init__(self, mismatch_policy: MismatchPolicy = "skip") -> None:
        if mismatch_policy not in _MISMATCH_POLICIES:
            raise ValueError(
                f"Unknown mismatch_policy {mismatch_policy!r}; expected 'skip' or 'abort'"
            )
        self._mismatch_policy = mismatch_policy
        self._candidates: list[Candidate] = []

    @classmethod
    def from_config(cls, config: ScorePickConfig) -> RankedRetriever:
        return cls(mismatch_policy=config.mismatch_policy)

    def add(self, candidate: Candidate) -> None:
        """Append *candidate*. Duplicates by id are kept."""
        if candidate.embedding is None:
            logger.warning("Adding candidate without embedding: %s", candidate.id)
        self._candidates.append(candidate)
        logger.debug("Added candidate to retriever. Total: %d", len(self._candidates))

    def add_all(self, candidates: Iterable[Candidate]) -> None:
        for candidate in candidates:
            self.add(candidate)

    def search(self, query: Sequence[float] | np.ndarray, k: int) -> list[ScoredCandidate]:
        """Rank stored candidates against *query* and return the best *k*.

        Candidates without an embedding are skipped. Ties keep insertion order.

        Args:
            query: Query vector.
            k: Maximum number of results (0 returns an empty list).

        Returns:
            Up to *k* ScoredCandidates, highest score first.

        Raises:
            EmptyInputError: If *query* is empty.
            DimensionMismatchError: Under the ``"abort"`` policy, if any
                embedded candidate's dimension differs from the query's.
            ValueError: If *k* is negative.
        """
        if k < 0:
            raise ValueError(f"k must be >= 0, got {k}")
        q = np.asarray(query, dtype=np.float64)
        if q.ndim != 1:
            raise ValueError(f"Expected a 1-D query vector, got shape {q.shape}")
        if q.size == 0:
            raise EmptyInputError("Query vector cannot be empty")

        dimension = q.shape[0]
        scored: list[Candidate] = []
        skipped = 0
        for candidate in self._candidates:
            if candidate.embedding is None:
                continue
            if len(candidate.embedding) != dimension:
                if self._mismatch_policy == "abort":
                    raise DimensionMismatchError(
                        dimension, len(candidate.embedding), f"candidate {candidate.id!r}"
                    )
                skipped += 1
                continue
            scored.append(candidate)

        if skipped:
            logger.debug("Skipped %d candidates with mismatched dimension", skipped)

        if k == 0 or not scored:
            return []

        matrix = np.array([c.embedding for c in scored], dtype=np.float64)
        scores = cosine_similarities(q, matrix)
        order = np.argsort(-scores, kind="stable")[:k]
        results = [ScoredCandidate(candidate=scored[i], score=float(scores[i])) for i in order]

        logger.debug(
            "Search returned %d results out of %d candidates",
            len(results),
            len(self._candidates),
        )
        return results

    def remove_by_group(self, group_id: str) -> int:
        """Remove every candidate tagged *group_id*; return how many were removed."""
        before = len(self._candidates)
        self._candidates = [c for c in self._candidates if c.group_id != group_id]
        removed = before - len(self._candidates)
        logger.info("Removed %d candidates for group %s", removed, group_id)
        return removed

    def clear(self) -> None:
        """Remove all candidates."""
        self._candidates.clear()
        logger.info("Cleared retriever")

    def count(self) -> int:
        return len(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def group_ids(self) -> list[str]:
        """Distinct group ids, sorted."""
        return sorted({c.group_id for c in self._candidates})

    def count_by_group(self, group_id: str) -> int:
        return sum(1 for c in self._candidates if c.group_id == group_id)

    def stats(self) -> RetrieverStats:
        return RetrieverStats(
            total=len(self._candidates),
            embedded=sum(1 for c in self._candidates if c.embedding is not None),
            groups=len({c.group_id for c in self._candidates}),
        )

    @property
    def mismatch_policy(self) -> MismatchPolicy:
        return self._mismatch_policy


def format_context(results: Sequence[ScoredCandidate]) -> str:
    """Render ranked results as a numbered context block for answer building.

    Each entry is labelled with the candidate's ``document_name`` metadata,
    falling back to its group id, then its id.
    """
    lines = ["Relevant context:\n\n"]
    for position, result in enumerate(results, start=1):
        candidate = result.candidate
        label = candidate.metadata.get("document_name") or candidate.group_id or candidate.id
        lines.append(f"Document {position}: {label}\n")
        lines.append(f"Content: {candidate.content}\n\n")
    return "".join(lines)
