"""Data types for the sampling subsystem."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class SamplerState:
    """Emission history owned by one sampler.

    ``tokens`` is append-only in emission order; ``counts`` is derived from
    it and kept in sync by :meth:`record` and :meth:`clear`.
    """

    tokens: list[int] = field(default_factory=list)
    counts: Counter[int] = field(default_factory=Counter)

    def record(self, token_id: int) -> None:
        self.tokens.append(token_id)
        self.counts[token_id] += 1

    def clear(self) -> None:
        self.tokens.clear()
        self.counts.clear()

    def copy(self) -> SamplerState:
        return SamplerState(tokens=list(self.tokens), counts=Counter(self.counts))

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True, slots=True)
class SampleResult:
    """Result of one sampling call.

    Attributes:
        token_id: Selected index.
        token_prob: Probability of the selected index after filtering
            (1.0 in greedy mode).
        num_candidates: Indices with nonzero probability after filtering
            (1 in greedy mode).
        greedy: True if the arg-max path was taken.
        draw: Uniform value used for inverse-CDF selection, None in greedy mode.
        diagnostics: Additional info (entropy, stage survivor counts).
    """

    token_id: int
    token_prob: float
    num_candidates: int
    greedy: bool
    draw: float | None
    diagnostics: dict[str, Any]
