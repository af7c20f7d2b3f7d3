"""Data types for the diagnostic logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SelectionRecord:
    """Immutable record of a single sampling call.

    Attributes:
        timestamp_ns: Monotonic start time of the call (nanoseconds).
        total_sampling_ms: Time for the full pipeline (ms).
        random_source: Name of the source that supplied the draw.
        greedy: True if the deterministic arg-max path was taken.
        draw: Uniform value used for selection, None in greedy mode.
        temperature: Temperature of the active policy.
        top_k: Top-k of the active policy.
        top_p: Top-p of the active policy.
        repetition_penalty: Repetition penalty of the active policy.
        shannon_entropy: Entropy of the final distribution (nats), 0.0 when greedy.
        token_id: Selected index.
        token_prob: Probability of the selected index.
        num_candidates: Indices with nonzero probability after filtering.
        vocab_size: Length of the incoming score vector.
        history_length: Emissions recorded before this call.
    """

    # Timing
    timestamp_ns: int
    total_sampling_ms: float

    # Randomness
    random_source: str
    greedy: bool
    draw: float | None

    # Policy
    temperature: float
    top_k: int
    top_p: float
    repetition_penalty: float

    # Outcome
    shannon_entropy: float
    token_id: int
    token_prob: float
    num_candidates: int
    vocab_size: int
    history_length: int
