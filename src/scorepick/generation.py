"""Step-by-step generation driver.

Repeatedly asks a score producer (the model) for the next score vector and
feeds it to a :class:`DistributionSampler` until a stop index is emitted or
the policy's ``max_tokens`` limit is reached. The producer is any callable
mapping the token sequence so far (prompt plus generated) to a score vector.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Literal

import numpy as np

from scorepick.config import GenerationPolicy
from scorepick.sampling.sampler import DistributionSampler

logger = logging.getLogger("scorepick")

ScoreProducer = Callable[[Sequence[int]], Sequence[float] | np.ndarray]


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of one generation run.

    Attributes:
        token_ids: Generated indices, excluding the prompt. Includes the stop
            index when one ended the run.
        stop_reason: ``"stop_token"`` or ``"max_tokens"``.
    """

    token_ids: tuple[int, ...]
    stop_reason: Literal["stop_token", "max_tokens"]


def generate(
    next_scores: ScoreProducer,
    sampler: DistributionSampler,
    policy: GenerationPolicy | None = None,
    stop_ids: Iterable[int] = (),
    prompt_ids: Sequence[int] = (),
) -> GenerationResult:
    """Run the generation loop.

    The sampler's history is not reset; call ``sampler.reset()`` first to
    start a new session. Errors raised by the producer or the sampler
    propagate and end the run; the failing step records nothing.

    Args:
        next_scores: Score producer called once per step.
        sampler: Sampler owning this session's history.
        policy: Policy for every step; defaults to the sampler's policy.
        stop_ids: Indices that end generation when emitted.
        prompt_ids: Initial sequence passed to the producer.

    Returns:
        GenerationResult with the generated indices and why generation stopped.
    """
    active = policy if policy is not None else sampler.policy
    stops = frozenset(stop_ids)
    sequence = list(prompt_ids)
    generated: list[int] = []

    logger.info(
        "Generating up to %d tokens (prompt=%d, stop_ids=%d)",
        active.max_tokens,
        len(sequence),
        len(stops),
    )

    for _ in range(active.max_tokens):
        token_id = sampler.sample(next_scores(sequence), active)
        generated.append(token_id)
        sequence.append(token_id)
        if token_id in stops:
            logger.debug("Stop index %d emitted after %d tokens", token_id, len(generated))
            return GenerationResult(token_ids=tuple(generated), stop_reason="stop_token")

    return GenerationResult(token_ids=tuple(generated), stop_reason="max_tokens")
