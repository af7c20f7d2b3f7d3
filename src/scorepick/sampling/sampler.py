"""History-aware distribution sampler.

Turns a raw score vector into one selected index per call:

    repetition penalty -> temperature -> softmax -> top-k -> top-p -> select

``temperature == 0`` selects the arg-max of the penalized scores directly
and skips the remaining stages. Otherwise one uniform draw from the injected
random source picks an index by inverse CDF.

The emission history is recorded only after a selection succeeds, so a
failed call leaves the sampler exactly as it was. A sampler belongs to one
generation session; concurrent sessions each need their own instance.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from scorepick.config import GenerationPolicy
from scorepick.exceptions import EmptyInputError
from scorepick.logging.logger import SelectionLogger
from scorepick.logging.types import SelectionRecord
from scorepick.random.adapter import as_random_source
from scorepick.random.registry import RandomSourceRegistry
from scorepick.sampling.filters import (
    apply_repetition_penalty,
    apply_temperature,
    greedy_select,
    inverse_cdf_select,
    shannon_entropy,
    stable_softmax,
    top_k_filter,
    top_p_filter,
)
from scorepick.sampling.types import SamplerState, SampleResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from scorepick.config import ScorePickConfig
    from scorepick.random.base import RandomSource

logger = logging.getLogger("scorepick")


class DistributionSampler:
    """Samples one index per call from a raw score vector.

    Args:
        random_source: Uniform draw provider. A RandomSource, any callable
            returning a float in [0, 1), or None for the system source.
        policy: Default policy used when a call does not pass one.
        selection_logger: Optional diagnostic logger receiving one record per call.
    """

    def __init__(
        self,
        random_source: RandomSource | Callable[[], float] | None = None,
        policy: GenerationPolicy | None = None,
        selection_logger: SelectionLogger | None = None,
    ) -> None:
        self._random = as_random_source(random_source)
        self._policy = policy if policy is not None else GenerationPolicy()
        self._logger = selection_logger
        self._state = SamplerState()

    @classmethod
    def from_config(cls, config: ScorePickConfig) -> DistributionSampler:
        """Build a sampler whose source, policy and logger come from *config*."""
        sampler = cls(
            random_source=RandomSourceRegistry.build(config),
            policy=config.policy(),
            selection_logger=SelectionLogger(config),
        )
        logger.info(
            "DistributionSampler initialized: random_source=%s, temperature=%.3f, "
            "top_k=%d, top_p=%.3f, repetition_penalty=%.3f",
            sampler._random.name,
            sampler._policy.temperature,
            sampler._policy.top_k,
            sampler._policy.top_p,
            sampler._policy.repetition_penalty,
        )
        return sampler

    def sample(
        self,
        scores: Sequence[float] | np.ndarray,
        policy: GenerationPolicy | None = None,
    ) -> int:
        """Select the next index and record it in the history.

        Args:
            scores: Raw score vector, one entry per candidate index.
            policy: Policy for this call; defaults to the sampler's policy.

        Returns:
            The selected index.

        Raises:
            EmptyInputError: If *scores* is empty.
            DegenerateDistributionError: If filtering leaves no probability mass.
        """
        return self.sample_detailed(scores, policy).token_id

    def sample_detailed(
        self,
        scores: Sequence[float] | np.ndarray,
        policy: GenerationPolicy | None = None,
    ) -> SampleResult:
        """Like :meth:`sample`, returning the selection with diagnostics."""
        t_start_ns = time.perf_counter_ns()
        active = policy if policy is not None else self._policy

        raw = np.asarray(scores, dtype=np.float64)
        if raw.ndim != 1:
            raise ValueError(f"Expected a 1-D score vector, got shape {raw.shape}")
        if raw.size == 0:
            raise EmptyInputError("Score vector cannot be empty")

        penalized = apply_repetition_penalty(raw, self._state.counts, active.repetition_penalty)

        if active.is_greedy:
            result = SampleResult(
                token_id=greedy_select(penalized),
                token_prob=1.0,
                num_candidates=1,
                greedy=True,
                draw=None,
                diagnostics={"greedy": True},
            )
            entropy = 0.0
        else:
            probs = stable_softmax(apply_temperature(penalized, active.temperature))
            probs = top_k_filter(probs, active.top_k)
            after_top_k = int(np.count_nonzero(probs))
            probs = top_p_filter(probs, active.top_p)
            num_candidates = int(np.count_nonzero(probs))

            u = self._random.random()
            token_id = inverse_cdf_select(probs, u)
            entropy = shannon_entropy(probs)
            result = SampleResult(
                token_id=token_id,
                token_prob=float(probs[token_id]),
                num_candidates=num_candidates,
                greedy=False,
                draw=u,
                diagnostics={
                    "after_top_k": after_top_k,
                    "after_top_p": num_candidates,
                    "shannon_entropy": entropy,
                },
            )

        history_length = len(self._state)
        self._state.record(result.token_id)

        if self._logger is not None:
            self._logger.log_selection(
                SelectionRecord(
                    timestamp_ns=t_start_ns,
                    total_sampling_ms=(time.perf_counter_ns() - t_start_ns) / 1_000_000.0,
                    random_source=self._random.name,
                    greedy=result.greedy,
                    draw=result.draw,
                    temperature=active.temperature,
                    top_k=active.top_k,
                    top_p=active.top_p,
                    repetition_penalty=active.repetition_penalty,
                    shannon_entropy=entropy,
                    token_id=result.token_id,
                    token_prob=result.token_prob,
                    num_candidates=result.num_candidates,
                    vocab_size=int(raw.size),
                    history_length=history_length,
                )
            )
        return result

    def reset(self) -> None:
        """Clear the emission history; the policy and source are untouched."""
        self._state.clear()
        logger.debug("Sampler history reset")

    @property
    def history(self) -> tuple[int, ...]:
        """Emitted indices in emission order."""
        return tuple(self._state.tokens)

    @property
    def counts(self) -> dict[int, int]:
        """Emission count per index (a copy)."""
        return dict(self._state.counts)

    @property
    def state(self) -> SamplerState:
        """Snapshot of the sampler state; mutating it does not affect the sampler."""
        return self._state.copy()

    @property
    def policy(self) -> GenerationPolicy:
        return self._policy

    @property
    def random_source(self) -> RandomSource:
        return self._random

    @property
    def selection_logger(self) -> SelectionLogger | None:
        return self._logger

    def close(self) -> None:
        """Release the random source."""
        self._random.close()
