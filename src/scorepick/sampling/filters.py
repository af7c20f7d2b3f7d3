"""Pure pipeline stages for the distribution sampler.

Every function takes and returns float64 numpy arrays and never mutates
its input. The sampler composes them in a fixed order:

    repetition penalty -> temperature -> softmax -> top-k -> top-p -> select

Both truncation stages rank candidates with :func:`descending_order`, a
stable sort, so ties always resolve to the lower index.
"""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np

from scorepick.exceptions import DegenerateDistributionError


def apply_repetition_penalty(
    scores: np.ndarray,
    counts: Mapping[int, int],
    penalty: float,
) -> np.ndarray:
    """Discourage previously emitted indices.

    For each emitted index with count ``c``, a positive score is divided by
    ``penalty ** c`` and a non-positive score is multiplied by it. Indices
    outside the vector are ignored. ``penalty == 1.0`` is the identity.

    Zero and non-finite scores are left as they are. ``penalty == 0`` sends
    a repeated positive score to ``+inf`` and a repeated negative score to
    ``-0.0``. A factor that overflows sends them to ``0.0`` and ``-inf``.

    Args:
        scores: Raw score vector.
        counts: Emission count per index.
        penalty: Penalty base (>= 0).

    Returns:
        A new array with penalties applied.
    """
    result = np.array(scores, dtype=np.float64, copy=True)
    if penalty == 1.0 or not counts:
        return result

    size = len(result)
    for index, count in counts.items():
        if not 0 <= index < size or count <= 0:
            continue
        score = result[index]
        if score == 0.0 or not np.isfinite(score):
            continue
        with np.errstate(over="ignore", divide="ignore"):
            factor = np.float64(penalty) ** count
            if score > 0.0:
                result[index] = score / factor
            else:
                result[index] = score * factor
    return result


def apply_temperature(scores: np.ndarray, temperature: float) -> np.ndarray:
    """Shift the maximum score to 0, then divide by *temperature*.

    The shift leaves the softmax of the result unchanged and keeps every
    finite entry <= 0, so a tiny temperature can only push entries down to
    ``-inf`` and never overflow them to ``+inf``. The shift is skipped when
    the maximum is not finite. ``temperature <= 0`` returns an unscaled copy.
    """
    result = np.array(scores, dtype=np.float64, copy=True)
    if temperature <= 0.0 or result.size == 0:
        return result

    max_score = np.max(result)
    with np.errstate(over="ignore"):
        if np.isfinite(max_score):
            result -= max_score
        result /= temperature
    return result


def stable_softmax(scores: np.ndarray) -> np.ndarray:
    """Numerically stable softmax via shift-by-max.

    Masked entries (``-inf``) receive probability 0.

    Raises:
        DegenerateDistributionError: If no entry is finite-or-positive-infinite
            (all ``-inf``) or the input contains NaN.
    """
    scores = np.asarray(scores, dtype=np.float64)
    if np.isnan(scores).any():
        raise DegenerateDistributionError("Score vector contains NaN")

    max_score = np.max(scores)
    if max_score == -np.inf:
        raise DegenerateDistributionError("All scores are -inf; no probability mass")

    if max_score == np.inf:
        # Positive infinities share the mass evenly.
        winners = scores == np.inf
        return winners.astype(np.float64) / float(np.sum(winners))

    exp_shifted = np.exp(scores - max_score)
    total = float(np.sum(exp_shifted))
    probs: np.ndarray = exp_shifted / total
    return probs


def descending_order(probs: np.ndarray) -> np.ndarray:
    """Indices sorted by probability descending, lower index first on ties."""
    return np.argsort(-np.asarray(probs, dtype=np.float64), kind="stable")


def _renormalize(filtered: np.ndarray, stage: str) -> np.ndarray:
    total = float(np.sum(filtered))
    if total <= 0.0:
        raise DegenerateDistributionError(f"{stage} filtering left no probability mass")
    result: np.ndarray = filtered / total
    return result


def top_k_filter(probs: np.ndarray, k: int) -> np.ndarray:
    """Keep the *k* most probable entries and renormalize.

    The stage runs only when ``0 < k < len(probs)``; otherwise the input is
    returned unchanged (as a copy).

    Raises:
        DegenerateDistributionError: If the retained mass is zero.
    """
    probs = np.asarray(probs, dtype=np.float64)
    if k <= 0 or k >= len(probs):
        return probs.copy()

    keep = descending_order(probs)[:k]
    filtered = np.zeros_like(probs)
    filtered[keep] = probs[keep]
    return _renormalize(filtered, "Top-k")


def top_p_filter(probs: np.ndarray, top_p: float) -> np.ndarray:
    """Nucleus filtering: keep the smallest descending prefix with mass >= *top_p*.

    The element whose cumulative sum first reaches the threshold is kept.
    If the threshold is never reached (rounding), everything is kept.
    ``top_p >= 1.0`` disables the stage.

    Raises:
        DegenerateDistributionError: If the retained mass is zero.
    """
    probs = np.asarray(probs, dtype=np.float64)
    if top_p >= 1.0:
        return probs.copy()

    order = descending_order(probs)
    cumulative = np.cumsum(probs[order])
    reached = np.nonzero(cumulative >= top_p)[0]
    cutoff = int(reached[0]) + 1 if len(reached) else len(order)

    keep = order[:cutoff]
    filtered = np.zeros_like(probs)
    filtered[keep] = probs[keep]
    return _renormalize(filtered, "Top-p")


def greedy_select(scores: np.ndarray) -> int:
    """Index of the maximum score, first occurrence on ties.

    Raises:
        DegenerateDistributionError: If the scores contain NaN.
    """
    scores = np.asarray(scores, dtype=np.float64)
    if np.isnan(scores).any():
        raise DegenerateDistributionError("Score vector contains NaN")
    return int(np.argmax(scores))


def inverse_cdf_select(probs: np.ndarray, u: float) -> int:
    """Draw an index by walking the CDF in index order.

    Returns the first index whose cumulative probability meets or exceeds
    *u*. If rounding keeps the total below *u*, falls back to the highest
    index with nonzero probability.

    A zero-probability index is never returned: a draw of exactly 0 over
    leading zero-probability entries yields the first index with mass,
    not index 0.

    Raises:
        DegenerateDistributionError: If no index has nonzero probability.
    """
    probs = np.asarray(probs, dtype=np.float64)
    nonzero = np.nonzero(probs > 0.0)[0]
    if len(nonzero) == 0:
        raise DegenerateDistributionError("No candidates with nonzero probability")

    cdf = np.cumsum(probs)
    index = int(np.searchsorted(cdf, u, side="left"))
    if index >= len(probs):
        return int(nonzero[-1])
    # Only u == 0 over a leading run of zeros lands on a zero-mass index.
    if probs[index] == 0.0:
        return int(nonzero[0])
    return index


def shannon_entropy(probs: np.ndarray) -> float:
    """Shannon entropy ``H = -sum(p * ln p)`` in nats, skipping zeros."""
    probs = np.asarray(probs, dtype=np.float64)
    mask = probs > 0
    entropy = -float(np.sum(probs[mask] * np.log(probs[mask])))
    # Guard against floating-point artifacts producing tiny negatives.
    return max(0.0, entropy)
