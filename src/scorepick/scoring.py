"""Cosine similarity between query and candidate vectors.

Zero-magnitude vectors score 0.0 against everything instead of raising.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from scorepick.exceptions import DimensionMismatchError

VectorLike = Sequence[float] | np.ndarray


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Compute ``dot(a, b) / (|a| * |b|)``.

    Args:
        a: First vector.
        b: Second vector, same length as *a*.

    Returns:
        Similarity in [-1, 1], or 0.0 if either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise DimensionMismatchError(len(va), len(vb))

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = float(np.dot(va, vb)) / (norm_a * norm_b)
    # Rounding can push identical vectors a hair past 1.0.
    return float(np.clip(similarity, -1.0, 1.0))


def cosine_similarities(query: VectorLike, matrix: np.ndarray) -> np.ndarray:
    """Score *query* against every row of *matrix* at once.

    Args:
        query: Vector of length D.
        matrix: Array of shape (N, D).

    Returns:
        Array of N similarities; rows (or a query) with zero magnitude score 0.0.

    Raises:
        DimensionMismatchError: If the row length differs from the query length.
    """
    q = np.asarray(query, dtype=np.float64)
    m = np.asarray(matrix, dtype=np.float64)
    if m.ndim != 2 or m.shape[1] != q.shape[0]:
        raise DimensionMismatchError(len(q), m.shape[-1] if m.ndim else 0)

    q_norm = float(np.linalg.norm(q))
    row_norms = np.linalg.norm(m, axis=1)
    scores = np.zeros(m.shape[0], dtype=np.float64)
    if q_norm == 0.0:
        return scores

    valid = row_norms > 0.0
    scores[valid] = (m[valid] @ q) / (row_norms[valid] * q_norm)
    result: np.ndarray = np.clip(scores, -1.0, 1.0)
    return result
