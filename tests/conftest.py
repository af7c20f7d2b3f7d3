"""Shared pytest fixtures for scorepick tests.

Provides reusable configuration objects, deterministic random sources,
sample score vectors, and populated retrievers used across test modules.
"""

from __future__ import annotations

import os

import numpy as np
import pytest

from scorepick.config import GenerationPolicy, ScorePickConfig
from scorepick.random.fixed import FixedSequenceSource
from scorepick.random.seeded import SeededRandomSource
from scorepick.retrieval.retriever import RankedRetriever
from scorepick.retrieval.types import Candidate


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SCOREPICK_* variables from the host out of every test."""
    for key in list(os.environ):
        if key.startswith("SCOREPICK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def default_config() -> ScorePickConfig:
    """Return a ScorePickConfig with all default values."""
    return ScorePickConfig()


@pytest.fixture
def silent_config() -> ScorePickConfig:
    """Return a config with no logging output."""
    return ScorePickConfig(log_level="none")


@pytest.fixture
def diagnostic_config() -> ScorePickConfig:
    """Return a config with diagnostic mode and full logging enabled."""
    return ScorePickConfig(log_level="full", diagnostic_mode=True)


@pytest.fixture
def neutral_policy() -> GenerationPolicy:
    """Stochastic policy with every filter disabled and no repetition penalty."""
    return GenerationPolicy(temperature=1.0, top_k=0, top_p=1.0, repetition_penalty=1.0)


@pytest.fixture
def greedy_policy() -> GenerationPolicy:
    """Deterministic policy with no repetition penalty."""
    return GenerationPolicy(temperature=0.0, top_k=0, top_p=1.0, repetition_penalty=1.0)


@pytest.fixture
def half_draw() -> FixedSequenceSource:
    """Source that always draws 0.5."""
    return FixedSequenceSource([0.5])


@pytest.fixture
def seeded_source() -> SeededRandomSource:
    """Seeded source for reproducible stochastic runs."""
    return SeededRandomSource(seed=42)


@pytest.fixture
def ascending_scores() -> np.ndarray:
    """Scores 1..4: index 3 is the most likely."""
    return np.array([1.0, 2.0, 3.0, 4.0])


@pytest.fixture
def sample_scores_large_vocab() -> np.ndarray:
    """Random scores for a realistic vocabulary size (32000).

    Uses a fixed RNG seed for reproducibility.
    """
    rng = np.random.default_rng(seed=12345)
    return rng.standard_normal(32000).astype(np.float64)


@pytest.fixture
def axis_retriever() -> RankedRetriever:
    """Retriever holding the three unit axis vectors, ids '1'..'3'.

    '1' and '2' belong to group 'doc1', '3' to group 'doc2'.
    """
    retriever = RankedRetriever()
    retriever.add(Candidate.from_vector("1", [1.0, 0.0, 0.0], group_id="doc1", content="Hello"))
    retriever.add(Candidate.from_vector("2", [0.0, 1.0, 0.0], group_id="doc1", content="Bye"))
    retriever.add(Candidate.from_vector("3", [0.0, 0.0, 1.0], group_id="doc2", content="Hi"))
    return retriever
