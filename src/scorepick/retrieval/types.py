"""Data types for the retrieval subsystem."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class Candidate:
    """An indexed item: identifier plus optional embedding.

    Candidates are never mutated in place; update by removing and re-adding.

    Attributes:
        id: Opaque identifier (not required to be unique).
        embedding: Vector of fixed dimension, or None if not yet embedded.
        group_id: Tag shared by candidates removed together (e.g., a document id).
        content: Text payload carried through to ranked results.
        metadata: Read-only extra attributes; excluded from equality and hashing.
    """

    id: str
    embedding: tuple[float, ...] | None = None
    group_id: str = ""
    content: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self) -> None:
        if self.embedding is not None and not isinstance(self.embedding, tuple):
            object.__setattr__(self, "embedding", tuple(float(x) for x in self.embedding))
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def from_vector(
        cls,
        id: str,
        vector: Sequence[float],
        group_id: str = "",
        content: str = "",
        **metadata: Any,
    ) -> Candidate:
        return cls(
            id=id,
            embedding=tuple(float(x) for x in vector),
            group_id=group_id,
            content=content,
            metadata=metadata,
        )

    @property
    def dimension(self) -> int | None:
        """Embedding length, or None without an embedding."""
        return None if self.embedding is None else len(self.embedding)


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """A candidate paired with its similarity to one query."""

    candidate: Candidate
    score: float

    @property
    def id(self) -> str:
        return self.candidate.id


@dataclass(frozen=True, slots=True)
class RetrieverStats:
    """Counts describing a retriever's collection.

    Attributes:
        total: Stored candidates.
        embedded: Candidates carrying an embedding.
        groups: Distinct group ids.
    """

    total: int
    embedded: int
    groups: int
