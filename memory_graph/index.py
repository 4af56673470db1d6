"""Vector and graph index interfaces and a brute-force vector index."""

from __future__ import annotations

import math
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence


class VectorIndex(ABC):
    """Nearest-neighbour index over embeddings."""

    @abstractmethod
    def add(self, id: uuid.UUID, vector: Sequence[float]) -> None:
        """Register a vector under an id."""

    @abstractmethod
    def search(self, vector: Sequence[float], k: int) -> list[tuple[uuid.UUID, float]]:
        """Return up to k (id, score) pairs, best first."""


class GraphIndex(ABC):
    """Weighted directed graph of memory ids."""

    @abstractmethod
    def add_edge(
        self, source: uuid.UUID, target: uuid.UUID, relation_type: str, weight: float
    ) -> None:
        """Add an edge from source to target."""

    @abstractmethod
    def get_neighbors(self, node: uuid.UUID) -> list[tuple[uuid.UUID, float]]:
        """Return (target, weight) for every outgoing edge of node."""


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity; 0.0 when either vector has zero norm."""
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(x * x for x in b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (norm_a * norm_b)


class SimpleVectorIndex(VectorIndex):
    """In-memory index that scores every stored vector on each search."""

    def __init__(self) -> None:
        self._vectors: list[tuple[uuid.UUID, list[float]]] = []

    def add(self, id: uuid.UUID, vector: Sequence[float]) -> None:
        self._vectors.append((id, [float(x) for x in vector]))

    def search(self, vector: Sequence[float], k: int) -> list[tuple[uuid.UUID, float]]:
        scores = [(id_, cosine_similarity(vector, stored)) for id_, stored in self._vectors]
        scores.sort(key=lambda pair: pair[1], reverse=True)
        return scores[:k]

    def __len__(self) -> int:
        return len(self._vectors)