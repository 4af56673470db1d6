"""Hybrid queries over stored memories: vector search, filtering and graph expansion."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from .index import VectorIndex
from .models import Memory
from .storage import StorageManager

DEFAULT_SEARCH_LIMIT = 10
HOP_DECAY = 0.5

OUTBOUND = "outbound"
INBOUND = "inbound"
BOTH = "both"


def _require(data: dict[str, Any], key: str, owner: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"{owner} is missing field {key!r}") from None


def _object(value: Any, owner: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{owner} must be an object, got {value!r}")
    return value


def _optional_count(value: Any, name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def _optional_float(value: Any, name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return float(value)


def _optional_str(value: Any, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def _required_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def _optional_list(value: Any, name: str, convert) -> list | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list, got {value!r}")
    return [convert(item, name) for item in value]


def _float_item(value: Any, name: str) -> float:
    result = _optional_float(value, name)
    if result is None:
        raise ValueError(f"{name} must hold numbers only")
    return result


@dataclass
class Filter:
    """Post-filter criteria; "id" and "memory_type" keys are checked."""

    criteria: dict[str, Any] = field(default_factory=dict)

    def matches(self, memory: Memory) -> bool:
        """Tell whether a memory satisfies the recognised criteria."""
        id_value = self.criteria.get("id")
        if isinstance(id_value, str):
            try:
                wanted = uuid.UUID(id_value)
            except ValueError:
                wanted = None
            if wanted is not None and memory.id != wanted:
                return False

        type_value = self.criteria.get("memory_type")
        if isinstance(type_value, str):
            if memory.memory_type.to_dict()["type"] != type_value:
                return False

        return True


@dataclass
class VectorSearch:
    """Similarity search parameters; only the embedding drives the search."""

    text: str | None = None
    embedding: list[float] | None = None
    threshold: float | None = None


@dataclass
class Search:
    vector: VectorSearch


@dataclass
class Traverse:
    """Graph expansion of one hop: "inbound", "outbound" or "both".

    The edge types and depth are carried with the query but every traversal
    follows all edge types for a single hop.
    """

    direction: str
    edge_types: list[str] | None = None
    depth: int | None = None


@dataclass
class RankBy:
    formula: str


@dataclass
class Query:
    """A hybrid query; every part is optional."""

    filter: Filter | None = None
    search: Search | None = None
    traverse: Traverse | None = None
    rank_by: RankBy | None = None
    limit: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filter": None if self.filter is None else dict(self.filter.criteria),
            "search": None if self.search is None else _search_to_dict(self.search),
            "traverse": None if self.traverse is None else _traverse_to_dict(self.traverse),
            "rank_by": None if self.rank_by is None else {"formula": self.rank_by.formula},
            "limit": self.limit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Query:
        data = _object(data, "query")
        filter_data = data.get("filter")
        search_data = data.get("search")
        traverse_data = data.get("traverse")
        rank_data = data.get("rank_by")
        return cls(
            filter=None if filter_data is None else Filter(dict(_object(filter_data, "filter"))),
            search=None if search_data is None else _search_from_dict(search_data),
            traverse=None if traverse_data is None else _traverse_from_dict(traverse_data),
            rank_by=None if rank_data is None else _rank_from_dict(rank_data),
            limit=_optional_count(data.get("limit"), "limit"),
        )


def _search_to_dict(search: Search) -> dict[str, Any]:
    vector = search.vector
    return {
        "vector": {
            "text": vector.text,
            "embedding": None if vector.embedding is None else list(vector.embedding),
            "threshold": vector.threshold,
        }
    }


def _search_from_dict(data: Any) -> Search:
    data = _object(data, "search")
    vector = _object(_require(data, "vector", "search"), "vector search")
    return Search(
        vector=VectorSearch(
            text=_optional_str(vector.get("text"), "text"),
            embedding=_optional_list(vector.get("embedding"), "embedding", _float_item),
            threshold=_optional_float(vector.get("threshold"), "threshold"),
        )
    )


def _traverse_to_dict(traverse: Traverse) -> dict[str, Any]:
    return {
        "direction": traverse.direction,
        "edge_types": None if traverse.edge_types is None else list(traverse.edge_types),
        "depth": traverse.depth,
    }


def _traverse_from_dict(data: Any) -> Traverse:
    data = _object(data, "traverse")
    return Traverse(
        direction=_required_str(_require(data, "direction", "traverse"), "direction"),
        edge_types=_optional_list(data.get("edge_types"), "edge_types", _required_str),
        depth=_optional_count(data.get("depth"), "depth"),
    )


def _rank_from_dict(data: Any) -> RankBy:
    data = _object(data, "rank_by")
    return RankBy(formula=_required_str(_require(data, "formula", "rank_by"), "formula"))


class QueryEngine:
    """Runs queries against a storage manager and a vector index."""

    def __init__(self, storage: StorageManager, vector_index: VectorIndex) -> None:
        self._storage = storage
        self._vector_index = vector_index

    def execute(self, query: Query) -> list[Memory]:
        """Return matching memories, highest score first."""
        # Dicts keep insertion order and serve as ordered sets of ids.
        candidates: dict[uuid.UUID, None] = {}
        scores: dict[uuid.UUID, float] = {}

        embedding = query.search.vector.embedding if query.search is not None else None
        if embedding is not None:
            limit = query.limit if query.limit is not None else DEFAULT_SEARCH_LIMIT
            for id_, score in self._vector_index.search(embedding, limit):
                candidates[id_] = None
                scores[id_] = score
        else:
            for memory in self._storage.list_memories():
                candidates[memory.id] = None
                scores[memory.id] = 1.0

        if query.filter is not None:
            kept: dict[uuid.UUID, None] = {}
            for id_ in candidates:
                memory = self._storage.get_memory(id_)
                if memory is not None and query.filter.matches(memory):
                    kept[id_] = None
            candidates = kept

        if query.traverse is not None:
            candidates = self._expand(candidates, scores, query.traverse.direction)

        results = [
            memory
            for memory in map(self._storage.get_memory, candidates)
            if memory is not None
        ]
        results.sort(key=lambda memory: scores.get(memory.id, 0.0), reverse=True)

        if query.limit is not None:
            del results[query.limit:]
        return results

    def _expand(
        self,
        candidates: dict[uuid.UUID, None],
        scores: dict[uuid.UUID, float],
        direction: str,
    ) -> dict[uuid.UUID, None]:
        expanded = dict(candidates)
        for id_ in candidates:
            neighbours: list[uuid.UUID] = []
            if direction in (OUTBOUND, BOTH):
                neighbours.extend(edge.target_id for edge in self._storage.get_outbound_edges(id_))
            if direction in (INBOUND, BOTH):
                neighbours.extend(edge.source_id for edge in self._storage.get_inbound_edges(id_))
            parent_score = scores.get(id_, 1.0)
            for neighbour in neighbours:
                expanded[neighbour] = None
                scores.setdefault(neighbour, parent_score * HOP_DECAY)
        return expanded