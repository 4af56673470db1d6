"""Persistent storage of memories and their edges in an SQLite file."""

from __future__ import annotations

import json
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any

from .index import GraphIndex
from .models import Edge, InboundEdge, Memory

_MEMORIES = "memories"
_EDGES_OUT = "edges_out"
_EDGES_IN = "edges_in"
_TABLES = (_MEMORIES, _EDGES_OUT, _EDGES_IN)


def _encode(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":")).encode("utf-8")


def _decode(raw: bytes) -> Any:
    return json.loads(bytes(raw).decode("utf-8"))


class StorageManager(GraphIndex):
    """Key-value store of memories plus outbound and inbound edge lists.

    Keys are the 16 big-endian bytes of each UUID, so iteration follows id order.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._conn = sqlite3.connect(os.fspath(path))
        with self._conn:
            for table in _TABLES:
                self._conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {table} "
                    "(key BLOB PRIMARY KEY, value BLOB NOT NULL)"
                )

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> StorageManager:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _get(self, table: str, key: uuid.UUID) -> Any | None:
        row = self._conn.execute(
            f"SELECT value FROM {table} WHERE key = ?", (key.bytes,)
        ).fetchone()
        return None if row is None else _decode(row[0])

    def _put(self, table: str, key: uuid.UUID, value: Any) -> None:
        self._conn.execute(
            f"INSERT OR REPLACE INTO {table} (key, value) VALUES (?, ?)",
            (key.bytes, _encode(value)),
        )

    def save_memory(self, memory: Memory) -> None:
        """Insert or overwrite a memory."""
        with self._conn:
            self._put(_MEMORIES, memory.id, memory.to_dict())

    def get_memory(self, id: uuid.UUID) -> Memory | None:
        data = self._get(_MEMORIES, id)
        return None if data is None else Memory.from_dict(data)

    def list_memories(self) -> list[Memory]:
        rows = self._conn.execute(f"SELECT value FROM {_MEMORIES} ORDER BY key")
        return [Memory.from_dict(_decode(value)) for (value,) in rows]

    def add_edge(
        self, source: uuid.UUID, target: uuid.UUID, relation_type: str, weight: float
    ) -> None:
        """Record an edge in both the outbound and inbound indexes atomically."""
        now = datetime.now(timezone.utc)
        outbound = Edge(
            target_id=target, relation_type=relation_type, weight=weight, created_at=now
        )
        inbound = InboundEdge(
            source_id=source, relation_type=relation_type, weight=weight, created_at=now
        )
        with self._conn:
            out_list = self._get(_EDGES_OUT, source) or []
            out_list.append(outbound.to_dict())
            self._put(_EDGES_OUT, source, out_list)

            in_list = self._get(_EDGES_IN, target) or []
            in_list.append(inbound.to_dict())
            self._put(_EDGES_IN, target, in_list)

    def get_outbound_edges(self, id: uuid.UUID) -> list[Edge]:
        return [Edge.from_dict(item) for item in self._get(_EDGES_OUT, id) or []]

    def get_inbound_edges(self, id: uuid.UUID) -> list[InboundEdge]:
        return [InboundEdge.from_dict(item) for item in self._get(_EDGES_IN, id) or []]

    def get_neighbors(self, node: uuid.UUID) -> list[tuple[uuid.UUID, float]]:
        return [(edge.target_id, edge.weight) for edge in self.get_outbound_edges(node)]