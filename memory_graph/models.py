"""Core data model: memories, their cognitive types and graph edges."""

from __future__ import annotations

import os
import re
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar

_DATETIME_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|z|[+-]\d{2}:\d{2})"
)


def uuid7() -> uuid.UUID:
    """Return a time-ordered version 7 UUID."""
    millis = time.time_ns() // 1_000_000
    random_bits = int.from_bytes(os.urandom(10), "big")
    value = ((millis & ((1 << 48) - 1)) << 80) | (random_bits & ((1 << 80) - 1))
    value = (value & ~(0xF << 76)) | (0x7 << 76)
    value = (value & ~(0x3 << 62)) | (0x2 << 62)
    return uuid.UUID(int=value)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _format_datetime(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(text: str) -> datetime:
    if not isinstance(text, str):
        raise ValueError(f"expected an RFC 3339 timestamp, got {text!r}")
    match = _DATETIME_RE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"invalid RFC 3339 timestamp: {text!r}")
    base, fraction, offset = match.groups()
    fraction = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if offset in ("Z", "z") else offset
    return datetime.fromisoformat(f"{base}.{fraction}{offset}").astimezone(timezone.utc)


def _parse_uuid(value: Any) -> uuid.UUID:
    if not isinstance(value, str):
        raise ValueError(f"expected a UUID string, got {value!r}")
    return uuid.UUID(value)


def _optional(value: Any, convert):
    return None if value is None else convert(value)


class MemoryType:
    """Cognitive classification of a memory; serialised as {"type", "data"}."""

    _variants: ClassVar[dict[str, type[MemoryType]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        MemoryType._variants[cls.__name__] = cls

    def _data(self) -> dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def _from_data(cls, data: dict[str, Any]) -> MemoryType:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {"type": type(self).__name__, "data": self._data()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemoryType:
        if not isinstance(data, dict):
            raise ValueError(f"memory type must be an object, got {data!r}")
        try:
            tag = data["type"]
            payload = data["data"]
        except KeyError as exc:
            raise ValueError(f"memory type is missing field {exc.args[0]!r}") from None
        variant = MemoryType._variants.get(tag)
        if variant is None:
            raise ValueError(f"unknown memory type {tag!r}")
        if cls is not MemoryType and not issubclass(variant, cls):
            raise ValueError(f"expected {cls.__name__}, got {tag!r}")
        if not isinstance(payload, dict):
            raise ValueError(f"memory type data must be an object, got {payload!r}")
        try:
            return variant._from_data(payload)
        except KeyError as exc:
            raise ValueError(f"{tag} is missing field {exc.args[0]!r}") from None


@dataclass
class Episodic(MemoryType):
    """Event memory ("I talked to Mark about coffee")."""

    participants: list[str]
    event_id: uuid.UUID | None = None
    location: str | None = None

    def _data(self) -> dict[str, Any]:
        return {
            "event_id": None if self.event_id is None else str(self.event_id),
            "participants": list(self.participants),
            "location": self.location,
        }

    @classmethod
    def _from_data(cls, data: dict[str, Any]) -> Episodic:
        return cls(
            participants=list(data["participants"]),
            event_id=_optional(data.get("event_id"), _parse_uuid),
            location=data.get("location"),
        )


@dataclass
class Semantic(MemoryType):
    """Fact memory ("Mark likes dark roast")."""

    confidence: float
    source: str

    def _data(self) -> dict[str, Any]:
        return {"confidence": self.confidence, "source": self.source}

    @classmethod
    def _from_data(cls, data: dict[str, Any]) -> Semantic:
        return cls(confidence=float(data["confidence"]), source=data["source"])


@dataclass
class Procedural(MemoryType):
    """Skill or procedure memory."""

    success_rate: float
    last_executed: datetime | None = None

    def _data(self) -> dict[str, Any]:
        return {
            "success_rate": self.success_rate,
            "last_executed": _optional(self.last_executed, _format_datetime),
        }

    @classmethod
    def _from_data(cls, data: dict[str, Any]) -> Procedural:
        return cls(
            success_rate=float(data["success_rate"]),
            last_executed=_optional(data.get("last_executed"), _parse_datetime),
        )


@dataclass
class Emotional(MemoryType):
    """Emotional valence memory."""

    valence: float
    arousal: float

    def _data(self) -> dict[str, Any]:
        return {"valence": self.valence, "arousal": self.arousal}

    @classmethod
    def _from_data(cls, data: dict[str, Any]) -> Emotional:
        return cls(valence=float(data["valence"]), arousal=float(data["arousal"]))


@dataclass
class Edge:
    """Outgoing relationship from a memory."""

    target_id: uuid.UUID
    relation_type: str
    weight: float
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": str(self.target_id),
            "relation_type": self.relation_type,
            "weight": self.weight,
            "created_at": _format_datetime(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Edge:
        try:
            return cls(
                target_id=_parse_uuid(data["target_id"]),
                relation_type=data["relation_type"],
                weight=float(data["weight"]),
                created_at=_parse_datetime(data["created_at"]),
            )
        except KeyError as exc:
            raise ValueError(f"edge is missing field {exc.args[0]!r}") from None


@dataclass
class InboundEdge:
    """Incoming relationship to a memory."""

    source_id: uuid.UUID
    relation_type: str
    weight: float
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_id": str(self.source_id),
            "relation_type": self.relation_type,
            "weight": self.weight,
            "created_at": _format_datetime(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InboundEdge:
        try:
            return cls(
                source_id=_parse_uuid(data["source_id"]),
                relation_type=data["relation_type"],
                weight=float(data["weight"]),
                created_at=_parse_datetime(data["created_at"]),
            )
        except KeyError as exc:
            raise ValueError(f"inbound edge is missing field {exc.args[0]!r}") from None


@dataclass
class Memory:
    """A single memory node with its embedding, metadata and edges."""

    id: uuid.UUID
    content: str
    embedding: list[float]
    memory_type: MemoryType
    metadata: dict[str, Any] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    last_accessed_at: datetime = field(default_factory=_utcnow)
    access_count: int = 0
    importance: float = 1.0
    decay_rate: float = 0.1

    @classmethod
    def create(cls, content: str, embedding, memory_type: MemoryType) -> Memory:
        """Build a fresh memory with a new id and default cognitive metrics."""
        now = _utcnow()
        return cls(
            id=uuid7(),
            content=content,
            embedding=[float(x) for x in embedding],
            memory_type=memory_type,
            created_at=now,
            last_accessed_at=now,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "content": self.content,
            "embedding": list(self.embedding),
            "memory_type": self.memory_type.to_dict(),
            "metadata": dict(self.metadata),
            "edges": [edge.to_dict() for edge in self.edges],
            "created_at": _format_datetime(self.created_at),
            "last_accessed_at": _format_datetime(self.last_accessed_at),
            "access_count": self.access_count,
            "importance": self.importance,
            "decay_rate": self.decay_rate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Memory:
        if not isinstance(data, dict):
            raise ValueError(f"memory must be an object, got {data!r}")
        try:
            access_count = int(data["access_count"])
            if access_count < 0:
                raise ValueError("access_count must not be negative")
            return cls(
                id=_parse_uuid(data["id"]),
                content=data["content"],
                embedding=[float(x) for x in data["embedding"]],
                memory_type=MemoryType.from_dict(data["memory_type"]),
                metadata=dict(data["metadata"]),
                edges=[Edge.from_dict(edge) for edge in data["edges"]],
                created_at=_parse_datetime(data["created_at"]),
                last_accessed_at=_parse_datetime(data["last_accessed_at"]),
                access_count=access_count,
                importance=float(data["importance"]),
                decay_rate=float(data["decay_rate"]),
            )
        except KeyError as exc:
            raise ValueError(f"memory is missing field {exc.args[0]!r}") from None