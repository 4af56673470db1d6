import time
import uuid
from datetime import datetime, timezone

import pytest

from memory_graph.models import (
    Edge,
    Emotional,
    Episodic,
    InboundEdge,
    Memory,
    MemoryType,
    Procedural,
    Semantic,
    uuid7,
)


def test_uuid7_version_and_variant():
    value = uuid7()
    assert value.version == 7
    assert value.variant == uuid.RFC_4122


def test_uuid7_embeds_current_millis():
    before = time.time_ns() // 1_000_000
    value = uuid7()
    after = time.time_ns() // 1_000_000
    assert before <= value.int >> 80 <= after


def test_uuid7_is_unique():
    assert len({uuid7() for _ in range(200)}) == 200


def test_memory_create_defaults():
    mem = Memory.create("hello", [1, 2, 3], Semantic(confidence=0.5, source="book"))
    assert mem.content == "hello"
    assert mem.embedding == [1.0, 2.0, 3.0]
    assert mem.metadata == {}
    assert mem.edges == []
    assert mem.access_count == 0
    assert mem.importance == 1.0
    assert mem.decay_rate == 0.1
    assert mem.created_at == mem.last_accessed_at
    assert mem.created_at.tzinfo is not None
    assert mem.id.version == 7


def test_memory_type_tagged_layout():
    data = Semantic(confidence=0.95, source="Barista Handbook").to_dict()
    assert data == {
        "type": "Semantic",
        "data": {"confidence": 0.95, "source": "Barista Handbook"},
    }


def test_episodic_layout_with_nulls():
    data = Episodic(participants=["Alice", "Bot"]).to_dict()
    assert data["type"] == "Episodic"
    assert data["data"] == {
        "event_id": None,
        "participants": ["Alice", "Bot"],
        "location": None,
    }


@pytest.mark.parametrize(
    "variant",
    [
        Episodic(participants=["Mark"], event_id=uuid7(), location="Kitchen"),
        Episodic(participants=[]),
        Semantic(confidence=1.0, source="Rust Book"),
        Procedural(success_rate=0.25),
        Procedural(
            success_rate=0.75,
            last_executed=datetime(2024, 3, 2, 8, 0, 1, 500, tzinfo=timezone.utc),
        ),
        Emotional(valence=-0.5, arousal=0.9),
    ],
)
def test_memory_type_round_trip(variant):
    assert MemoryType.from_dict(variant.to_dict()) == variant


def test_memory_type_unknown_tag():
    with pytest.raises(ValueError):
        MemoryType.from_dict({"type": "Dreaming", "data": {}})


def test_memory_type_missing_field():
    with pytest.raises(ValueError):
        MemoryType.from_dict({"type": "Semantic", "data": {"confidence": 0.1}})


def test_memory_type_subclass_rejects_other_variant():
    with pytest.raises(ValueError):
        Semantic.from_dict(Emotional(valence=0.0, arousal=0.0).to_dict())


def test_edge_parses_nanosecond_timestamp():
    target = uuid7()
    edge = Edge.from_dict(
        {
            "target_id": str(target),
            "relation_type": "relates_to",
            "weight": 0.8,
            "created_at": "2024-05-01T12:30:45.123456789Z",
        }
    )
    assert edge.target_id == target
    assert edge.created_at == datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


def test_edge_round_trip():
    edge = Edge(target_id=uuid7(), relation_type="derived_from", weight=1.0)
    assert Edge.from_dict(edge.to_dict()) == edge
    assert edge.to_dict()["created_at"].endswith("Z")


def test_inbound_edge_round_trip():
    edge = InboundEdge(source_id=uuid7(), relation_type="potential_cause", weight=0.7)
    assert InboundEdge.from_dict(edge.to_dict()) == edge


def test_edge_bad_timestamp():
    with pytest.raises(ValueError):
        Edge.from_dict(
            {
                "target_id": str(uuid7()),
                "relation_type": "x",
                "weight": 1.0,
                "created_at": "yesterday",
            }
        )


def test_memory_round_trip():
    mem = Memory.create(
        "Alice likes hiking",
        [0.1, 0.9, 0.1],
        Semantic(confidence=0.95, source="user_conversation"),
    )
    mem.metadata = {"topic": "hobbies", "tags": [1, 2]}
    mem.edges.append(Edge(target_id=uuid7(), relation_type="derived_from", weight=1.0))
    assert Memory.from_dict(mem.to_dict()) == mem


def test_memory_from_dict_missing_field():
    data = Memory.create("x", [1.0], Emotional(valence=0.1, arousal=0.2)).to_dict()
    del data["importance"]
    with pytest.raises(ValueError):
        Memory.from_dict(data)


def test_memory_from_dict_bad_id():
    data = Memory.create("x", [1.0], Emotional(valence=0.1, arousal=0.2)).to_dict()
    data["id"] = "not-a-uuid"
    with pytest.raises(ValueError):
        Memory.from_dict(data)