"""Command-line demonstrations of the memory graph."""

from __future__ import annotations

import argparse
import json
import os
import sqlite3
import sys
from typing import TextIO

from .index import SimpleVectorIndex
from .models import Episodic, Memory, Semantic
from .query import Query, QueryEngine, Search, Traverse, VectorSearch
from .storage import StorageManager

_MARS_MIN_MEMORIES = 4


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def _remember(storage: StorageManager, index: SimpleVectorIndex, memory: Memory) -> None:
    storage.save_memory(memory)
    index.add(memory.id, memory.embedding)


def run_basic_demo(
    db_path: str | os.PathLike[str] = "memory_graph.db", out: TextIO | None = None
) -> list[Memory]:
    """Store three memories, link two of them and run a hybrid query."""
    out = _stream(out)
    print("Initializing MemoryGraph...", file=out)

    with StorageManager(db_path) as storage:
        index = SimpleVectorIndex()

        memory1 = Memory.create(
            "I love drinking coffee in the morning",
            [0.1, 0.2, 0.3],
            Episodic(participants=["Mark"], location="Kitchen"),
        )
        memory2 = Memory.create(
            "Coffee beans are best stored in airtight containers",
            [0.15, 0.25, 0.35],
            Semantic(confidence=0.95, source="Barista Handbook"),
        )
        memory3 = Memory.create(
            "Rust is a systems programming language",
            [0.9, 0.8, 0.7],
            Semantic(confidence=1.0, source="Rust Book"),
        )

        print("Saving memories...", file=out)
        for memory in (memory1, memory2, memory3):
            _remember(storage, index, memory)

        print(f"Creating edge: {memory1.id} -> {memory2.id}", file=out)
        storage.add_edge(memory1.id, memory2.id, "relates_to", 0.8)

        print("\n--- Executing Hybrid Query ---", file=out)
        query = Query(
            search=Search(vector=VectorSearch(embedding=[0.1, 0.2, 0.3])),
            traverse=Traverse(direction="outbound", depth=1),
            limit=5,
        )
        results = QueryEngine(storage, index).execute(query)

    print(f"Found {len(results)} results:", file=out)
    for memory in results:
        print(f"- [{memory.memory_type!r}] {memory.content} (ID: {memory.id})", file=out)
    return results


def run_chatbot_demo(
    db_path: str | os.PathLike[str] = "chatbot_memory.db", out: TextIO | None = None
) -> list[Memory]:
    """Simulate a chatbot storing a conversation and recalling it later."""
    out = _stream(out)
    print("--- AI Chatbot Memory Example ---", file=out)

    with StorageManager(db_path) as storage:
        index = SimpleVectorIndex()
        print("Simulating conversation...", file=out)

        user_message = Memory.create(
            "User: Hi, I'm Alice. I love hiking.",
            [0.1, 0.8, 0.2],
            Episodic(participants=["Alice", "Bot"]),
        )
        _remember(storage, index, user_message)

        fact_hiking = Memory.create(
            "Alice likes hiking",
            [0.1, 0.9, 0.1],
            Semantic(confidence=0.95, source="user_conversation"),
        )
        fact_hiking.metadata = {"topic": "hobbies"}
        _remember(storage, index, fact_hiking)

        storage.add_edge(fact_hiking.id, user_message.id, "derived_from", 1.0)
        print("Stored conversation and extracted fact.", file=out)

        print("\n--- New User Query ---", file=out)
        print("User: 'What should I do this weekend?'", file=out)

        query = Query(
            search=Search(
                vector=VectorSearch(
                    text="weekend activity recommendation",
                    embedding=[0.2, 0.7, 0.3],
                    threshold=0.8,
                )
            ),
            traverse=Traverse(direction="outbound", edge_types=["derived_from"], depth=1),
            limit=5,
        )
        results = QueryEngine(storage, index).execute(query)

    print("\n--- Retrieved Context ---", file=out)
    if not results:
        print("No relevant memories found.", file=out)
        return results

    for number, memory in enumerate(results, start=1):
        kind = memory.memory_type
        if isinstance(kind, Semantic):
            line = f"{number}. [FACT] {memory.content} (Confidence: {kind.confidence})"
        elif isinstance(kind, Episodic):
            line = (
                f"{number}. [EVENT] {memory.content} "
                f"(Participants: {json.dumps(kind.participants)})"
            )
        else:
            line = f"{number}. {memory.content}"
        print(line, file=out)

    print("\nBot Response Generation:", file=out)
    print(
        f"Based on the fact '{results[0].content}', I suggest you go for a hike!",
        file=out,
    )
    return results


def _load_dataset(dataset_path: str | os.PathLike[str]) -> list[Memory]:
    with open(dataset_path, encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, list):
        raise ValueError("dataset must be a JSON list of memories")
    return [Memory.from_dict(item) for item in data]


def run_mars_demo(
    dataset_path: str | os.PathLike[str] = "data/mars_colony.json",
    db_path: str | os.PathLike[str] = "mars_colony.db",
    out: TextIO | None = None,
) -> tuple[list[Memory], list[Memory]]:
    """Load a colony dataset, link it into a chain and run two scenarios."""
    out = _stream(out)
    print("--- Mars Colony AI Simulation ---", file=out)

    with StorageManager(db_path) as storage:
        index = SimpleVectorIndex()

        print(f"Loading dataset from {os.fspath(dataset_path)}...", file=out)
        memories = _load_dataset(dataset_path)
        if len(memories) < _MARS_MIN_MEMORIES:
            raise ValueError(
                f"dataset must hold at least {_MARS_MIN_MEMORIES} memories, "
                f"got {len(memories)}"
            )

        for memory in memories:
            _remember(storage, index, memory)
        print(f"Ingested {len(memories)} memories.", file=out)

        anomaly, sector_info, physics, action = (m.id for m in memories[:4])
        storage.add_edge(anomaly, sector_info, "related_context", 0.9)
        storage.add_edge(sector_info, physics, "physical_principle", 0.85)
        storage.add_edge(physics, action, "potential_cause", 0.7)
        print("Knowledge Graph constructed.", file=out)

        engine = QueryEngine(storage, index)

        print("\n--- Scenario A: Root Cause Analysis ---", file=out)
        print("Query: 'thermal spike' + 2-hop traversal", file=out)
        query_a = Query(
            search=Search(
                vector=VectorSearch(text="thermal spike", embedding=[0.8, 0.1, 0.1])
            ),
            traverse=Traverse(direction="outbound", depth=2),
            limit=10,
        )
        results_a = engine.execute(query_a)
        for number, memory in enumerate(results_a, start=1):
            print(f"{number}. [{memory.id}] {memory.content} (Score: High)", file=out)

        print("\n--- Scenario B: Contextual Recall ---", file=out)
        print(
            "Query: 'Commander Lewis' + Inbound Traversal (What did this affect?)",
            file=out,
        )
        query_b = Query(
            search=Search(
                vector=VectorSearch(text="Commander Lewis", embedding=[0.1, 0.1, 0.9])
            ),
            traverse=Traverse(direction="inbound", depth=2),
            limit=10,
        )
        results_b = engine.execute(query_b)
        for number, memory in enumerate(results_b, start=1):
            print(f"{number}. [{memory.id}] {memory.content}", file=out)

    return results_a, results_b


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memory-graph", description="Run memory graph demonstrations."
    )
    commands = parser.add_subparsers(dest="command")

    basic = commands.add_parser("basic", help="store a few memories and query them")
    basic.add_argument("--db", default="memory_graph.db", help="database file")

    chatbot = commands.add_parser("chatbot", help="chatbot conversation memory")
    chatbot.add_argument("--db", default="chatbot_memory.db", help="database file")

    mars = commands.add_parser("mars", help="Mars colony knowledge graph")
    mars.add_argument("--db", default="mars_colony.db", help="database file")
    mars.add_argument(
        "--dataset", default="data/mars_colony.json", help="JSON list of memories"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point; runs the basic demo when no command is given."""
    args = _parser().parse_args(argv)
    try:
        if args.command == "chatbot":
            run_chatbot_demo(args.db)
        elif args.command == "mars":
            run_mars_demo(args.dataset, args.db)
        else:
            run_basic_demo(getattr(args, "db", "memory_graph.db"))
    except (OSError, ValueError, sqlite3.Error) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())