# memory_graph

An embedded memory store for AI agents. Each memory carries text content, an
embedding vector, a cognitive type and free-form JSON metadata. Memories are
kept in a local SQLite file and can be linked by weighted, typed edges, so a
query can combine cosine-similarity search with a hop through the graph.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `memory_graph.models` — `Memory` and its cognitive types `Episodic`,
  `Semantic`, `Procedural` and `Emotional` (all subclasses of `MemoryType`),
  plus `Edge`, `InboundEdge` and `uuid7()`, which makes time-ordered version 7
  UUIDs. Every model has `to_dict()` / `from_dict()`; a memory type is
  serialised as `{"type": "<name>", "data": {...}}` and timestamps as RFC 3339
  strings in UTC. Malformed input raises `ValueError`.
- `memory_graph.index` — the abstract `VectorIndex` and `GraphIndex`
  interfaces, `cosine_similarity(a, b)` (0.0 when either vector has zero norm)
  and `SimpleVectorIndex`, an in-memory index that scores every stored vector
  on each search.
- `memory_graph.storage` — `StorageManager`, which stores memories and
  outbound and inbound edge lists in an SQLite file. It can be used as a
  context manager and implements `GraphIndex`.
- `memory_graph.query` — `Query` and its parts (`Filter`, `Search`,
  `VectorSearch`, `Traverse`, `RankBy`) and `QueryEngine`, which runs a query.
- `memory_graph.cli` — the demonstrations behind the `memory-graph` command.

## Using the library

```python
from memory_graph.models import Memory, Episodic, Semantic
from memory_graph.storage import StorageManager
from memory_graph.index import SimpleVectorIndex
from memory_graph.query import Query, Search, VectorSearch, Traverse, QueryEngine

with StorageManager("memory_graph.db") as storage:
    index = SimpleVectorIndex()

    coffee = Memory.create(
        "I love drinking coffee in the morning",
        [0.1, 0.2, 0.3],
        Episodic(participants=["Mark"], location="Kitchen"),
    )
    beans = Memory.create(
        "Coffee beans are best stored in airtight containers",
        [0.15, 0.25, 0.35],
        Semantic(confidence=0.95, source="Barista Handbook"),
    )

    for memory in (coffee, beans):
        storage.save_memory(memory)
        index.add(memory.id, memory.embedding)

    storage.add_edge(coffee.id, beans.id, "relates_to", 0.8)

    query = Query(
        search=Search(vector=VectorSearch(embedding=[0.1, 0.2, 0.3])),
        traverse=Traverse(direction="outbound"),
        limit=5,
    )
    for memory in QueryEngine(storage, index).execute(query):
        print(memory.content)
```

`Memory.create(content, embedding, memory_type)` gives a memory a fresh
`uuid7()` id, importance 1.0, decay rate 0.1 and an access count of 0.

`StorageManager` offers `save_memory`, `get_memory` (returns `None` for an
unknown id), `list_memories` (in id order), `add_edge` (writes the outbound
and inbound records in one transaction), `get_outbound_edges`,
`get_inbound_edges` and `get_neighbors` (`(target_id, weight)` pairs).

### How a query runs

1. **Vector search.** If the query has an embedding, the `limit` nearest
   memories by cosine similarity become candidates (10 when no limit is
   given), each scored by its similarity. Without an embedding, every stored
   memory is a candidate with score 1.0.
2. **Filter.** A `Filter` holds a `criteria` dictionary. Two keys are
   checked: `"id"` (a UUID string) and `"memory_type"` (a type name such as
   `"Episodic"`). Other keys are ignored.
3. **Traversal.** With `Traverse(direction=...)` set to `"outbound"`,
   `"inbound"` or `"both"`, the direct neighbours of each candidate are
   added. A neighbour not already scored gets half the score of the candidate
   it was reached from.
4. **Ranking.** Results are sorted by score, highest first, and cut to
   `limit`.

Queries can also be built from plain dictionaries with `Query.from_dict` and
turned back into them with `Query.to_dict`.

## Command line

The `memory-graph` command runs the bundled demonstrations:

```
memory-graph                  # same as "memory-graph basic"
memory-graph basic [--db memory_graph.db]
memory-graph chatbot [--db chatbot_memory.db]
memory-graph mars [--dataset data/mars_colony.json] [--db mars_colony.db]
memory-graph --help
```

- `basic` stores three memories, links two of them and prints the results of
  a hybrid query.
- `chatbot` stores a conversation turn and a fact derived from it, then
  recalls them for a new question.
- `mars` loads a JSON list of memories (in the `Memory.to_dict` format, at
  least four of them), links the first four into a chain and runs an outbound
  and an inbound scenario.

Each demo is also callable from Python as `run_basic_demo`,
`run_chatbot_demo` and `run_mars_demo` in `memory_graph.cli`, with an
optional `out` stream for the printed text; each returns the memories it
found. The command exits with status 1 and a message on standard error when a
file cannot be read or holds invalid data.

## What it does not do

- The vector index lives in memory only. `SimpleVectorIndex` is not saved to
  the database, so after reopening a store its memories must be added to a new
  index again.
- Traversal always goes a single hop and follows every edge type:
  `Traverse.depth` and `Traverse.edge_types` are carried with the query but
  not applied.
- `VectorSearch.text` and `VectorSearch.threshold` and `Query.rank_by` are
  carried with the query but do not change its results; the package computes
  no embeddings from text.
- There is no server or network interface; the store is used in-process.