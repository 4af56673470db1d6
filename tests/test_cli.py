import io
import json

import pytest

from memory_graph.cli import main, run_basic_demo, run_chatbot_demo, run_mars_demo
from memory_graph.models import Memory, Semantic
from memory_graph.storage import StorageManager


def _write_dataset(path, count=4):
    embeddings = [
        [0.8, 0.1, 0.1],
        [0.5, 0.5, 0.1],
        [0.3, 0.6, 0.2],
        [0.1, 0.1, 0.9],
    ]
    contents = [
        "Sensor anomaly in Sector 7",
        "Sector 7 houses fusion conduit",
        "Fusion conduits emit thermal spikes",
        "Commander Lewis authorized coolant flush",
    ]
    memories = [
        Memory.create(content, embedding, Semantic(confidence=0.9, source="log"))
        for content, embedding in list(zip(contents, embeddings))[:count]
    ]
    path.write_text(json.dumps([m.to_dict() for m in memories]), encoding="utf-8")
    return memories


def test_basic_demo_ranks_exact_match_first(tmp_path):
    out = io.StringIO()
    results = run_basic_demo(tmp_path / "basic.db", out)

    assert len(results) == 3
    assert results[0].content == "I love drinking coffee in the morning"
    assert results[-1].content == "Rust is a systems programming language"
    assert "Found 3 results:" in out.getvalue()


def test_basic_demo_persists_edge(tmp_path):
    db_path = tmp_path / "basic.db"
    results = run_basic_demo(db_path, io.StringIO())
    coffee = results[0]

    with StorageManager(db_path) as storage:
        neighbours = storage.get_neighbors(coffee.id)
        stored = storage.list_memories()

    assert len(stored) == 3
    assert [target for target, _ in neighbours] == [results[1].id]


def test_chatbot_demo_recalls_conversation_and_fact(tmp_path):
    out = io.StringIO()
    results = run_chatbot_demo(tmp_path / "chat.db", out)
    text = out.getvalue()

    assert {m.content for m in results} == {
        "User: Hi, I'm Alice. I love hiking.",
        "Alice likes hiking",
    }
    assert "[FACT] Alice likes hiking (Confidence: 0.95)" in text
    assert f"Based on the fact '{results[0].content}'" in text


def test_chatbot_demo_stores_metadata(tmp_path):
    db_path = tmp_path / "chat.db"
    run_chatbot_demo(db_path, io.StringIO())

    with StorageManager(db_path) as storage:
        facts = [m for m in storage.list_memories() if m.content == "Alice likes hiking"]

    assert len(facts) == 1
    assert facts[0].metadata == {"topic": "hobbies"}


def test_mars_demo_runs_both_scenarios(tmp_path):
    dataset = tmp_path / "mars.json"
    memories = _write_dataset(dataset)
    out = io.StringIO()

    results_a, results_b = run_mars_demo(dataset, tmp_path / "mars.db", out)

    assert results_a[0].id == memories[0].id
    assert results_b[0].id == memories[3].id
    assert {m.id for m in results_a} == {m.id for m in memories}
    assert "Ingested 4 memories." in out.getvalue()


def test_mars_demo_builds_chain_of_edges(tmp_path):
    dataset = tmp_path / "mars.json"
    memories = _write_dataset(dataset)
    db_path = tmp_path / "mars.db"
    run_mars_demo(dataset, db_path, io.StringIO())

    with StorageManager(db_path) as storage:
        chain = [storage.get_neighbors(m.id) for m in memories[:3]]
        inbound = storage.get_inbound_edges(memories[3].id)

    assert [pairs[0][0] for pairs in chain] == [m.id for m in memories[1:4]]
    assert [edge.relation_type for edge in inbound] == ["potential_cause"]


def test_mars_demo_rejects_short_dataset(tmp_path):
    dataset = tmp_path / "mars.json"
    _write_dataset(dataset, count=3)
    with pytest.raises(ValueError):
        run_mars_demo(dataset, tmp_path / "mars.db", io.StringIO())


def test_mars_demo_rejects_non_list_dataset(tmp_path):
    dataset = tmp_path / "mars.json"
    dataset.write_text(json.dumps({"memories": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        run_mars_demo(dataset, tmp_path / "mars.db", io.StringIO())


def test_main_basic_command(tmp_path, capsys):
    code = main(["basic", "--db", str(tmp_path / "basic.db")])
    captured = capsys.readouterr()

    assert code == 0
    assert "Initializing MemoryGraph..." in captured.out


def test_main_chatbot_command(tmp_path, capsys):
    code = main(["chatbot", "--db", str(tmp_path / "chat.db")])
    captured = capsys.readouterr()

    assert code == 0
    assert "--- AI Chatbot Memory Example ---" in captured.out


def test_main_mars_missing_dataset_reports_error(tmp_path, capsys):
    code = main(
        ["mars", "--db", str(tmp_path / "mars.db"), "--dataset", str(tmp_path / "none.json")]
    )
    captured = capsys.readouterr()

    assert code == 1
    assert captured.err.startswith("Error:")